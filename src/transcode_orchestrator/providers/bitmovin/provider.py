"""Bitmovin transcoding provider."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from ...config import Settings
from ...errors import ConfigurationError, PresetNotFoundError, TranscodeOrchestratorError
from ...models import (
    Capabilities,
    JobOutput,
    JobStatus,
    JobStatusValue,
    Preset,
    PresetSummary,
    TranscodeRequest,
    output_filename,
)
from ...status import BITMOVIN_STATUS
from ...storage import Store
from ..base import TranscodeProvider
from ..configuration import ConfigurationManager
from .client import BitmovinClient
from .codecs import BitmovinConfigurator
from .containers import AssemblerConfig, MuxingAssembler, OutputEnricher, muxing_kind

logger = logging.getLogger(__name__)

NAME = "bitmovin"


class BitmovinProvider(TranscodeProvider):
    """Provider backed by the Bitmovin encoding API."""

    name = NAME

    def __init__(
        self,
        client: BitmovinClient,
        store: Store,
        *,
        destination: str,
        encoding_region: str = "AWS_US_EAST_1",
        encoder_version: str = "STABLE",
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_region: str = "us-east-1",
    ):
        self.client = client
        self.destination = destination.rstrip("/") + "/" if destination else ""
        self.encoding_region = encoding_region
        self.encoder_version = encoder_version
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.aws_region = aws_region
        self.configurations = ConfigurationManager(NAME, store, BitmovinConfigurator(client))
        self.enricher = OutputEnricher(client)

    def _s3_credentials(self, bucket: str) -> dict[str, Any]:
        return {
            "bucketName": bucket,
            "accessKey": self.aws_access_key_id,
            "secretKey": self.aws_secret_access_key,
            "cloudRegion": self.aws_region.upper().replace("-", "_"),
        }

    async def _create_input(self, source_media: str) -> tuple[str, str]:
        """Create an input for the source; return ``(input_id, input_path)``."""
        source = urlparse(source_media)
        if source.scheme in ("http", "https"):
            input_id = await self.client.create_input(source.scheme, {"host": source.netloc})
            return input_id, source.path
        if source.scheme == "s3":
            input_id = await self.client.create_input("s3", self._s3_credentials(source.netloc))
            return input_id, source.path.lstrip("/")
        raise TranscodeOrchestratorError(f"unsupported source media: {source_media}")

    async def _create_output(self) -> tuple[str, str]:
        """Create the S3 output for the destination; return ``(output_id, base_path)``."""
        destination = urlparse(self.destination)
        output_id = await self.client.create_output("s3", self._s3_credentials(destination.netloc))
        return output_id, destination.path.lstrip("/")

    async def _resolve_presets(self, presets: list[Preset]) -> list[tuple[Preset, PresetSummary, str]]:
        resolved = []
        for preset in presets:
            summary_name = preset.provider_mapping.get(NAME)
            if not summary_name:
                raise PresetNotFoundError(preset.name)
            summary = await self.configurations.get(summary_name)
            kind = muxing_kind(summary.container or preset.container)
            resolved.append((preset, summary, kind))
        return resolved

    async def _create_stream(self, encoding_id: str, config_id: str, input_id: str, input_path: str) -> str:
        return await self.client.create_stream(
            encoding_id,
            {
                "codecConfigId": config_id,
                "inputStreams": [
                    {"inputId": input_id, "inputPath": input_path, "selectionMode": "AUTO"}
                ],
            },
        )

    async def transcode(self, request: TranscodeRequest) -> JobStatus:
        # Every preset must resolve before anything is created remotely
        resolved = await self._resolve_presets(request.presets)

        encoding_id = await self.client.create_encoding(
            request.job_id or request.source_media, self.encoding_region, self.encoder_version
        )
        input_id, input_path = await self._create_input(request.source_media)
        output_id, dest_path = await self._create_output()

        for preset, summary, kind in resolved:
            video_stream_id = await self._create_stream(
                encoding_id, summary.video_config_id, input_id, input_path
            )
            audio_stream_id = ""
            if summary.audio_config_id:
                audio_stream_id = await self._create_stream(
                    encoding_id, summary.audio_config_id, input_id, input_path
                )

            await MuxingAssembler(self.client, kind).assemble(
                AssemblerConfig(
                    encoding_id=encoding_id,
                    output_id=output_id,
                    dest_path=dest_path,
                    output_filename=output_filename(request.source_media, preset),
                    video_stream_id=video_stream_id,
                    audio_stream_id=audio_stream_id,
                )
            )

        await self.client.start_encoding(encoding_id)
        logger.info(f"Started Bitmovin encoding {encoding_id} with {len(resolved)} outputs")

        return JobStatus(
            provider_job_id=encoding_id,
            provider_name=NAME,
            status=JobStatusValue.QUEUED,
            output=JobOutput(destination=self.destination),
        )

    async def job_status(self, provider_job_id: str) -> JobStatus:
        result = await self.client.encoding_status(provider_job_id)
        status = BITMOVIN_STATUS(result.get("status"))
        messages = result.get("messages") or []

        status_message = ""
        if status == JobStatusValue.FAILED:
            status_message = "\n".join(
                m.get("text", "") for m in messages if m.get("type") == "ERROR"
            )

        job_status = JobStatus(
            provider_job_id=provider_job_id,
            provider_name=NAME,
            status=status,
            status_message=status_message,
            provider_status={
                "progress": result.get("progress"),
                "createdAt": result.get("createdAt"),
                "eta": result.get("eta"),
                "messages": messages,
            },
            output=JobOutput(destination=self.destination),
        )

        if status == JobStatusValue.FINISHED:
            job_status = await self.enricher.enrich(job_status)

        return job_status

    async def cancel_job(self, provider_job_id: str) -> None:
        await self.client.stop_encoding(provider_job_id)
        logger.info(f"Stopped Bitmovin encoding {provider_job_id}")

    async def healthcheck(self) -> None:
        await self.client.account_information()

    async def create_preset(self, preset: Preset) -> str:
        return await self.configurations.create(preset)

    async def get_preset(self, name: str) -> PresetSummary:
        return await self.configurations.get(name)

    async def delete_preset(self, name: str) -> None:
        await self.configurations.delete(name)

    def capabilities(self) -> Capabilities:
        return Capabilities(
            input_formats=["prores", "h264"],
            output_formats=["mp4", "mov", "webm", "hls"],
            destinations=["s3"],
        )


def bitmovin_factory(settings: Settings, store: Store) -> BitmovinProvider:
    """Build the Bitmovin provider; requires an API key and an S3 destination."""
    if not settings.bitmovin_api_key:
        raise ConfigurationError("bitmovin requires BITMOVIN_API_KEY")
    if settings.bitmovin_destination and urlparse(settings.bitmovin_destination).scheme != "s3":
        raise ConfigurationError("BITMOVIN_DESTINATION must be an s3:// URL")

    client = BitmovinClient(
        settings.bitmovin_api_key,
        endpoint=settings.bitmovin_endpoint,
        timeout=settings.remote_timeout_seconds,
    )
    return BitmovinProvider(
        client,
        store,
        destination=settings.bitmovin_destination,
        encoding_region=settings.bitmovin_encoding_region,
        encoder_version=settings.bitmovin_encoder_version,
        aws_access_key_id=settings.bitmovin_aws_access_key_id,
        aws_secret_access_key=settings.bitmovin_aws_secret_access_key,
        aws_region=settings.bitmovin_aws_region,
    )
