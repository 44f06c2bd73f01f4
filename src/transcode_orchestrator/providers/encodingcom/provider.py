"""encoding.com transcoding provider."""

from __future__ import annotations

import logging
from typing import Any

from ...config import Settings
from ...errors import ConfigurationError, PresetNotFoundError, ProviderUnhealthyError
from ...models import (
    Capabilities,
    JobOutput,
    JobStatus,
    JobStatusValue,
    OutputFile,
    Preset,
    PresetSummary,
    TranscodeRequest,
    join_destination,
    output_filename,
)
from ...status import ENCODINGCOM_STATUS
from ...storage import Store
from ..base import TranscodeProvider
from ..configuration import ConfigurationManager
from .client import EncodingComClient

logger = logging.getLogger(__name__)

NAME = "encoding.com"

VIDEO_CODECS = {
    "h264": "libx264",
    "h265": "libx265",
    "hevc": "libx265",
    "vp8": "libvpx",
    "vp9": "libvpx-vp9",
}

AUDIO_CODECS = {
    "aac": "dolby_aac",
    "opus": "libopus",
    "vorbis": "libvorbis",
    "mp3": "libmp3lame",
}

CONTAINER_OUTPUTS = {
    "m3u8": "advanced_hls",
    "ts": "advanced_hls",
}


def preset_format(preset: Preset) -> dict[str, Any]:
    """Build the encoding.com ``format`` block for ``preset``."""
    fmt: dict[str, Any] = {
        "output": CONTAINER_OUTPUTS.get(preset.container, preset.container),
        "two_pass": "yes" if preset.two_pass else "no",
    }

    video = preset.video
    if video.codec:
        fmt["video_codec"] = VIDEO_CODECS.get(video.codec.lower(), video.codec)
    if video.profile:
        fmt["profile"] = video.profile.lower()
    if video.width or video.height:
        fmt["size"] = f"{video.width or 0}x{video.height or 0}"
    if video.bitrate:
        fmt["bitrate"] = f"{video.bitrate // 1000}k"
    if video.gop_size:
        fmt["keyframe"] = str(int(video.gop_size))
    if preset.rate_control:
        fmt["cbr"] = "yes" if preset.rate_control.upper() == "CBR" else "no"

    audio = preset.audio
    if audio.codec:
        fmt["audio_codec"] = AUDIO_CODECS.get(audio.codec.lower(), audio.codec)
    if audio.bitrate:
        fmt["audio_bitrate"] = f"{audio.bitrate // 1000}k"

    return fmt


class EncodingComConfigurator:
    """Saves presets as encoding.com user presets."""

    def __init__(self, client: EncodingComClient):
        self.client = client

    async def create(self, preset: Preset) -> PresetSummary:
        remote_name = await self.client.save_preset(preset.name, preset_format(preset))
        return PresetSummary(
            name=preset.name,
            container=preset.container,
            video_codec=preset.video.codec,
            video_config_id=remote_name,
            audio_codec=preset.audio.codec,
        )

    async def delete(self, summary: PresetSummary) -> None:
        await self.client.delete_preset(summary.video_config_id)


def _progress(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _frame_size(value: Any) -> tuple[int, int]:
    """Parse a ``WxH`` frame size; ``(0, 0)`` when absent or malformed."""
    width, sep, height = str(value or "").partition("x")
    if not sep:
        return 0, 0
    return _int(width), _int(height)


def _formats(body: dict[str, Any]) -> list[dict[str, Any]]:
    formats = body.get("format") or []
    if isinstance(formats, dict):
        formats = [formats]
    return formats


class EncodingComProvider(TranscodeProvider):
    """Provider backed by the encoding.com media API."""

    name = NAME

    def __init__(self, client: EncodingComClient, store: Store, destination: str):
        self.client = client
        self.destination = destination
        self.configurations = ConfigurationManager(NAME, store, EncodingComConfigurator(client))

    async def transcode(self, request: TranscodeRequest) -> JobStatus:
        formats = []
        for preset in request.presets:
            remote_preset = preset.provider_mapping.get(NAME)
            if not remote_preset:
                raise PresetNotFoundError(preset.name)
            formats.append(
                {
                    "output": [remote_preset],
                    "destination": [
                        join_destination(self.destination, output_filename(request.source_media, preset))
                    ],
                }
            )

        body = await self.client.add_media([request.source_media], formats)

        return JobStatus(
            provider_job_id=str(body["MediaID"]),
            provider_name=NAME,
            status=JobStatusValue.QUEUED,
            status_message=body.get("message", ""),
            output=JobOutput(destination=self.destination),
        )

    async def job_status(self, provider_job_id: str) -> JobStatus:
        body = await self.client.get_status(provider_job_id)
        formats = _formats(body)
        status = ENCODINGCOM_STATUS(body.get("status"))

        destination_status = [
            {
                "name": fmt.get("destination"),
                "status": fmt.get("destination_status"),
            }
            for fmt in formats
            if fmt.get("destination")
        ]

        files: list[OutputFile] = []
        if status == JobStatusValue.FINISHED:
            for fmt in formats:
                destination = fmt.get("destination")
                if not destination:
                    continue
                # "size" is the frame size; the byte count is "convertedsize"
                width, height = _frame_size(fmt.get("size"))
                files.append(
                    OutputFile(
                        path=destination,
                        container=fmt.get("output", "") or "",
                        video_codec=fmt.get("video_codec", "") or "",
                        width=width,
                        height=height,
                        file_size=_int(fmt.get("convertedsize")),
                    )
                )

        return JobStatus(
            provider_job_id=provider_job_id,
            provider_name=NAME,
            status=status,
            status_message=body.get("error") or "",
            provider_status={
                "progress": _progress(body.get("progress")),
                "sourcefile": body.get("sourcefile"),
                "timeleft": body.get("time_left"),
                "created": body.get("created"),
                "started": body.get("started"),
                "finished": body.get("finished"),
                "destinationStatus": destination_status,
            },
            output=JobOutput(destination=self.destination, files=files),
        )

    async def cancel_job(self, provider_job_id: str) -> None:
        await self.client.cancel_media(provider_job_id)
        logger.info(f"Cancelled encoding.com media {provider_job_id}")

    async def healthcheck(self) -> None:
        api_status = await self.client.api_status()
        if not api_status.ok:
            raise ProviderUnhealthyError(
                f"Status code: {api_status.status_code}.\n"
                f"Incident: {api_status.incident}\n"
                f"Status: {api_status.status}"
            )

    async def create_preset(self, preset: Preset) -> str:
        return await self.configurations.create(preset)

    async def get_preset(self, name: str) -> PresetSummary:
        return await self.configurations.get(name)

    async def delete_preset(self, name: str) -> None:
        await self.configurations.delete(name)

    def capabilities(self) -> Capabilities:
        return Capabilities(
            input_formats=["prores", "h264"],
            output_formats=["mp4", "hls", "webm"],
            destinations=["akamai", "s3"],
        )


def encodingcom_factory(settings: Settings, store: Store) -> EncodingComProvider:
    """Build the encoding.com provider; requires a user ID and user key."""
    if not settings.encodingcom_user_id or not settings.encodingcom_user_key:
        raise ConfigurationError("encoding.com requires ENCODINGCOM_USER_ID and ENCODINGCOM_USER_KEY")

    client = EncodingComClient(
        settings.encodingcom_endpoint,
        settings.encodingcom_user_id,
        settings.encodingcom_user_key,
        status_endpoint=settings.encodingcom_status_endpoint,
        timeout=settings.remote_timeout_seconds,
    )
    return EncodingComProvider(client, store, settings.encodingcom_destination)
