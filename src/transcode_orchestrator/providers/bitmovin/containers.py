"""Muxing assembly and output enrichment for Bitmovin encodings."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any

from ...errors import UnsupportedContainerError
from ...models import JobOutput, JobStatus, OutputFile
from ...pagination import DEFAULT_PAGE_SIZE, collect_all
from .client import BitmovinClient

logger = logging.getLogger(__name__)

# Preset container -> Bitmovin muxing type
CONTAINER_MUXINGS = {
    "mp4": "mp4",
    "webm": "progressive-webm",
    "mov": "progressive-mov",
    "m3u8": "progressive-ts",
    "ts": "progressive-ts",
}

# Muxing types whose outputs are reported on finished encodings, in report order
ENRICHED_MUXINGS = ("mp4", "progressive-webm", "progressive-mov", "progressive-ts")


@dataclass
class AssemblerConfig:
    """Per-output parameters for building one muxing."""

    encoding_id: str
    output_id: str
    dest_path: str
    output_filename: str
    video_stream_id: str
    audio_stream_id: str = ""


def muxing_kind(container: str) -> str:
    kind = CONTAINER_MUXINGS.get(container.lower())
    if kind is None:
        raise UnsupportedContainerError(container, "bitmovin")
    return kind


class MuxingAssembler:
    """Creates one muxing of a fixed type on an encoding."""

    def __init__(self, client: BitmovinClient, kind: str):
        self.client = client
        self.kind = kind

    def payload(self, cfg: AssemblerConfig) -> dict[str, Any]:
        streams = [{"streamId": cfg.video_stream_id}]
        if cfg.audio_stream_id:
            streams.append({"streamId": cfg.audio_stream_id})

        # Filename keeps the preset directory; enrichment reports destination + filename
        return {
            "filename": cfg.output_filename,
            "streams": streams,
            "streamConditionsMode": "DROP_STREAM",
            "outputs": [
                {
                    "outputId": cfg.output_id,
                    "outputPath": cfg.dest_path,
                    "acl": [{"permission": "PUBLIC_READ"}],
                }
            ],
        }

    async def assemble(self, cfg: AssemblerConfig) -> str:
        """Create the muxing and return its ID."""
        return await self.client.create_muxing(cfg.encoding_id, self.kind, self.payload(cfg))


def _int(value: Any) -> int:
    if value is None:
        return 0
    return int(value)


class MuxingEnricher:
    """Reports the files produced by every muxing of one type."""

    def __init__(self, client: BitmovinClient, kind: str, page_size: int = DEFAULT_PAGE_SIZE):
        self.client = client
        self.kind = kind
        self.page_size = page_size

    async def output_files(self, encoding_id: str, destination: str) -> list[OutputFile]:
        """
        List the muxings of the encoding and describe each one's output.

        Information is fetched one muxing at a time, in listing order. Any
        failure aborts the call; no partial list is returned.
        """

        async def fetch_page(offset: int, limit: int):
            return await self.client.list_muxings(encoding_id, self.kind, offset, limit)

        muxings = await collect_all(
            fetch_page, page_size=self.page_size, description=f"{self.kind} muxings"
        )

        files: list[OutputFile] = []
        for muxing in muxings:
            info = await self.client.muxing_information(encoding_id, self.kind, muxing["id"])

            width = height = 0
            video_codec = ""
            video_tracks = info.get("videoTracks") or []
            if video_tracks:
                track = video_tracks[0]
                width = _int(track.get("frameWidth"))
                height = _int(track.get("frameHeight"))
                video_codec = track.get("codec") or ""

            files.append(
                OutputFile(
                    path=destination + (muxing.get("filename") or ""),
                    container=info.get("containerFormat") or "",
                    video_codec=video_codec,
                    width=width,
                    height=height,
                    file_size=_int(info.get("fileSize")),
                )
            )

        return files


class OutputEnricher:
    """Fills a job status with the output files of every muxing type."""

    def __init__(self, client: BitmovinClient, kinds: tuple[str, ...] = ENRICHED_MUXINGS):
        self.enrichers = [MuxingEnricher(client, kind) for kind in kinds]

    async def enrich(self, status: JobStatus) -> JobStatus:
        """Return a copy of ``status`` whose output lists every produced file."""
        files = list(status.output.files)
        for enricher in self.enrichers:
            files.extend(
                await enricher.output_files(status.provider_job_id, status.output.destination)
            )

        logger.debug(f"Found {len(files)} output files for encoding {status.provider_job_id}")
        return dataclasses.replace(
            status,
            output=JobOutput(destination=status.output.destination, files=files),
        )
