"""Domain values shared by providers, stores and the API."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from urllib.parse import urlparse


class JobStatusValue(str, Enum):
    """Canonical status of a transcode job."""
    QUEUED = "queued"
    STARTED = "started"
    FINISHED = "finished"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class VideoPreset:
    codec: str = ""
    profile: str = ""
    profile_level: str = ""
    width: int | None = None
    height: int | None = None
    bitrate: int | None = None  # bits per second
    gop_size: float | None = None
    gop_mode: str = ""  # frames or seconds
    interlace_mode: str = ""


@dataclass
class AudioPreset:
    codec: str = ""
    bitrate: int | None = None  # bits per second


@dataclass
class OutputOptions:
    extension: str = ""


@dataclass(frozen=True)
class Preset:
    """Caller-supplied encode intent.

    ``provider_mapping`` maps a provider name to the identifier that provider
    knows the preset by (an encoding.com preset, a stored Bitmovin summary).
    """

    name: str
    container: str = ""
    description: str = ""
    rate_control: str = ""
    two_pass: bool = False
    video: VideoPreset = field(default_factory=VideoPreset)
    audio: AudioPreset = field(default_factory=AudioPreset)
    output_options: OutputOptions = field(default_factory=OutputOptions)
    provider_mapping: dict[str, str] = field(default_factory=dict)

    @property
    def extension(self) -> str:
        return self.output_options.extension or self.container


@dataclass
class PresetSummary:
    """Local record of the remote configs created for a preset."""

    name: str
    container: str = ""
    video_codec: str = ""
    video_config_id: str = ""
    audio_codec: str = ""
    audio_config_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "container": self.container,
            "videoCodec": self.video_codec,
            "videoConfigId": self.video_config_id,
            "audioCodec": self.audio_codec,
            "audioConfigId": self.audio_config_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PresetSummary":
        return cls(
            name=data["name"],
            container=data.get("container", ""),
            video_codec=data.get("videoCodec", ""),
            video_config_id=data.get("videoConfigId", ""),
            audio_codec=data.get("audioCodec", ""),
            audio_config_id=data.get("audioConfigId", ""),
        )


@dataclass
class Job:
    """Routing record for a job submitted to a provider.

    Only identifies the remote job; its status is always read from the
    provider.
    """

    id: str
    provider_name: str
    provider_job_id: str = ""
    source_media: str = ""
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "providerName": self.provider_name,
            "providerJobId": self.provider_job_id,
            "sourceMedia": self.source_media,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        return cls(
            id=data["id"],
            provider_name=data["providerName"],
            provider_job_id=data.get("providerJobId", ""),
            source_media=data.get("sourceMedia", ""),
            created_at=data.get("createdAt", ""),
        )


@dataclass
class OutputFile:
    path: str
    container: str = ""
    video_codec: str = ""
    width: int = 0
    height: int = 0
    file_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "container": self.container,
            "videoCodec": self.video_codec,
            "width": self.width,
            "height": self.height,
            "fileSize": self.file_size,
        }


@dataclass
class JobOutput:
    destination: str = ""
    files: list[OutputFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "destination": self.destination,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass
class JobStatus:
    """Canonical snapshot of a remote job, rebuilt on every query."""

    provider_job_id: str
    provider_name: str
    status: JobStatusValue = JobStatusValue.UNKNOWN
    status_message: str = ""
    provider_status: dict[str, Any] = field(default_factory=dict)
    output: JobOutput = field(default_factory=JobOutput)

    def to_dict(self) -> dict[str, Any]:
        return {
            "providerJobId": self.provider_job_id,
            "providerName": self.provider_name,
            "status": self.status.value,
            "statusMessage": self.status_message,
            "providerStatus": self.provider_status,
            "output": self.output.to_dict(),
        }


@dataclass
class Capabilities:
    input_formats: list[str] = field(default_factory=list)
    output_formats: list[str] = field(default_factory=list)
    destinations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.input_formats,
            "output": self.output_formats,
            "destinations": self.destinations,
        }


@dataclass
class TranscodeRequest:
    """A job as handed to a provider."""

    source_media: str
    presets: list[Preset]
    job_id: str = ""


def utc_now() -> str:
    return datetime.utcnow().isoformat() + "Z"


def output_filename(source_media: str, preset: Preset) -> str:
    """Relative output path for ``preset``: ``<preset name>/<source stem>.<ext>``.

    The ``ts`` extension is written as ``m3u8`` since it produces an HLS
    playlist.
    """
    source_path = urlparse(source_media).path or source_media
    stem = posixpath.splitext(posixpath.basename(source_path))[0]
    extension = preset.extension
    if extension == "ts":
        extension = "m3u8"
    return f"{preset.name}/{stem}.{extension}"


def join_destination(destination: str, relative: str) -> str:
    if not destination:
        return relative
    return destination.rstrip("/") + "/" + relative.lstrip("/")
