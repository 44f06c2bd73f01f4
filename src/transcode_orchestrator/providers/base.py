"""Capability contract implemented by every transcoding provider."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import Capabilities, JobStatus, Preset, PresetSummary, TranscodeRequest


class TranscodeProvider(ABC):
    """A cloud encoding backend.

    Methods may be called concurrently for different jobs and presets.
    Concurrent calls for the same preset name or job ID are not serialized.
    """

    name: str = ""

    @abstractmethod
    async def transcode(self, request: TranscodeRequest) -> JobStatus:
        """Submit a job and return its initial status."""

    @abstractmethod
    async def job_status(self, provider_job_id: str) -> JobStatus:
        """Return the current status of a job, including its outputs."""

    @abstractmethod
    async def cancel_job(self, provider_job_id: str) -> None:
        """Ask the provider to stop a job."""

    @abstractmethod
    async def healthcheck(self) -> None:
        """Raise if the provider cannot currently accept work."""

    @abstractmethod
    async def create_preset(self, preset: Preset) -> str:
        """Create the provider-side configuration for ``preset``; return its name."""

    @abstractmethod
    async def get_preset(self, name: str) -> PresetSummary:
        """Return the stored summary for a preset."""

    @abstractmethod
    async def delete_preset(self, name: str) -> None:
        """Remove the provider-side configuration and its summary."""

    @abstractmethod
    def capabilities(self) -> Capabilities:
        """Describe supported inputs, outputs and destinations."""
