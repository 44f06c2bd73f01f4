"""Interface of the preset summary and job store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import Job, PresetSummary


@runtime_checkable
class Store(Protocol):
    """Key-value store for preset summaries and job routing records.

    ``create_preset_summary`` must be atomic per name: when two writers race,
    exactly one succeeds and the other gets ``PresetAlreadyExistsError``.
    """

    async def create_preset_summary(self, summary: PresetSummary) -> None:
        """Store ``summary``; raise ``PresetAlreadyExistsError`` if the name is taken."""

    async def get_preset_summary(self, name: str) -> PresetSummary:
        """Return the summary; raise ``PresetNotFoundError`` if absent."""

    async def delete_preset_summary(self, name: str) -> None:
        """Remove the summary; raise ``PresetNotFoundError`` if absent."""

    async def save_job(self, job: Job) -> None:
        """Store ``job`` under its ID."""

    async def get_job(self, job_id: str) -> Job:
        """Return the job; raise ``JobNotFoundError`` if absent."""

    async def close(self) -> None:
        """Release connections."""
