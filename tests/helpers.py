"""Shared test helpers (in-memory store, canned provider)."""

from __future__ import annotations

import asyncio

from transcode_orchestrator.errors import (
    JobNotFoundError,
    PresetAlreadyExistsError,
    PresetNotFoundError,
    StoreError,
)
from transcode_orchestrator.models import (
    Capabilities,
    Job,
    JobOutput,
    JobStatus,
    JobStatusValue,
    Preset,
    PresetSummary,
    TranscodeRequest,
)
from transcode_orchestrator.providers.base import TranscodeProvider


class InMemoryStore:
    """Dict-backed store with switchable failures."""

    def __init__(self):
        self.summaries: dict[str, dict] = {}
        self.jobs: dict[str, dict] = {}
        self.fail_create = False
        self.fail_delete = False
        self.fail_save_job = False
        self.write_delay = 0.0
        self.closed = False

    async def create_preset_summary(self, summary: PresetSummary) -> None:
        await asyncio.sleep(self.write_delay)
        if self.fail_create:
            raise StoreError("store unavailable")
        if summary.name in self.summaries:
            raise PresetAlreadyExistsError(summary.name)
        self.summaries[summary.name] = summary.to_dict()

    async def get_preset_summary(self, name: str) -> PresetSummary:
        if name not in self.summaries:
            raise PresetNotFoundError(name)
        return PresetSummary.from_dict(self.summaries[name])

    async def delete_preset_summary(self, name: str) -> None:
        await asyncio.sleep(self.write_delay)
        if self.fail_delete:
            raise StoreError("store unavailable")
        if name not in self.summaries:
            raise PresetNotFoundError(name)
        del self.summaries[name]

    async def save_job(self, job: Job) -> None:
        if self.fail_save_job:
            raise StoreError("store unavailable")
        self.jobs[job.id] = job.to_dict()

    async def get_job(self, job_id: str) -> Job:
        if job_id not in self.jobs:
            raise JobNotFoundError(job_id)
        return Job.from_dict(self.jobs[job_id])

    async def close(self) -> None:
        self.closed = True


class FakeProvider(TranscodeProvider):
    """Provider returning canned statuses; records calls."""

    name = "fake"

    def __init__(self, provider_job_id: str = "remote-1"):
        self.provider_job_id = provider_job_id
        self.requests: list[TranscodeRequest] = []
        self.cancelled: list[str] = []
        self.status = JobStatusValue.STARTED
        self.error: Exception | None = None
        self.presets: dict[str, PresetSummary] = {}

    async def transcode(self, request: TranscodeRequest) -> JobStatus:
        if self.error:
            raise self.error
        for preset in request.presets:
            if self.name not in preset.provider_mapping:
                raise PresetNotFoundError(preset.name)
        self.requests.append(request)
        return JobStatus(
            provider_job_id=self.provider_job_id,
            provider_name=self.name,
            status=JobStatusValue.QUEUED,
            output=JobOutput(destination="s3://bucket/out/"),
        )

    async def job_status(self, provider_job_id: str) -> JobStatus:
        if self.error:
            raise self.error
        return JobStatus(
            provider_job_id=provider_job_id,
            provider_name=self.name,
            status=self.status,
            provider_status={"progress": 50.0},
            output=JobOutput(destination="s3://bucket/out/"),
        )

    async def cancel_job(self, provider_job_id: str) -> None:
        self.cancelled.append(provider_job_id)
        self.status = JobStatusValue.FAILED

    async def healthcheck(self) -> None:
        if self.error:
            raise self.error

    async def create_preset(self, preset: Preset) -> str:
        self.presets[preset.name] = PresetSummary(name=preset.name, container=preset.container)
        return preset.name

    async def get_preset(self, name: str) -> PresetSummary:
        if name not in self.presets:
            raise PresetNotFoundError(name)
        return self.presets[name]

    async def delete_preset(self, name: str) -> None:
        if name not in self.presets:
            raise PresetNotFoundError(name)
        del self.presets[name]

    def capabilities(self) -> Capabilities:
        return Capabilities(input_formats=["h264"], output_formats=["mp4"], destinations=["s3"])
