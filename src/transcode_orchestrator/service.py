"""Job facade: dispatches job and preset operations to the owning provider."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Awaitable, TypeVar

from .errors import InconsistencyError, RemoteTransportError, StoreError, TranscodeOrchestratorError
from .models import Job, JobStatus, Preset, PresetSummary, TranscodeRequest, utc_now
from .providers.registry import ProviderRegistry
from .storage import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TranscodeService:
    """Entry point for the API layer.

    Providers are resolved through the registry on every call. Each remote
    operation, however many API calls it takes, runs under one deadline.
    """

    def __init__(self, registry: ProviderRegistry, store: Store, deadline_seconds: float = 120.0):
        self.registry = registry
        self.store = store
        self.deadline_seconds = deadline_seconds

    async def _with_deadline(self, awaitable: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.deadline_seconds)
        except asyncio.TimeoutError as e:
            raise RemoteTransportError(operation, f"deadline of {self.deadline_seconds}s exceeded") from e

    async def transcode(
        self,
        provider_name: str,
        source_media: str,
        presets: list[Preset],
    ) -> tuple[Job, JobStatus]:
        """
        Submit a job to a provider and register it for status queries.

        Returns:
            The stored job record and the provider's initial status
        """
        provider = self.registry.get(provider_name)
        job = Job(
            id=uuid.uuid4().hex,
            provider_name=provider_name,
            source_media=source_media,
            created_at=utc_now(),
        )

        status = await self._with_deadline(
            provider.transcode(TranscodeRequest(source_media=source_media, presets=presets, job_id=job.id)),
            f"transcoding {source_media} with {provider_name}",
        )
        job.provider_job_id = status.provider_job_id

        try:
            await self.store.save_job(job)
        except StoreError as e:
            logger.error(
                f"Submitted job {status.provider_job_id} to {provider_name} but could not store job {job.id}: {e}"
            )
            raise InconsistencyError(
                f"submitting job {job.id}",
                remote_ids={"providerName": provider_name, "providerJobId": status.provider_job_id},
                cause=e,
            ) from e

        logger.info(f"Job {job.id} submitted to {provider_name} as {job.provider_job_id}")
        return job, status

    async def job_status(self, job_id: str) -> JobStatus:
        """Read the job's current status from its provider."""
        job = await self.store.get_job(job_id)
        provider = self.registry.get(job.provider_name)
        return await self._with_deadline(
            provider.job_status(job.provider_job_id),
            f"retrieving the status of job {job_id}",
        )

    async def cancel_job(self, job_id: str) -> JobStatus:
        """Cancel the job and return its status afterwards."""
        job = await self.store.get_job(job_id)
        provider = self.registry.get(job.provider_name)

        async def cancel() -> JobStatus:
            await provider.cancel_job(job.provider_job_id)
            return await provider.job_status(job.provider_job_id)

        return await self._with_deadline(cancel(), f"cancelling job {job_id}")

    async def healthcheck(self, provider_name: str) -> None:
        provider = self.registry.get(provider_name)
        await self._with_deadline(provider.healthcheck(), f"checking {provider_name} health")

    async def create_preset(self, provider_names: list[str], preset: Preset) -> dict[str, str]:
        """
        Create ``preset`` on each provider, one after the other.

        Returns:
            Mapping of provider name to the name the preset is stored under.
            The first failure is raised; presets already created on earlier
            providers are kept.
        """
        results: dict[str, str] = {}
        for provider_name in provider_names:
            provider = self.registry.get(provider_name)
            results[provider_name] = await self._with_deadline(
                provider.create_preset(preset),
                f"creating preset {preset.name} on {provider_name}",
            )
        return results

    async def get_preset(self, provider_name: str, name: str) -> PresetSummary:
        return await self.registry.get(provider_name).get_preset(name)

    async def delete_preset(self, provider_name: str, name: str) -> None:
        provider = self.registry.get(provider_name)
        await self._with_deadline(
            provider.delete_preset(name),
            f"deleting preset {name} on {provider_name}",
        )

    def provider_names(self) -> list[str]:
        return self.registry.names()

    async def describe_provider(self, provider_name: str) -> dict[str, Any]:
        """Capabilities and current health of a provider."""
        provider = self.registry.get(provider_name)

        health: dict[str, Any] = {"ok": True}
        try:
            await self._with_deadline(provider.healthcheck(), f"checking {provider_name} health")
        except TranscodeOrchestratorError as e:
            logger.warning(f"Provider {provider_name} is unhealthy: {e}")
            health = {"ok": False, "message": str(e)}

        return {
            "name": provider_name,
            "capabilities": provider.capabilities().to_dict(),
            "health": health,
        }
