"""Redis-backed preset summary and job store."""

from __future__ import annotations

import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import JobNotFoundError, PresetAlreadyExistsError, PresetNotFoundError, StoreError
from ..models import Job, PresetSummary

logger = logging.getLogger(__name__)

PRESET_SUMMARY_PREFIX = "preset_summary:"
JOB_PREFIX = "job:"


class RedisStore:
    """Stores summaries and jobs as JSON strings under prefixed keys."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(redis.from_url(url, decode_responses=True))

    async def create_preset_summary(self, summary: PresetSummary) -> None:
        key = f"{PRESET_SUMMARY_PREFIX}{summary.name}"
        try:
            created = await self.redis.set(key, json.dumps(summary.to_dict()), nx=True)
        except RedisError as e:
            raise StoreError(f"saving preset summary {summary.name}: {e}", e) from e

        if not created:
            raise PresetAlreadyExistsError(summary.name)

        logger.info(f"Saved preset summary {summary.name}")

    async def get_preset_summary(self, name: str) -> PresetSummary:
        try:
            data = await self.redis.get(f"{PRESET_SUMMARY_PREFIX}{name}")
        except RedisError as e:
            raise StoreError(f"reading preset summary {name}: {e}", e) from e

        if data is None:
            raise PresetNotFoundError(name)
        return PresetSummary.from_dict(json.loads(data))

    async def delete_preset_summary(self, name: str) -> None:
        try:
            deleted = await self.redis.delete(f"{PRESET_SUMMARY_PREFIX}{name}")
        except RedisError as e:
            raise StoreError(f"deleting preset summary {name}: {e}", e) from e

        if not deleted:
            raise PresetNotFoundError(name)

        logger.info(f"Deleted preset summary {name}")

    async def save_job(self, job: Job) -> None:
        try:
            await self.redis.set(f"{JOB_PREFIX}{job.id}", json.dumps(job.to_dict()))
        except RedisError as e:
            raise StoreError(f"saving job {job.id}: {e}", e) from e

        logger.info(f"Saved job {job.id} ({job.provider_name}/{job.provider_job_id})")

    async def get_job(self, job_id: str) -> Job:
        try:
            data = await self.redis.get(f"{JOB_PREFIX}{job_id}")
        except RedisError as e:
            raise StoreError(f"reading job {job_id}: {e}", e) from e

        if data is None:
            raise JobNotFoundError(job_id)
        return Job.from_dict(json.loads(data))

    async def close(self) -> None:
        await self.redis.close()
