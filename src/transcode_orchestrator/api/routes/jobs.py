"""API routes for transcode jobs."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...models import JobStatus
from ...service import TranscodeService
from ..dependencies import get_service
from ..schemas import PresetBody

logger = logging.getLogger(__name__)

router = APIRouter()


class StartJobRequest(BaseModel):
    """Request body for starting a transcode job."""

    source: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)
    presets: list[PresetBody] = Field(..., min_length=1)


def job_status_to_response(job_id: str, status: JobStatus) -> dict[str, Any]:
    """Convert a job status to API response format."""
    return {"jobId": job_id, **status.to_dict()}


@router.post("", status_code=201)
async def start_job(request: StartJobRequest, service: TranscodeService = Depends(get_service)):
    """Start a new transcode job."""
    job, status = await service.transcode(
        request.provider,
        request.source,
        [preset.to_preset() for preset in request.presets],
    )
    return job_status_to_response(job.id, status)


@router.get("/{job_id}")
async def get_job_status(job_id: str, service: TranscodeService = Depends(get_service)):
    """Get the current status of a transcode job."""
    status = await service.job_status(job_id)
    return job_status_to_response(job_id, status)


@router.post("/{job_id}/cancel")
async def cancel_job(job_id: str, service: TranscodeService = Depends(get_service)):
    """Cancel a transcode job."""
    status = await service.cancel_job(job_id)
    logger.info(f"Cancelled job {job_id}")
    return job_status_to_response(job_id, status)
