"""API routes for provider presets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from ...service import TranscodeService
from ..dependencies import get_service
from ..schemas import PresetBody

router = APIRouter()


class CreatePresetRequest(BaseModel):
    """Request body for creating a preset on one or more providers."""

    providers: list[str] = Field(..., min_length=1)
    preset: PresetBody


@router.post("")
async def create_preset(request: CreatePresetRequest, service: TranscodeService = Depends(get_service)):
    """Create a preset on each requested provider."""
    results = await service.create_preset(request.providers, request.preset.to_preset())
    return {"preset": request.preset.name, "results": results}


@router.get("/{name}")
async def get_preset(
    name: str,
    provider: str = Query(..., min_length=1),
    service: TranscodeService = Depends(get_service),
):
    """Get the stored summary of a preset."""
    summary = await service.get_preset(provider, name)
    return summary.to_dict()


@router.delete("/{name}", status_code=204)
async def delete_preset(
    name: str,
    provider: str = Query(..., min_length=1),
    service: TranscodeService = Depends(get_service),
):
    """Delete a preset from a provider."""
    await service.delete_preset(provider, name)
    return Response(status_code=204)
