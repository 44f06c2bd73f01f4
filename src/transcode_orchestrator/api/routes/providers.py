"""API routes for provider discovery."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...service import TranscodeService
from ..dependencies import get_service

router = APIRouter()


@router.get("")
async def list_providers(service: TranscodeService = Depends(get_service)):
    """List the registered providers."""
    return {"providers": service.provider_names()}


@router.get("/{name}")
async def get_provider(name: str, service: TranscodeService = Depends(get_service)):
    """Describe a provider's capabilities and health."""
    return await service.describe_provider(name)
