"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from ..service import TranscodeService


def get_service(request: Request) -> TranscodeService:
    """The service built at startup and kept on the application state."""
    return request.app.state.service
