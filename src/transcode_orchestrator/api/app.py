"""FastAPI application setup."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..errors import (
    ConflictError,
    NotFoundError,
    PresetNotFoundError,
    TranscodeOrchestratorError,
    UnsupportedCodecError,
    UnsupportedContainerError,
)
from ..providers import build_registry
from ..service import TranscodeService
from ..storage import create_store
from .routes import jobs, presets, providers

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "sorry, this service is unavailable"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Transcode orchestrator starting...")

    if getattr(app.state, "service", None) is not None:
        yield
        return

    settings = get_settings()
    store = create_store(settings)
    registry = build_registry(settings, store)
    app.state.service = TranscodeService(registry, store, settings.request_deadline_seconds)
    logger.info(f"Registered providers: {', '.join(registry.names())}")

    yield

    logger.info("Transcode orchestrator shutting down...")

    try:
        await asyncio.wait_for(store.close(), timeout=2.0)
    except asyncio.TimeoutError:
        logger.warning("Store close timed out")
    except Exception as e:
        logger.warning(f"Error closing store: {e}")

    logger.info("Transcode orchestrator shutdown complete")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors to responses; anything unexpected becomes a 503."""

    @app.exception_handler(PresetNotFoundError)
    async def preset_not_found(request: Request, exc: PresetNotFoundError):
        logger.info(f"{request.method} {request.url.path}: {exc}")
        return _error(404, "preset not found")

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        logger.info(f"{request.method} {request.url.path}: {exc}")
        return _error(404, exc.message)

    @app.exception_handler(ConflictError)
    async def conflict(request: Request, exc: ConflictError):
        return _error(409, exc.message)

    @app.exception_handler(UnsupportedContainerError)
    async def unsupported_container(request: Request, exc: UnsupportedContainerError):
        return _error(400, exc.message)

    @app.exception_handler(UnsupportedCodecError)
    async def unsupported_codec(request: Request, exc: UnsupportedCodecError):
        return _error(400, exc.message)

    @app.exception_handler(TranscodeOrchestratorError)
    async def service_error(request: Request, exc: TranscodeOrchestratorError):
        logger.error(f"problems with serving request {request.method} {request.url.path}: {exc}")
        return _error(503, UNAVAILABLE_MESSAGE)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"problems with serving request {request.method} {request.url.path}: {exc}")
        return _error(503, UNAVAILABLE_MESSAGE)


def create_app(service: TranscodeService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Transcode Orchestrator",
        description="Uniform job and preset API over cloud encoding providers",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    if service is not None:
        app.state.service = service

    app.add_middleware(GZipMiddleware)
    register_exception_handlers(app)

    # Include routers
    app.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
    app.include_router(presets.router, prefix="/presets", tags=["presets"])
    app.include_router(providers.router, prefix="/providers", tags=["providers"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
