"""``python -m transcode_orchestrator``: serve the HTTP API with uvicorn."""

import logging

import uvicorn

from .config import get_settings

logger = logging.getLogger("transcode_orchestrator")


def main():
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )

    logger.info(
        f"Serving transcode orchestrator on {settings.app_host}:{settings.app_port} "
        f"(store: {settings.preset_store})"
    )
    uvicorn.run(
        "transcode_orchestrator.api.app:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
