"""Storage module for preset summaries and job routing records."""

from __future__ import annotations

from ..config import Settings, get_settings
from .base import Store


def create_store(settings: Settings | None = None) -> Store:
    """Build the store selected by ``PRESET_STORE``."""
    settings = settings or get_settings()

    if settings.preset_store == "firestore":
        from .firestore import FirestoreStore

        return FirestoreStore.from_settings(settings)

    from .redis import RedisStore

    return RedisStore.from_url(settings.redis_url)


__all__ = [
    "Store",
    "create_store",
]
