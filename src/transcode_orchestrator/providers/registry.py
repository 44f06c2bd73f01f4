"""Name-keyed construction of provider instances."""

from __future__ import annotations

import logging
from typing import Callable

from ..config import Settings
from ..errors import ConfigurationError, ProviderNotFoundError
from ..storage import Store
from .base import TranscodeProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings, Store], TranscodeProvider]


class ProviderRegistry:
    """Maps provider names to factories and caches one instance per name.

    Built once at startup and handed to the service; there is no module-level
    registry.
    """

    def __init__(self, settings: Settings, store: Store):
        self.settings = settings
        self.store = store
        self._factories: dict[str, ProviderFactory] = {}
        self._instances: dict[str, TranscodeProvider] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        if name in self._factories:
            raise ValueError(f"provider {name!r} is already registered")
        self._factories[name] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def get(self, name: str) -> TranscodeProvider:
        """
        Return the provider registered under ``name``.

        Raises:
            ProviderNotFoundError: No factory is registered under ``name``.
            ConfigurationError: The factory rejected the configuration.
        """
        if name in self._instances:
            return self._instances[name]

        factory = self._factories.get(name)
        if factory is None:
            raise ProviderNotFoundError(name)

        provider = factory(self.settings, self.store)
        if provider is None:
            raise ConfigurationError(f"factory for {name} returned no provider")

        self._instances[name] = provider
        logger.info(f"Initialized provider {name}")
        return provider


def build_registry(settings: Settings, store: Store) -> ProviderRegistry:
    """Create a registry with every built-in provider."""
    from .bitmovin import NAME as BITMOVIN, bitmovin_factory
    from .encodingcom import NAME as ENCODINGCOM, encodingcom_factory

    registry = ProviderRegistry(settings, store)
    registry.register(BITMOVIN, bitmovin_factory)
    registry.register(ENCODINGCOM, encodingcom_factory)
    return registry
