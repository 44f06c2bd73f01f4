"""Keeps provider-side codec configurations and local preset summaries in step.

Every mutation runs the remote step first and the local step second:

* create: remote create, then local create. A remote failure leaves nothing
  behind locally. A local failure leaves an orphaned remote configuration and
  is reported as :class:`InconsistencyError`.
* delete: remote delete, then local delete. A remote failure keeps the summary
  so the delete can be retried. A local failure leaves a summary pointing at
  configurations that no longer exist and is reported as
  :class:`InconsistencyError`.

No remote rollback is attempted when the local step fails. Cancelling the
local step (e.g. a deadline expiring) counts as a local failure.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ..errors import (
    InconsistencyError,
    PresetAlreadyExistsError,
    PresetNotFoundError,
    StoreError,
)
from ..models import Preset, PresetSummary
from ..storage import Store

logger = logging.getLogger(__name__)


class RemoteConfigurator(Protocol):
    """Provider-side half of the lifecycle."""

    async def create(self, preset: Preset) -> PresetSummary:
        """Create remote configs for ``preset``; return the unsaved summary."""

    async def delete(self, summary: PresetSummary) -> None:
        """Delete the remote configs referenced by ``summary``."""


def _remote_ids(summary: PresetSummary) -> dict[str, str]:
    ids = {"videoConfigId": summary.video_config_id}
    if summary.audio_config_id:
        ids["audioConfigId"] = summary.audio_config_id
    return ids


class ConfigurationManager:
    """Create, read and delete preset configurations for one provider."""

    def __init__(self, provider_name: str, store: Store, remote: RemoteConfigurator):
        self.provider_name = provider_name
        self.store = store
        self.remote = remote

    async def create(self, preset: Preset) -> str:
        """
        Create the remote configuration for ``preset`` and persist its summary.

        Returns:
            The preset name the summary is stored under

        Raises:
            PresetAlreadyExistsError: A summary with this name already exists.
            RemoteTransportError: The remote create failed; nothing was stored.
            InconsistencyError: The remote create succeeded but the summary
                could not be stored.
        """
        try:
            await self.store.get_preset_summary(preset.name)
        except PresetNotFoundError:
            pass
        else:
            raise PresetAlreadyExistsError(preset.name)

        summary = await self.remote.create(preset)

        try:
            await self.store.create_preset_summary(summary)
        except (StoreError, PresetAlreadyExistsError, asyncio.CancelledError) as e:
            logger.error(
                f"[{self.provider_name}] Created remote configuration for preset {preset.name} "
                f"but could not store its summary: {e!r}. Orphaned remote IDs: {_remote_ids(summary)}"
            )
            raise InconsistencyError(
                f"creating preset {preset.name}", remote_ids=_remote_ids(summary), cause=e
            ) from e

        logger.info(f"[{self.provider_name}] Created preset {preset.name} {_remote_ids(summary)}")
        return summary.name

    async def get(self, name: str) -> PresetSummary:
        """Return the stored summary; raises ``PresetNotFoundError`` if absent."""
        return await self.store.get_preset_summary(name)

    async def delete(self, name: str) -> None:
        """
        Delete the remote configuration for ``name``, then its summary.

        Raises:
            PresetNotFoundError: No summary exists for ``name``.
            RemoteTransportError: The remote delete failed; the summary is kept.
            InconsistencyError: The remote delete succeeded but the summary
                could not be removed.
        """
        summary = await self.get(name)

        await self.remote.delete(summary)

        try:
            await self.store.delete_preset_summary(name)
        except (StoreError, PresetNotFoundError, asyncio.CancelledError) as e:
            logger.error(
                f"[{self.provider_name}] Deleted remote configuration for preset {name} "
                f"but could not remove its summary: {e!r}. Dangling remote IDs: {_remote_ids(summary)}"
            )
            raise InconsistencyError(
                f"deleting preset {name}", remote_ids=_remote_ids(summary), cause=e
            ) from e

        logger.info(f"[{self.provider_name}] Deleted preset {name}")
