"""Translation of provider status vocabularies into the canonical job status."""

from __future__ import annotations

from typing import Mapping

from .models import JobStatusValue


class StatusTranslator:
    """Map a provider's raw status strings to :class:`JobStatusValue`.

    Lookups are case-insensitive. Values outside the table map to
    ``JobStatusValue.UNKNOWN``.
    """

    def __init__(self, table: Mapping[str, JobStatusValue]):
        self._table = {key.lower(): value for key, value in table.items()}

    def __call__(self, raw_status: str | None) -> JobStatusValue:
        if not raw_status:
            return JobStatusValue.UNKNOWN
        return self._table.get(raw_status.strip().lower(), JobStatusValue.UNKNOWN)

    def known_statuses(self) -> list[str]:
        return list(self._table)


ENCODINGCOM_STATUS = StatusTranslator(
    {
        "new": JobStatusValue.QUEUED,
        "downloading": JobStatusValue.STARTED,
        "ready to process": JobStatusValue.STARTED,
        "waiting for encoder": JobStatusValue.STARTED,
        "processing": JobStatusValue.STARTED,
        "saving": JobStatusValue.STARTED,
        "saved": JobStatusValue.STARTED,
        "finished": JobStatusValue.FINISHED,
        "error": JobStatusValue.FAILED,
        "deleted": JobStatusValue.FAILED,
    }
)

BITMOVIN_STATUS = StatusTranslator(
    {
        "created": JobStatusValue.QUEUED,
        "queued": JobStatusValue.QUEUED,
        "running": JobStatusValue.STARTED,
        "finished": JobStatusValue.FINISHED,
        "error": JobStatusValue.FAILED,
        "transfer_error": JobStatusValue.FAILED,
        "canceled": JobStatusValue.FAILED,
    }
)
