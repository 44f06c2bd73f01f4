"""Firestore-backed preset summary and job store.

The Firestore client is synchronous; every call runs in a worker thread so the
event loop and the request deadline are not held up by it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from ..config import Settings, get_settings
from ..errors import JobNotFoundError, PresetAlreadyExistsError, PresetNotFoundError, StoreError
from ..models import Job, PresetSummary

logger = logging.getLogger(__name__)

# Named app, so another Firebase default app in the process is left alone
FIREBASE_APP_NAME = "transcode-orchestrator"

# preset-summaries/{name}, transcode-jobs/{jobId}
PRESET_SUMMARY_COLLECTION = "preset-summaries"
JOB_COLLECTION = "transcode-jobs"


def _service_account(key: str | None) -> credentials.Base | None:
    """Certificate from a key file path or inline JSON; ``None`` for default credentials."""
    if not key:
        return None
    if Path(key).expanduser().is_file():
        return credentials.Certificate(str(Path(key).expanduser()))
    try:
        return credentials.Certificate(json.loads(key))
    except json.JSONDecodeError as e:
        raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is neither a file nor JSON") from e


class FirestoreStore:
    """Stores summaries and jobs as Firestore documents keyed by name/ID."""

    def __init__(self, client: Any):
        self.db = client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "FirestoreStore":
        """Connect with the configured service account and project."""
        settings = settings or get_settings()
        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            options = {"projectId": settings.google_project_id} if settings.google_project_id else None
            app = firebase_admin.initialize_app(
                _service_account(settings.firebase_service_account_key),
                options,
                name=FIREBASE_APP_NAME,
            )
            logger.info(f"Initialized Firebase app for project {settings.google_project_id or '(default)'}")
        return cls(firestore.client(app))

    def _summary_ref(self, name: str):
        return self.db.collection(PRESET_SUMMARY_COLLECTION).document(name)

    def _job_ref(self, job_id: str):
        return self.db.collection(JOB_COLLECTION).document(job_id)

    async def create_preset_summary(self, summary: PresetSummary) -> None:
        doc_ref = self._summary_ref(summary.name)
        try:
            # create() fails when the document exists, unlike set()
            await asyncio.to_thread(doc_ref.create, summary.to_dict())
        except google_exceptions.AlreadyExists as e:
            raise PresetAlreadyExistsError(summary.name, e) from e
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"saving preset summary {summary.name}: {e}", e) from e

        logger.info(f"Saved preset summary {summary.name}")

    async def get_preset_summary(self, name: str) -> PresetSummary:
        try:
            doc = await asyncio.to_thread(self._summary_ref(name).get)
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"reading preset summary {name}: {e}", e) from e

        if not doc.exists:
            raise PresetNotFoundError(name)
        return PresetSummary.from_dict(doc.to_dict())

    async def delete_preset_summary(self, name: str) -> None:
        doc_ref = self._summary_ref(name)
        try:
            doc = await asyncio.to_thread(doc_ref.get)
            if not doc.exists:
                raise PresetNotFoundError(name)
            await asyncio.to_thread(doc_ref.delete)
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"deleting preset summary {name}: {e}", e) from e

        logger.info(f"Deleted preset summary {name}")

    async def save_job(self, job: Job) -> None:
        try:
            await asyncio.to_thread(self._job_ref(job.id).set, job.to_dict())
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"saving job {job.id}: {e}", e) from e

        logger.info(f"Saved job {job.id} ({job.provider_name}/{job.provider_job_id})")

    async def get_job(self, job_id: str) -> Job:
        try:
            doc = await asyncio.to_thread(self._job_ref(job_id).get)
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"reading job {job_id}: {e}", e) from e

        if not doc.exists:
            raise JobNotFoundError(job_id)
        return Job.from_dict(doc.to_dict())

    async def close(self) -> None:
        await asyncio.to_thread(self.db.close)
