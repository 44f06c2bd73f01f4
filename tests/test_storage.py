"""Tests for the Redis and Firestore stores."""

from __future__ import annotations

import json
import threading
from unittest.mock import AsyncMock, patch

import pytest
from google.api_core import exceptions as google_exceptions
from redis.exceptions import ConnectionError as RedisConnectionError

from transcode_orchestrator.config import Settings
from transcode_orchestrator.errors import (
    JobNotFoundError,
    PresetAlreadyExistsError,
    PresetNotFoundError,
    StoreError,
)
from transcode_orchestrator.models import Job, PresetSummary
from transcode_orchestrator.storage import create_store
from transcode_orchestrator.storage.firestore import FirestoreStore
from transcode_orchestrator.storage.redis import RedisStore


@pytest.fixture
def summary():
    return PresetSummary(
        name="mp4_1080p",
        container="mp4",
        video_codec="h264",
        video_config_id="vid-123",
        audio_codec="aac",
        audio_config_id="aud-456",
    )


class TestRedisStore:
    """Tests for RedisStore."""

    @pytest.mark.asyncio
    async def test_create_sets_key_only_if_absent(self, summary):
        """Summaries are written with NX under a prefixed key."""
        redis_client = AsyncMock()
        redis_client.set.return_value = True

        await RedisStore(redis_client).create_preset_summary(summary)

        key, value = redis_client.set.await_args.args
        assert key == "preset_summary:mp4_1080p"
        assert json.loads(value)["videoConfigId"] == "vid-123"
        assert redis_client.set.await_args.kwargs == {"nx": True}

    @pytest.mark.asyncio
    async def test_create_existing(self, summary):
        """An existing key is a conflict."""
        redis_client = AsyncMock()
        redis_client.set.return_value = None

        with pytest.raises(PresetAlreadyExistsError):
            await RedisStore(redis_client).create_preset_summary(summary)

    @pytest.mark.asyncio
    async def test_get(self, summary):
        """Stored JSON is read back into a summary."""
        redis_client = AsyncMock()
        redis_client.get.return_value = json.dumps(summary.to_dict())

        assert await RedisStore(redis_client).get_preset_summary("mp4_1080p") == summary
        redis_client.get.assert_awaited_once_with("preset_summary:mp4_1080p")

    @pytest.mark.asyncio
    async def test_get_missing(self):
        """Missing keys are not found."""
        redis_client = AsyncMock()
        redis_client.get.return_value = None

        with pytest.raises(PresetNotFoundError):
            await RedisStore(redis_client).get_preset_summary("missing")

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        """Deleting a missing summary is not found."""
        redis_client = AsyncMock()
        redis_client.delete.return_value = 0

        with pytest.raises(PresetNotFoundError):
            await RedisStore(redis_client).delete_preset_summary("missing")

    @pytest.mark.asyncio
    async def test_connection_errors(self, summary):
        """Redis failures become store errors."""
        redis_client = AsyncMock()
        redis_client.set.side_effect = RedisConnectionError("connection refused")

        with pytest.raises(StoreError):
            await RedisStore(redis_client).create_preset_summary(summary)

    @pytest.mark.asyncio
    async def test_jobs(self):
        """Jobs are saved and read under the job prefix."""
        job = Job(id="job-1", provider_name="bitmovin", provider_job_id="enc-1")
        redis_client = AsyncMock()
        redis_client.get.return_value = json.dumps(job.to_dict())
        store = RedisStore(redis_client)

        await store.save_job(job)

        assert redis_client.set.await_args.args[0] == "job:job-1"
        assert await store.get_job("job-1") == job

    @pytest.mark.asyncio
    async def test_missing_job(self):
        """Unknown jobs are not found."""
        redis_client = AsyncMock()
        redis_client.get.return_value = None

        with pytest.raises(JobNotFoundError):
            await RedisStore(redis_client).get_job("missing")


class TestFirestoreStore:
    """Tests for FirestoreStore."""

    @pytest.mark.asyncio
    async def test_create_uses_create(self, mock_firestore_client, summary):
        """Summaries are created so that existing documents are not overwritten."""
        doc_ref = mock_firestore_client.collection.return_value.document.return_value

        await FirestoreStore(mock_firestore_client).create_preset_summary(summary)

        mock_firestore_client.collection.assert_called_with("preset-summaries")
        mock_firestore_client.collection.return_value.document.assert_called_with("mp4_1080p")
        doc_ref.create.assert_called_once_with(summary.to_dict())

    @pytest.mark.asyncio
    async def test_client_calls_run_off_the_event_loop(self, mock_firestore_client, summary):
        """Blocking client calls run in a worker thread."""
        loop_thread = threading.get_ident()
        call_threads = []
        doc_ref = mock_firestore_client.collection.return_value.document.return_value
        doc_ref.create.side_effect = lambda data: call_threads.append(threading.get_ident())
        doc_ref.set.side_effect = lambda data: call_threads.append(threading.get_ident())
        store = FirestoreStore(mock_firestore_client)

        await store.create_preset_summary(summary)
        await store.save_job(Job(id="job-1", provider_name="bitmovin", provider_job_id="enc-1"))

        assert len(call_threads) == 2
        assert loop_thread not in call_threads

    @pytest.mark.asyncio
    async def test_create_existing(self, mock_firestore_client, summary):
        """An existing document is a conflict."""
        doc_ref = mock_firestore_client.collection.return_value.document.return_value
        doc_ref.create.side_effect = google_exceptions.AlreadyExists("exists")

        with pytest.raises(PresetAlreadyExistsError):
            await FirestoreStore(mock_firestore_client).create_preset_summary(summary)

    @pytest.mark.asyncio
    async def test_create_failure(self, mock_firestore_client, summary):
        """Other API errors become store errors."""
        doc_ref = mock_firestore_client.collection.return_value.document.return_value
        doc_ref.create.side_effect = google_exceptions.ServiceUnavailable("unavailable")

        with pytest.raises(StoreError):
            await FirestoreStore(mock_firestore_client).create_preset_summary(summary)

    @pytest.mark.asyncio
    async def test_get(self, mock_firestore_client, summary):
        """Documents are read back into summaries."""
        doc = mock_firestore_client.collection.return_value.document.return_value.get.return_value
        doc.exists = True
        doc.to_dict.return_value = summary.to_dict()

        assert await FirestoreStore(mock_firestore_client).get_preset_summary("mp4_1080p") == summary

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_firestore_client):
        """Deleting a missing document is not found and deletes nothing."""
        doc_ref = mock_firestore_client.collection.return_value.document.return_value
        doc_ref.get.return_value.exists = False

        with pytest.raises(PresetNotFoundError):
            await FirestoreStore(mock_firestore_client).delete_preset_summary("missing")

        doc_ref.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_job(self, mock_firestore_client):
        """Unknown jobs are not found."""
        doc = mock_firestore_client.collection.return_value.document.return_value.get.return_value
        doc.exists = False

        with pytest.raises(JobNotFoundError):
            await FirestoreStore(mock_firestore_client).get_job("missing")


class TestCreateStore:
    """Tests for store selection."""

    def test_redis_by_default(self):
        """Redis is the default store."""
        store = create_store(Settings(REDIS_URL="redis://cache:6379/1"))

        assert isinstance(store, RedisStore)

    def test_firestore(self, mock_firestore_client):
        """PRESET_STORE=firestore initializes a named Firebase app for the project."""
        with (
            patch("transcode_orchestrator.storage.firestore.firebase_admin") as mock_admin,
            patch("transcode_orchestrator.storage.firestore.firestore") as mock_firestore,
        ):
            mock_admin.get_app.side_effect = ValueError("no app")
            mock_firestore.client.return_value = mock_firestore_client

            store = create_store(Settings(PRESET_STORE="firestore", GOOGLE_PROJECT_ID="my-project"))

        assert isinstance(store, FirestoreStore)
        assert store.db is mock_firestore_client
        mock_admin.initialize_app.assert_called_once_with(
            None, {"projectId": "my-project"}, name="transcode-orchestrator"
        )
        mock_firestore.client.assert_called_once_with(mock_admin.initialize_app.return_value)

    def test_firestore_reuses_app(self, mock_firestore_client):
        """An already initialized app is reused."""
        with (
            patch("transcode_orchestrator.storage.firestore.firebase_admin") as mock_admin,
            patch("transcode_orchestrator.storage.firestore.firestore") as mock_firestore,
        ):
            mock_firestore.client.return_value = mock_firestore_client

            FirestoreStore.from_settings(Settings(PRESET_STORE="firestore"))

        mock_admin.initialize_app.assert_not_called()
        mock_firestore.client.assert_called_once_with(mock_admin.get_app.return_value)

    def test_invalid_service_account_key(self):
        """A key that is neither a file nor JSON is rejected."""
        with patch("transcode_orchestrator.storage.firestore.firebase_admin") as mock_admin:
            mock_admin.get_app.side_effect = ValueError("no app")

            with pytest.raises(ValueError, match="FIREBASE_SERVICE_ACCOUNT_KEY"):
                FirestoreStore.from_settings(Settings(FIREBASE_SERVICE_ACCOUNT_KEY="not-json"))
