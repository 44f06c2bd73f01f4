"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest
from unittest.mock import MagicMock

from transcode_orchestrator.config import Settings
from transcode_orchestrator.models import AudioPreset, OutputOptions, Preset, VideoPreset
from tests.helpers import InMemoryStore


@pytest.fixture
def settings():
    """Settings with both providers configured."""
    return Settings(
        ENCODINGCOM_USER_ID="myuser",
        ENCODINGCOM_USER_KEY="secret-key",
        ENCODINGCOM_DESTINATION="https://mybucket.s3.amazonaws.com/destination-dir/",
        BITMOVIN_API_KEY="bitmovin-key",
        BITMOVIN_DESTINATION="s3://mybucket/destination-dir/",
        BITMOVIN_AWS_ACCESS_KEY_ID="AKIA",
        BITMOVIN_AWS_SECRET_ACCESS_KEY="secret",
    )


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def webm_preset():
    """A 720p WebM preset."""
    return Preset(
        name="webm_720p",
        container="webm",
        description="720p WebM",
        video=VideoPreset(codec="vp8", width=1280, height=720, bitrate=2_000_000),
        audio=AudioPreset(codec="vorbis", bitrate=128_000),
        output_options=OutputOptions(extension="webm"),
        provider_mapping={"encoding.com": "123455", "bitmovin": "webm_720p", "not-relevant": "something"},
    )


@pytest.fixture
def mp4_preset():
    """A 1080p H.264 MP4 preset."""
    return Preset(
        name="mp4_1080p",
        container="mp4",
        video=VideoPreset(
            codec="h264",
            profile="high",
            profile_level="4.1",
            width=1920,
            height=1080,
            bitrate=5_000_000,
            gop_size=48,
            gop_mode="frames",
        ),
        audio=AudioPreset(codec="aac", bitrate=192_000),
        output_options=OutputOptions(extension="mp4"),
        provider_mapping={"encoding.com": "321321", "bitmovin": "mp4_1080p"},
    )


@pytest.fixture
def mock_firestore_client():
    """Create a mock Firestore client."""
    client = MagicMock()
    return client
