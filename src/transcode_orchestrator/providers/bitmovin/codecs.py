"""Codec configurations created on Bitmovin for each preset."""

from __future__ import annotations

import logging
from typing import Any

from ...errors import InconsistencyError, UnsupportedCodecError
from ...models import Preset, PresetSummary, VideoPreset
from .client import BitmovinAPIError, BitmovinClient

logger = logging.getLogger(__name__)

VIDEO_CODECS = ("h264", "h265", "vp8", "vp9")
AUDIO_CODECS = ("aac", "opus", "vorbis")

DEFAULT_AUDIO_SAMPLE_RATE = 48_000


def _gop_settings(video: VideoPreset) -> dict[str, Any]:
    if not video.gop_size:
        return {}
    if video.gop_mode == "seconds":
        return {"minKeyframeInterval": video.gop_size, "maxKeyframeInterval": video.gop_size}
    gop = int(video.gop_size)
    return {"minGop": gop, "maxGop": gop}


def video_config_payload(preset: Preset) -> dict[str, Any]:
    """Body of the video codec configuration for ``preset``."""
    video = preset.video
    codec = video.codec.lower()
    if codec not in VIDEO_CODECS:
        raise UnsupportedCodecError(video.codec, "bitmovin")

    payload: dict[str, Any] = {"name": preset.name, "description": preset.description}
    if video.bitrate:
        payload["bitrate"] = video.bitrate
    if video.width:
        payload["width"] = video.width
    if video.height:
        payload["height"] = video.height

    if codec in ("h264", "h265"):
        if video.profile:
            payload["profile"] = video.profile.upper()
        if video.profile_level:
            payload["level"] = video.profile_level.replace(".", "")
        if preset.two_pass:
            payload["encodingMode"] = "TWO_PASS"
        payload.update(_gop_settings(video))

    return payload


def audio_config_payload(preset: Preset) -> dict[str, Any]:
    """Body of the audio codec configuration for ``preset``."""
    audio = preset.audio
    if audio.codec.lower() not in AUDIO_CODECS:
        raise UnsupportedCodecError(audio.codec, "bitmovin")

    payload: dict[str, Any] = {"name": preset.name, "rate": DEFAULT_AUDIO_SAMPLE_RATE}
    if audio.bitrate:
        payload["bitrate"] = audio.bitrate
    return payload


class BitmovinConfigurator:
    """Creates and deletes the video/audio codec configurations of a preset."""

    def __init__(self, client: BitmovinClient):
        self.client = client

    async def create(self, preset: Preset) -> PresetSummary:
        video_codec = preset.video.codec.lower()
        audio_codec = preset.audio.codec.lower()

        # Validate both payloads before touching the API
        video_payload = video_config_payload(preset)
        audio_payload = audio_config_payload(preset) if audio_codec else None

        video_config_id = await self.client.create_codec_config("video", video_codec, video_payload)

        audio_config_id = ""
        if audio_payload is not None:
            try:
                audio_config_id = await self.client.create_codec_config("audio", audio_codec, audio_payload)
            except Exception:
                await self._discard_video_config(preset.name, video_codec, video_config_id)
                raise

        return PresetSummary(
            name=preset.name,
            container=preset.container,
            video_codec=video_codec,
            video_config_id=video_config_id,
            audio_codec=audio_codec,
            audio_config_id=audio_config_id,
        )

    async def _discard_video_config(self, preset_name: str, codec: str, config_id: str) -> None:
        try:
            await self.client.delete_codec_config("video", codec, config_id)
        except Exception as e:
            logger.error(f"Could not remove video config {config_id} of preset {preset_name}: {e}")
            raise InconsistencyError(
                f"creating preset {preset_name}", remote_ids={"videoConfigId": config_id}, cause=e
            ) from e

    async def delete(self, summary: PresetSummary) -> None:
        await self._delete("video", summary.video_codec, summary.video_config_id)
        if summary.audio_config_id:
            await self._delete("audio", summary.audio_codec, summary.audio_config_id)

    async def _delete(self, kind: str, codec: str, config_id: str) -> None:
        try:
            await self.client.delete_codec_config(kind, codec, config_id)
        except BitmovinAPIError as e:
            # Already gone (e.g. a retried delete that removed it last time)
            if not e.not_found:
                raise
            logger.warning(f"{kind} config {config_id} was already removed")
