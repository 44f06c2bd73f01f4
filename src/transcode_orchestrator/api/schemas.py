"""Request bodies shared by the API routes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..models import AudioPreset, OutputOptions, Preset, VideoPreset


class VideoBody(BaseModel):
    codec: str = ""
    profile: str = ""
    profile_level: str = Field(default="", alias="profileLevel")
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    bitrate: int | None = Field(default=None, ge=0)
    gop_size: float | None = Field(default=None, alias="gopSize", ge=0)
    gop_mode: str = Field(default="", alias="gopMode")
    interlace_mode: str = Field(default="", alias="interlaceMode")

    model_config = {"populate_by_name": True}


class AudioBody(BaseModel):
    codec: str = ""
    bitrate: int | None = Field(default=None, ge=0)


class OutputOptionsBody(BaseModel):
    extension: str = ""


class PresetBody(BaseModel):
    """A preset as submitted by callers."""

    name: str = Field(..., min_length=1)
    description: str = ""
    container: str = ""
    rate_control: str = Field(default="", alias="rateControl")
    two_pass: bool = Field(default=False, alias="twoPass")
    video: VideoBody = Field(default_factory=VideoBody)
    audio: AudioBody = Field(default_factory=AudioBody)
    output_options: OutputOptionsBody = Field(default_factory=OutputOptionsBody, alias="outputOptions")
    provider_mapping: dict[str, str] = Field(default_factory=dict, alias="providerMapping")

    model_config = {"populate_by_name": True}

    def to_preset(self) -> Preset:
        return Preset(
            name=self.name,
            description=self.description,
            container=self.container,
            rate_control=self.rate_control,
            two_pass=self.two_pass,
            video=VideoPreset(**self.video.model_dump()),
            audio=AudioPreset(**self.audio.model_dump()),
            output_options=OutputOptions(extension=self.output_options.extension),
            provider_mapping=dict(self.provider_mapping),
        )
