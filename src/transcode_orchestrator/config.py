"""Runtime configuration for the transcode orchestrator."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the transcode orchestrator."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # encoding.com
    encodingcom_user_id: str | None = Field(default=None, alias="ENCODINGCOM_USER_ID")
    encodingcom_user_key: str | None = Field(default=None, alias="ENCODINGCOM_USER_KEY")
    encodingcom_destination: str = Field(default="", alias="ENCODINGCOM_DESTINATION")
    encodingcom_endpoint: str = Field(default="https://manage.encoding.com", alias="ENCODINGCOM_ENDPOINT")
    encodingcom_status_endpoint: str = Field(
        default="http://status.encoding.com", alias="ENCODINGCOM_STATUS_ENDPOINT"
    )

    # Bitmovin
    bitmovin_api_key: str | None = Field(default=None, alias="BITMOVIN_API_KEY")
    bitmovin_endpoint: str = Field(default="https://api.bitmovin.com/v1", alias="BITMOVIN_ENDPOINT")
    bitmovin_encoding_region: str = Field(default="AWS_US_EAST_1", alias="BITMOVIN_ENCODING_REGION")
    bitmovin_encoder_version: str = Field(default="STABLE", alias="BITMOVIN_ENCODER_VERSION")
    bitmovin_destination: str = Field(default="", alias="BITMOVIN_DESTINATION")
    bitmovin_aws_access_key_id: str | None = Field(default=None, alias="BITMOVIN_AWS_ACCESS_KEY_ID")
    bitmovin_aws_secret_access_key: str | None = Field(default=None, alias="BITMOVIN_AWS_SECRET_ACCESS_KEY")
    bitmovin_aws_region: str = Field(default="us-east-1", alias="BITMOVIN_AWS_REGION")

    # Preset summary / job store
    preset_store: Literal["redis", "firestore"] = Field(default="redis", alias="PRESET_STORE")
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    google_project_id: str | None = Field(default=None, alias="GOOGLE_PROJECT_ID")
    firebase_service_account_key: str | None = Field(default=None, alias="FIREBASE_SERVICE_ACCOUNT_KEY")

    # Remote calls
    remote_timeout_seconds: float = Field(default=30.0, alias="REMOTE_TIMEOUT_SECONDS", gt=0)
    # Overall deadline for one multi-step operation (transcode, status poll, preset create)
    request_deadline_seconds: float = Field(default=120.0, alias="REQUEST_DEADLINE_SECONDS", gt=0)

    # FastAPI
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    debug: bool = Field(default=False, alias="DEBUG")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
