from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, PositiveFloat, PositiveInt, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from botanical_friend.extensions.logging import LogLevel


class AiSettings(BaseModel):
    model_name: str  # e.g. "gemini-3-pro-preview"
    request_timeout_seconds: PositiveFloat


class AcquisitionSettings(BaseModel):
    url_fetch_timeout_seconds: PositiveFloat
    max_image_bytes: PositiveInt  # uploads and downloads beyond this are rejected


class CorsSettings(BaseModel):
    origins: list[str]
    dev_origins: list[str]  # added only if allow_cors is set


class Settings(BaseModel):
    ai: AiSettings
    acquisition: AcquisitionSettings
    cors: CorsSettings


def parse_settings() -> Settings:
    config_toml_path = Path(__file__).resolve().parent.parent.parent.joinpath("config.toml")
    with config_toml_path.open("rb") as f:
        return Settings.model_validate(tomllib.load(f))


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class LogSettings(BaseModel):
    log_level_console: LogLevel = LogLevel.INFO
    log_level_file: LogLevel = LogLevel.NONE
    log_file_path: Path = Path("./botanical_friend.log")


class LocalConfig(BaseSettings):
    """Secrets and other environment-specific settings are specified in environment
    variables (or .env file) they are case-insensitive by default."""

    environment: Environment = Environment.DEV
    # a missing key is only reported when an AI-backed feature is first used
    gemini_api_key: SecretStr | None = None
    allow_cors: bool = False
    log_settings: LogSettings = LogSettings()

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent.parent.joinpath(".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )
