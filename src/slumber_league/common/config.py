import os
from enum import StrEnum
from typing import Final
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

# Lambda-side configuration, read once at import time
SLEEP_NIGHTS_TABLE: Final[str] = os.environ.get("SLEEP_NIGHTS_TABLE", "sleep_nights")
BACKEND_API_URL: Final[str] = os.environ.get("BACKEND_API_URL", "")
BACKEND_TOKEN_SECRET_NAME: Final[str] = os.environ.get("BACKEND_TOKEN_SECRET_NAME", "slumber/backend/token")
TIMEZONE: Final[str] = os.environ.get("TIMEZONE", "UTC")
SYNC_WINDOW_DAYS: Final[int] = int(os.environ.get("SYNC_WINDOW_DAYS", "7"))


class LogLevel(StrEnum):
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


class Settings(BaseModel):
    api_url: str = Field(validation_alias="API_URL")
    api_token: str = Field(validation_alias="API_TOKEN")
    export_path: str = Field(validation_alias="EXPORT_PATH")
    timezone: str = Field(default="UTC", validation_alias="TIMEZONE")
    window_days: int = Field(default=7, ge=1, validation_alias="WINDOW_DAYS")
    request_timeout_secs: int = Field(default=10, ge=1, validation_alias="REQUEST_TIMEOUT_SECS")
    log_level: LogLevel = Field(default=LogLevel.INFO, validation_alias="LOG_LEVEL")
    dry_run: bool = Field(default=False, validation_alias="DRY_RUN")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone '{value}'. Use an IANA identifier.") from exc
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


ENV_KEYS: Final[tuple[str, ...]] = (
    "API_URL",
    "API_TOKEN",
    "EXPORT_PATH",
    "TIMEZONE",
    "WINDOW_DAYS",
    "REQUEST_TIMEOUT_SECS",
    "LOG_LEVEL",
    "DRY_RUN",
)
REQUIRED_KEYS: Final[tuple[str, ...]] = ("API_URL", "API_TOKEN", "EXPORT_PATH")


def load_settings() -> Settings:
    # Load .env if present (does nothing if file missing)
    load_dotenv()
    data: dict[str, str] = {key: os.environ[key] for key in ENV_KEYS if key in os.environ}

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        missing = [k for k in REQUIRED_KEYS if k not in data]
        if missing:
            raise RuntimeError(f"Missing required configuration: {', '.join(missing)}") from e
        raise
