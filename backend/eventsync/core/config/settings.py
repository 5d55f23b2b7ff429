"""Application settings.

Values are read from the environment (and an optional ``.env`` file) by
pydantic-settings. Field names are upper case so that they match the
environment variable names one-to-one.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventsync.core.config.enums import Environment, LogFormat


class Settings(BaseSettings):
    """Eventsync settings.

    Attributes:
    ----------
        ENVIRONMENT (Environment): Deployment environment.
        LOG_LEVEL (str): Root log level.
        LOG_FORMAT (LogFormat): ``json`` for aggregators, ``text`` for terminals.
        EVENTBRITE_API_BASE_URL (str): Base URL of the Eventbrite v3 API.
        EVENTBRITE_REQUEST_TIMEOUT_SECONDS (float): Per-request HTTP timeout.
        SYNC_MAX_RATE_LIMIT_RETRIES (int): Retries allowed per page under HTTP 429.
        SYNC_DEFAULT_RETRY_AFTER_SECONDS (int): Wait used when 429 carries no usable hint.
        SYNC_MAX_RETRY_AFTER_SECONDS (int): Upper bound on a server supplied wait.
        SYNC_DEFAULT_MODE (str): Mode used when neither caller nor resource picks one.
        SYNC_TIMEOUT_SECONDS (Optional[float]): Deadline for one sync call, None disables it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.JSON

    EVENTBRITE_API_BASE_URL: str = "https://www.eventbriteapi.com/v3"
    EVENTBRITE_REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    SYNC_MAX_RATE_LIMIT_RETRIES: int = Field(default=3, ge=0)
    SYNC_DEFAULT_RETRY_AFTER_SECONDS: int = Field(default=5, ge=0)
    SYNC_MAX_RETRY_AFTER_SECONDS: int = Field(default=120, ge=0)
    SYNC_DEFAULT_MODE: Literal["full_drain", "single_page"] = "single_page"
    SYNC_TIMEOUT_SECONDS: Optional[float] = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        return value.upper()

    @field_validator("EVENTBRITE_API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Paths are joined with a single slash, so drop the trailing one."""
        return value.rstrip("/")
