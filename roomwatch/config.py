"""Runtime configuration, read from the environment once at process start."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roomwatch.notify.slack import DEFAULT_DETAIL_URL_TEMPLATE
from roomwatch.store.sheets import DEFAULT_RANGE


class Settings(BaseSettings):
    """Settings for one crawler process.

    The four service settings are required in practice but are not checked
    here: a missing value surfaces as a fetch, store, or notify failure.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    rooms_url: str = Field(default="")
    spreadsheet_id: str = Field(default="")
    slack_webhook_url: str = Field(default="")
    google_credentials_json: str = Field(default="")

    sheet_range: str = Field(default=DEFAULT_RANGE)
    detail_url_template: str = Field(default=DEFAULT_DETAIL_URL_TEMPLATE)
    http_timeout: float = Field(default=30.0)
    port: int = Field(default=8080)
    log_level: str = Field(default="INFO")

    @field_validator("detail_url_template")
    @classmethod
    def check_url_template(cls, value: str) -> str:
        try:
            value.format(id="0")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"template may only use the {{id}} placeholder: {e!r}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level
