"""Pydantic-backed configuration for Django settings."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_ENV_FILE = BASE_DIR / ".env"


class AppSettings(BaseSettings):
    """Environment-driven configuration for the Django project."""

    debug: bool = False
    secret_key: str = "development-secret-key"
    allowed_hosts: Annotated[list[str], NoDecode] = Field(default_factory=list)
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(default_factory=list)
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DJANGO_DATABASE_URL", "DATABASE_URL"),
    )
    db_conn_max_age: int = 60
    db_statement_timeout_ms: int = Field(
        default=5000,
        validation_alias=AliasChoices(
            "DB_STATEMENT_TIMEOUT_MS",
            "DJANGO_DB_STATEMENT_TIMEOUT_MS",
        ),
    )
    redis_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_URL", "DJANGO_REDIS_URL"),
    )
    posthog_project_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("POSTHOG_PROJECT_API_KEY", "DJANGO_POSTHOG_PROJECT_API_KEY"),
    )
    posthog_host: str | None = Field(
        default="https://us.i.posthog.com",
        validation_alias=AliasChoices("POSTHOG_HOST", "DJANGO_POSTHOG_HOST"),
    )
    posthog_debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("POSTHOG_DEBUG", "DJANGO_POSTHOG_DEBUG"),
    )
    posthog_disabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("POSTHOG_DISABLED", "DJANGO_POSTHOG_DISABLED"),
    )
    evaluation_rate_limit_per_minute: int = Field(
        default=60,
        validation_alias=AliasChoices(
            "EVALUATION_RATE_LIMIT_PER_MINUTE",
            "DJANGO_EVALUATION_RATE_LIMIT_PER_MINUTE",
        ),
    )
    guest_session_key: str = Field(
        default="showrate_guest_id",
        validation_alias=AliasChoices("GUEST_SESSION_KEY", "DJANGO_GUEST_SESSION_KEY"),
    )

    model_config = SettingsConfigDict(
        env_prefix="DJANGO_",
        case_sensitive=False,
        extra="allow",
    )

    @field_validator("allowed_hosts", "cors_allowed_origins", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> list[str]:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, list):
            return value
        return [str(value).strip()] if str(value).strip() else []


@lru_cache()
def get_settings(env_file: str | os.PathLike[str] | None = None) -> AppSettings:
    """Load settings from environment and optional .env file with caching."""

    kwargs: dict[str, Any] = {}
    env_file_path: Path | None = None

    if env_file:
        env_file_path = Path(env_file)
    elif os.getenv("DJANGO_ENV_FILE"):
        env_file_path = Path(os.environ["DJANGO_ENV_FILE"])
    elif DEFAULT_ENV_FILE.exists():
        env_file_path = DEFAULT_ENV_FILE

    if env_file_path is not None:
        kwargs["_env_file"] = env_file_path
        kwargs["_env_file_encoding"] = "utf-8"

    return AppSettings(**kwargs)


__all__ = [
    "AppSettings",
    "BASE_DIR",
    "DEFAULT_ENV_FILE",
    "get_settings",
]
