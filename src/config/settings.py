"""Environment configuration and validation.

This module defines strongly-typed settings for the command-line entry point, loaded from
environment variables (optionally via a local `.env` file). The validation core never reads them.
"""

from __future__ import annotations

import logging
import re

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SCHEMA_REF_RE = re.compile(r"[A-Za-z_][\w.]*:[A-Za-z_]\w*")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    query_schema: str | None = Field(default=None, alias="QUERY_SCHEMA")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that the level is one of the standard `logging` level names."""

        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
        return level

    @field_validator("query_schema")
    @classmethod
    def validate_query_schema(cls, value: str | None) -> str | None:
        """Validate the `module:attribute` shape of the default schema reference."""

        if value is None or not value.strip():
            return None
        value = value.strip()
        if _SCHEMA_REF_RE.fullmatch(value) is None:
            raise ValueError("QUERY_SCHEMA must look like 'package.module:attribute'")
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
