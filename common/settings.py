"""Centralized application settings using Pydantic.

`Settings` groups the defaults by section. `EnvLoader` builds a fresh
instance per load and only uses its values for keys the process
environment does not already set.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FEATURE_SCHEMA_")

    # FEATURE_SCHEMA_PATH: JSON/YAML file holding the feature definitions.
    path: Optional[str] = Field(None)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field("INFO")
    format: str = Field("text")
    dir: Optional[str] = Field(None)
    max_bytes: int = Field(5 * 1024 * 1024)
    backup_count: int = Field(3)


class Settings(BaseSettings):
    feature_schema: SchemaSettings = Field(default_factory=SchemaSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    debug: bool = Field(False)

    def as_env(self) -> dict:
        """Return a simple env mapping for EnvLoader use.

        Values are strings as environment variables would be; unset
        optional values are omitted.
        """
        env = {
            "LOG_LEVEL": self.logging.level,
            "LOG_FORMAT": self.logging.format,
            "LOG_MAX_BYTES": str(self.logging.max_bytes),
            "LOG_BACKUP_COUNT": str(self.logging.backup_count),
            "DEBUG": "true" if self.debug else "false",
        }
        if self.feature_schema.path:
            env["FEATURE_SCHEMA_PATH"] = self.feature_schema.path
        if self.logging.dir:
            env["LOG_DIR"] = self.logging.dir
        return env
