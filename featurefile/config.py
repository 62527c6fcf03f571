# FILE: featurefile/config.py
# ------------------------------------------------------------------------------
import logging
from typing import Dict, Optional

from common.config.base import ConfigLoadError, EnvLoader
from featurefile.errors.fatal import ConfigError

_ENV_SCHEMA = {
    "FEATURE_SCHEMA_PATH": {"type": "str"},
    "LOG_LEVEL": {"type": "str", "default": "INFO"},
    "LOG_FORMAT": {"type": "str", "default": "text"},
    "LOG_DIR": {"type": "str"},
    "LOG_MAX_BYTES": {"type": "int", "default": 5 * 1024 * 1024},
    "LOG_BACKUP_COUNT": {"type": "int", "default": 3},
    "DEBUG": {"type": "bool", "default": False},
}

LOG_FORMATS = ("text", "json")


class Config:
    def __init__(self, env: Optional[Dict[str, str]] = None):
        try:
            values = EnvLoader(env).load(_ENV_SCHEMA)
        except ConfigLoadError as exc:
            raise ConfigError(str(exc)) from exc

        self.schema_path = values["FEATURE_SCHEMA_PATH"]
        self.debug = values["DEBUG"]
        self.log_level = "DEBUG" if self.debug else values["LOG_LEVEL"].upper()
        self.log_format = values["LOG_FORMAT"].lower()
        self.log_dir = values["LOG_DIR"]
        self.log_max_bytes = values["LOG_MAX_BYTES"]
        self.log_backup_count = values["LOG_BACKUP_COUNT"]

        self._validate()

    def _validate(self):
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError("Invalid LOG_LEVEL", context={"value": self.log_level})
        if self.log_format not in LOG_FORMATS:
            raise ConfigError("Invalid LOG_FORMAT", context={"value": self.log_format, "allowed": list(LOG_FORMATS)})
        if self.log_max_bytes < 0 or self.log_backup_count < 0:
            raise ConfigError(
                "Invalid log rotation settings",
                context={"max_bytes": self.log_max_bytes, "backup_count": self.log_backup_count},
            )

    def require_schema_path(self) -> str:
        if not self.schema_path:
            raise ConfigError("Missing feature schema path", context={"missing_key": "FEATURE_SCHEMA_PATH"})
        return self.schema_path
