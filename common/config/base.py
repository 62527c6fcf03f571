# FILE: common/config/base.py
# ------------------------------------------------------------------------------
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError


class ConfigLoadError(Exception):
    pass


def _parse_bool(raw: str) -> bool:
    if raw.lower() in ("true", "1", "yes", "y"):
        return True
    if raw.lower() in ("false", "0", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean value: {raw}")


_TYPE_PARSERS = {
    "str": str,
    "int": int,
    "bool": _parse_bool,
}


def _settings_defaults() -> Dict[str, str]:
    from common.settings import Settings

    try:
        return Settings().as_env()
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid settings in environment: {exc}") from exc


class EnvLoader:
    def __init__(self, env: Optional[Dict[str, str]] = None):
        if env is not None:
            self.env = env
        else:
            # Settings only supplies defaults; the real environment wins.
            merged = dict(os.environ)
            for k, v in _settings_defaults().items():
                merged.setdefault(k, v)
            self.env = merged

    def load(self, schema: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key, spec in schema.items():
            raw = self.env.get(key)
            typ = spec.get("type", "str")
            default = spec.get("default")
            parser = _TYPE_PARSERS.get(typ)
            if parser is None:
                raise ConfigLoadError(f"Unsupported type '{typ}' for {key}")
            if raw is None or raw == "":
                values[key] = parser(str(default)) if default is not None else None
                continue
            try:
                values[key] = parser(raw)
            except ValueError as exc:
                raise ConfigLoadError(f"Invalid {typ} env var {key}: {raw}") from exc
        return values
