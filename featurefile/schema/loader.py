"""Schema provider: reads feature definitions from JSON or YAML files.

Accepted layouts (entries are identical in both formats)::

    [{"name": "pitch", "type_char": "f"}, ...]
    {"definitions": [...]}
    {"feature": {"definitions": [...]}}

Entry keys follow the property names used by existing deployments, so
``typeChar`` / ``type-char`` / ``type`` and ``typeSize`` / ``type-size`` /
``width`` are accepted as well.
"""
import json
import os
from typing import Any, List

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from featurefile.errors.fatal import SchemaError
from featurefile.schema.descriptor import DEFAULT_WIDTH, FeatureDescriptor


class DefinitionEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(min_length=1)
    type_char: str = Field(
        min_length=1,
        validation_alias=AliasChoices("type_char", "typeChar", "type-char", "type"),
    )
    type_size: int = Field(
        DEFAULT_WIDTH,
        gt=0,
        strict=True,
        validation_alias=AliasChoices("type_size", "typeSize", "type-size", "width"),
    )


def _extract_entries(data: Any) -> Any:
    if data is None:
        return []
    if isinstance(data, dict):
        if "feature" in data and isinstance(data["feature"], dict):
            data = data["feature"]
        if "definitions" not in data:
            raise SchemaError("Schema mapping has no 'definitions' key", context={"keys": sorted(data)})
        return data["definitions"] or []
    return data


def parse_schema(data: Any) -> List[FeatureDescriptor]:
    entries = _extract_entries(data)
    if not isinstance(entries, list):
        raise SchemaError("Schema definitions must be a list", context={"type": type(entries).__name__})

    descriptors: List[FeatureDescriptor] = []
    seen = set()
    for index, raw in enumerate(entries):
        try:
            entry = DefinitionEntry.model_validate(raw)
        except ValidationError as exc:
            raise SchemaError(
                f"Invalid feature definition at index {index}",
                context={"index": index, "errors": str(exc)},
            ) from exc
        if entry.name in seen:
            raise SchemaError(f"Duplicate feature name '{entry.name}'", context={"index": index})
        seen.add(entry.name)
        descriptors.append(FeatureDescriptor(entry.name, entry.type_char, entry.type_size))
    return descriptors


def _read_schema_file(path: str) -> Any:
    _, ext = os.path.splitext(path)
    ext = ext.lower()
    if ext not in (".json", ".yaml", ".yml"):
        raise SchemaError("Unsupported schema file format (use .json or .yaml)", context={"path": path})
    try:
        with open(path, "r", encoding="utf-8") as handle:
            if ext == ".json":
                return json.load(handle)
            return yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise SchemaError("Schema file not found", context={"path": path}) from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaError(f"Malformed schema file: {exc}", context={"path": path}) from exc


def load_schema(path: str) -> List[FeatureDescriptor]:
    path = os.fspath(path)
    try:
        return parse_schema(_read_schema_file(path))
    except SchemaError as exc:
        exc.context.setdefault("path", path)
        raise

