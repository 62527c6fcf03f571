# FILE: featurefile/schema/descriptor.py
# ------------------------------------------------------------------------------
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from featurefile.errors.fatal import SchemaError


class FeatureKind(str, Enum):
    FLOAT = "f"
    INT = "i"


# Widths numpy can represent for each kind.
SUPPORTED_WIDTHS = {
    FeatureKind.FLOAT: (2, 4, 8),
    FeatureKind.INT: (1, 2, 4, 8),
}

DEFAULT_WIDTH = 4


@dataclass(frozen=True)
class FeatureDescriptor:
    """One schema entry: feature name, type marker and encoded byte width.

    Unknown type markers are accepted here; the decoder skips them.
    """

    name: str
    type_char: str
    type_size: int = DEFAULT_WIDTH

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError("Feature name must be a non-empty string", context={"name": self.name})
        if isinstance(self.type_size, bool) or not isinstance(self.type_size, int) or self.type_size <= 0:
            raise SchemaError(
                "Feature width must be a positive int",
                context={"feature": self.name, "type_size": self.type_size},
            )
        kind = self.kind
        if kind is not None and self.type_size not in SUPPORTED_WIDTHS[kind]:
            raise SchemaError(
                f"Unsupported width {self.type_size} for type '{self.type_char}'",
                context={"feature": self.name, "supported": list(SUPPORTED_WIDTHS[kind])},
            )

    @property
    def kind(self) -> Optional[FeatureKind]:
        try:
            return FeatureKind(self.type_char)
        except ValueError:
            return None

    @property
    def width(self) -> int:
        return self.type_size

    @property
    def dtype(self) -> np.dtype:
        kind = self.kind
        if kind is None:
            raise SchemaError(
                f"Feature '{self.name}' has unsupported type '{self.type_char}'",
                context={"feature": self.name},
            )
        return np.dtype(f"<{kind.value}{self.type_size}")
