"""
Base class for the immutable class file model.
"""

import json
import math
from abc import ABC
from enum import Enum, IntFlag


class Node(ABC):
    """Base class for all class file model nodes."""

    def to_dict(self) -> dict:
        """Convert node to dictionary for JSON serialization."""
        result = {"_type": self.__class__.__name__}
        for key, value in self.__dict__.items():
            if key.startswith("_"):
                continue
            result[key] = _serialize_value(value)
        return result

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, allow_nan=False)


def _serialize_value(value):
    """Helper to serialize a value for JSON."""
    if value is None:
        return None
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, IntFlag):
        return [member.name for member in type(value) if member in value]
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        # JSON has no NaN/Infinity literals
        return repr(value)
    if isinstance(value, (int, float, str)):
        return value
    return str(value)
