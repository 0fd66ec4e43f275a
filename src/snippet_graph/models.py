"""Internal models for the snippet code graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class PropertyType(str, Enum):
    DEFAULT = "default"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ENUM = "enum"
    DATE = "date"
    BASE64URL = "base64url"
    BINARY = "binary"
    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"


CONTAINER_TYPES = frozenset({PropertyType.OBJECT, PropertyType.ARRAY, PropertyType.MAP})


@dataclass(frozen=True)
class CodeProperty:
    name: Optional[str]
    value: Optional[str]
    type: PropertyType
    children: Optional[Tuple["CodeProperty", ...]] = None

    def __post_init__(self) -> None:
        if self.type in CONTAINER_TYPES:
            if self.children is None:
                object.__setattr__(self, "children", ())
            elif not isinstance(self.children, tuple):
                object.__setattr__(self, "children", tuple(self.children))
        elif self.children is not None:
            raise ValueError(f"{self.type.value} properties cannot carry children")

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type.value, "value": self.value}
        if self.children is not None:
            data["children"] = [child.as_dict() for child in self.children]
        return data


EMPTY_PROPERTY = CodeProperty(name=None, value=None, type=PropertyType.DEFAULT)


@dataclass(frozen=True)
class PathNode:
    segment: str

    @property
    def is_collection_index(self) -> bool:
        return self.segment.startswith("{") and self.segment.endswith("}")

    @property
    def is_function(self) -> bool:
        return "." in self.segment
