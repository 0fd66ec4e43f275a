"""Request body parsing into typed code properties."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple

from .errors import (
    BodyTooDeepError,
    MalformedJsonError,
    UnexpectedJsonShapeError,
    UnsupportedContentTypeError,
    UnsupportedValueKindError,
)
from .models import EMPTY_PROPERTY, CodeProperty, PathNode, PropertyType
from .schema import SchemaLookup

logger = logging.getLogger(__name__)

BINARY_CONTENT_TYPE = "application/octet-stream"
ADDITIONAL_DATA = "additionalData"
DEFAULT_MAX_DEPTH = 64


def upper_first(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return value[0].upper() + value[1:]


def lower_first(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return value[0].lower() + value[1:]


def escape_string(value: str) -> str:
    return value.replace('"', '\\"').replace("\n", "\\n").replace("\r", "\\r")


class JsonNumber(str):
    """Number token kept as its source text."""


class JsonObject(list):
    """Object members in source order, repeated keys included."""


def strip_trailing_commas(text: str) -> str:
    """Drop commas that follow a value and directly precede ``}`` or ``]`` outside of strings."""
    result: List[str] = []
    in_string = False
    escaped = False
    pending_comma: Optional[int] = None
    last_significant = ""
    for ch in text:
        if in_string:
            result.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
                last_significant = ch
            continue
        if ch in "}]" and pending_comma is not None:
            del result[pending_comma]
        if ch == ",":
            pending_comma = len(result) if last_significant not in ("", "{", "[", ",") else None
        elif not ch.isspace():
            pending_comma = None
        if ch == '"':
            in_string = True
        if not ch.isspace():
            last_significant = ch
        result.append(ch)
    return "".join(result)


def _reject_constant(token: str) -> Any:
    raise MalformedJsonError(f"Request body contains non-standard JSON constant: {token}")


def load_json(text: str) -> Any:
    try:
        return json.loads(
            strip_trailing_commas(text),
            parse_int=JsonNumber,
            parse_float=JsonNumber,
            parse_constant=_reject_constant,
            object_pairs_hook=JsonObject,
        )
    except json.JSONDecodeError as exc:
        raise MalformedJsonError(f"Request body is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedJsonError("Request body nests too deeply to decode") from exc


def json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (JsonNumber, int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (JsonObject, dict)):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def object_members(value: Any) -> List[Tuple[str, Any]]:
    if isinstance(value, dict):
        return list(value.items())
    return list(value)


def compute_request_body_name(nodes: Optional[Sequence[PathNode]]) -> str:
    """Derive a class name for the body from the addressed resource path."""
    if not nodes:
        return ""

    named = [node for node in nodes if not node.is_collection_index]
    if not named:
        return ""
    segment = named[-1].segment
    if named[-1].is_function:
        segment = segment.split(".")[-1]
    node_name = upper_first(segment) or ""

    if nodes[-1].is_collection_index:
        return node_name[:-1] if node_name.endswith("s") else node_name
    return f"{node_name}PostRequestBody"


class BodyParser:
    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def parse(
        self,
        body: Optional[str],
        content_type: Optional[str],
        schema: Optional[SchemaLookup],
        nodes: Optional[Sequence[PathNode]] = None,
        is_body_valid: bool = True,
    ) -> CodeProperty:
        if body is None or not body.strip():
            return EMPTY_PROPERTY

        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type == BINARY_CONTENT_TYPE:
            return CodeProperty(name=None, value=body, type=PropertyType.BINARY)
        if media_type != "application/json":
            logger.debug("Treating body with content type %r as JSON", content_type)

        if not is_body_valid:
            raise UnsupportedContentTypeError(content_type)

        document = load_json(body)
        title = schema.get_schema_title() if schema is not None else None
        root_name = upper_first(title) or compute_request_body_name(nodes)
        return self._parse_object(root_name, document, schema, 0)

    def _parse_object(
        self, name: Optional[str], value: Any, schema: Optional[SchemaLookup], depth: int
    ) -> CodeProperty:
        if json_kind(value) != "object":
            raise UnexpectedJsonShapeError(json_kind(value))
        self._check_depth(depth)

        children: List[CodeProperty] = []
        unresolved: List[Tuple[str, Any]] = []
        for key, item in object_members(value):
            property_schema = schema.get_property_schema(key) if schema is not None else None
            if property_schema is None:
                unresolved.append((key, item))
                continue
            children.append(self._parse_property(lower_first(key), item, property_schema, depth + 1))

        if unresolved:
            additional = [self._parse_property(key, item, None, depth + 2) for key, item in unresolved]
            children.append(CodeProperty(name=ADDITIONAL_DATA, value=None, type=PropertyType.MAP, children=tuple(additional)))

        return CodeProperty(name=name, value=None, type=PropertyType.OBJECT, children=tuple(children))

    def _parse_anonymous_object(
        self, name: Optional[str], value: Any, schema: Optional[SchemaLookup], depth: int
    ) -> CodeProperty:
        if json_kind(value) != "object":
            raise UnexpectedJsonShapeError(json_kind(value))
        self._check_depth(depth)

        children = tuple(
            self._parse_property(
                lower_first(key),
                item,
                schema.get_property_schema(key) if schema is not None else None,
                depth + 1,
            )
            for key, item in object_members(value)
        )
        return CodeProperty(name=name, value=None, type=PropertyType.OBJECT, children=children)

    def _parse_array(
        self, name: Optional[str], value: List[Any], schema: Optional[SchemaLookup], depth: int
    ) -> CodeProperty:
        self._check_depth(depth)
        element_name = upper_first(schema.get_schema_title()) if schema is not None else None
        children = tuple(self._parse_property(element_name, item, schema, depth + 1) for item in value)
        return CodeProperty(name=name, value=None, type=PropertyType.ARRAY, children=children)

    def _parse_property(
        self, name: Optional[str], value: Any, schema: Optional[SchemaLookup], depth: int
    ) -> CodeProperty:
        kind = json_kind(value)
        if kind == "string":
            return self._parse_string(name, value, schema)
        if kind == "number":
            return CodeProperty(name=name, value=str(value), type=PropertyType.NUMBER)
        if kind == "boolean":
            return CodeProperty(name=name, value="true" if value else "false", type=PropertyType.BOOLEAN)
        if kind == "null":
            return CodeProperty(name=name, value="null", type=PropertyType.NULL)
        if kind == "object":
            if schema is not None:
                return self._parse_object(name, value, schema, depth)
            return self._parse_anonymous_object(name, value, schema, depth)
        if kind == "array":
            return self._parse_array(name, value, schema, depth)
        raise UnsupportedValueKindError(kind)

    def _parse_string(self, name: Optional[str], value: str, schema: Optional[SchemaLookup]) -> CodeProperty:
        value_format = (schema.format or "").lower() if schema is not None else ""
        if value_format == "base64url":
            return CodeProperty(name=name, value=value, type=PropertyType.BASE64URL)
        if value_format == "date-time":
            return CodeProperty(name=name, value=value, type=PropertyType.DATE)

        enum_schema = next((member for member in schema.any_of if member.enum), None) if schema is not None else None
        if enum_schema is None:
            return CodeProperty(name=name, value=escape_string(value), type=PropertyType.STRING)

        enum_value = None
        if value.strip():
            enum_value = f"{upper_first(enum_schema.get_schema_title()) or ''}.{upper_first(value)}"
        return CodeProperty(name=name, value=enum_value, type=PropertyType.ENUM)

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise BodyTooDeepError(self.max_depth)
