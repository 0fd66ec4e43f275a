"""OpenAPI schema adapter exposing the lookups the body parser needs."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

_REF_PREFIX = "#/components/schemas/"
_COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")


class SchemaLookup(Protocol):
    """Capability consumed by the body parser."""

    @property
    def format(self) -> Optional[str]: ...

    @property
    def enum(self) -> Sequence[Any]: ...

    @property
    def any_of(self) -> Sequence["SchemaLookup"]: ...

    def get_property_schema(self, name: str) -> Optional["SchemaLookup"]: ...

    def get_schema_title(self) -> Optional[str]: ...


class OpenAPISchema:
    """Read-only view over a raw OpenAPI schema object.

    ``components`` maps component names to schema dicts and is used to follow
    local ``$ref`` pointers such as ``#/components/schemas/message``.
    """

    def __init__(
        self,
        raw: Mapping[str, Any],
        components: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.components: Mapping[str, Any] = components or {}
        self.raw: Mapping[str, Any] = self._resolve(raw)

    def __repr__(self) -> str:
        return f"OpenAPISchema(title={self.raw.get('title')!r})"

    @property
    def title(self) -> Optional[str]:
        return self.raw.get("title") or None

    @property
    def format(self) -> Optional[str]:
        return self.raw.get("format")

    @property
    def enum(self) -> List[Any]:
        return list(self.raw.get("enum") or [])

    @property
    def any_of(self) -> List["OpenAPISchema"]:
        return self._members("anyOf")

    @property
    def items(self) -> Optional["OpenAPISchema"]:
        items = self.raw.get("items")
        if not isinstance(items, Mapping):
            return None
        return self._wrap(items)

    def get_property_schema(self, name: str) -> Optional["OpenAPISchema"]:
        return self._find_property(name, set())

    def get_schema_title(self) -> Optional[str]:
        if self.title:
            return self.title
        items = self.items
        if items is not None and items.title:
            return items.title
        for member in self._composed_members():
            if member.title:
                return member.title
        return None

    def _find_property(self, name: str, seen: set[int]) -> Optional["OpenAPISchema"]:
        if id(self.raw) in seen:
            return None
        seen.add(id(self.raw))

        properties = self.raw.get("properties") or {}
        if name in properties:
            return self._wrap(properties[name])

        candidates = list(self._composed_members())
        items = self.items
        if items is not None:
            candidates.append(items)
        for candidate in candidates:
            found = candidate._find_property(name, seen)
            if found is not None:
                return found
        return None

    def _composed_members(self) -> Iterator["OpenAPISchema"]:
        for key in _COMPOSITION_KEYS:
            yield from self._members(key)

    def _members(self, key: str) -> List["OpenAPISchema"]:
        return [self._wrap(member) for member in self.raw.get(key) or [] if isinstance(member, Mapping)]

    def _wrap(self, raw: Mapping[str, Any]) -> "OpenAPISchema":
        return OpenAPISchema(raw, self.components)

    def _resolve(self, raw: Mapping[str, Any]) -> Mapping[str, Any]:
        ref = raw.get("$ref")
        if not ref:
            return raw
        if not ref.startswith(_REF_PREFIX):
            logger.debug("Ignoring non-local schema reference: %s", ref)
            return raw
        target = self.components.get(ref[len(_REF_PREFIX):])
        if target is None:
            logger.warning("Unresolved schema reference: %s", ref)
            return raw
        return target


def schema_from_dict(
    raw: Optional[Dict[str, Any]],
    components: Optional[Dict[str, Any]] = None,
) -> Optional[OpenAPISchema]:
    if not raw:
        return None
    return OpenAPISchema(raw, components)
