"""Request description accepted by the code graph builder."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, Field, field_validator

from .models import PathNode
from .schema import SchemaLookup, schema_from_dict


class SnippetRequest(BaseModel):
    http_method: str = Field(..., description="HTTP method, e.g. GET or POST")
    path_nodes: List[str] = Field(default_factory=list, description="Addressed resource path segments")
    response_schema: Optional[Dict[str, Any]] = None
    headers: Dict[str, Optional[List[str]]] = Field(default_factory=dict)
    query_string: str = ""
    content_type: Optional[str] = None
    request_body: Optional[str] = None
    request_schema: Optional[Dict[str, Any]] = None
    components: Dict[str, Any] = Field(default_factory=dict, description="Named component schemas for $ref lookups")
    is_body_valid: bool = True

    @field_validator("http_method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @field_validator("headers", mode="before")
    @classmethod
    def _listify_headers(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {key: [item] if isinstance(item, str) else item for key, item in value.items()}

    @classmethod
    def from_url(cls, http_method: str, url: str, **kwargs: Any) -> "SnippetRequest":
        """Build a request from a URL, splitting path segments and query string.

        Segments are taken literally: a concrete id such as ``123`` in
        ``/users/123`` is not recognized as a collection index, so only
        templated segments like ``{user-id}`` singularize the body name.
        """
        parts = urlsplit(url)
        segments = [unquote(segment) for segment in parts.path.split("/") if segment]
        return cls(http_method=http_method, path_nodes=segments, query_string=parts.query, **kwargs)

    def nodes(self) -> List[PathNode]:
        return [PathNode(segment) for segment in self.path_nodes]

    def body_schema(self) -> Optional[SchemaLookup]:
        return schema_from_dict(self.request_schema, self.components)
