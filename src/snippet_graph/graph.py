"""Assembly of the immutable snippet code graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .body import BodyParser
from .config import Settings, get_settings
from .logging import redact_headers
from .models import CodeProperty, PathNode, PropertyType
from .query import parse_query_parameters
from .request import SnippetRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodeGraph:
    http_method: str
    nodes: Tuple[PathNode, ...]
    response_schema: Optional[Dict[str, Any]]
    headers: Tuple[CodeProperty, ...]
    parameters: Tuple[CodeProperty, ...]
    body: CodeProperty
    options: Tuple[CodeProperty, ...] = field(default=())

    def has_headers(self) -> bool:
        return bool(self.headers)

    def has_options(self) -> bool:
        return bool(self.options)

    def has_parameters(self) -> bool:
        return bool(self.parameters)

    def has_body(self) -> bool:
        return self.body.type != PropertyType.DEFAULT

    def as_dict(self) -> Dict[str, Any]:
        return {
            "http_method": self.http_method,
            "nodes": [node.segment for node in self.nodes],
            "response_schema": self.response_schema,
            "headers": [header.as_dict() for header in self.headers],
            "options": [option.as_dict() for option in self.options],
            "parameters": [parameter.as_dict() for parameter in self.parameters],
            "body": self.body.as_dict(),
        }


def parse_headers(
    headers: Mapping[str, Optional[Iterable[str]]],
    excluded: Iterable[str] = ("host",),
) -> List[CodeProperty]:
    """Map headers to string properties, dropping transport-only ones."""
    excluded_names = {name.lower() for name in excluded}
    properties: List[CodeProperty] = []
    for name, values in headers.items():
        if name.lower() in excluded_names:
            continue
        first = next(iter(values), None) if values is not None else None
        properties.append(CodeProperty(name=name, value=first, type=PropertyType.STRING))
    return properties


def build_code_graph(request: SnippetRequest, settings: Optional[Settings] = None) -> CodeGraph:
    settings = settings or get_settings()
    logger.debug(
        "Building code graph method=%s nodes=%s headers=%s",
        request.http_method,
        request.path_nodes,
        redact_headers(request.headers),
    )

    nodes = tuple(request.nodes())
    body = BodyParser(max_depth=settings.max_body_depth).parse(
        request.request_body,
        request.content_type,
        request.body_schema(),
        nodes=nodes,
        is_body_valid=request.is_body_valid,
    )

    return CodeGraph(
        http_method=request.http_method,
        nodes=nodes,
        response_schema=request.response_schema,
        headers=tuple(parse_headers(request.headers, settings.excluded_header_names())),
        parameters=tuple(parse_query_parameters(request.query_string)),
        body=body,
    )
