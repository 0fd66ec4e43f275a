"""Errors raised while building a snippet code graph."""

from __future__ import annotations


class SnippetGraphError(Exception):
    pass


class UnsupportedContentTypeError(SnippetGraphError):
    def __init__(self, content_type: str | None) -> None:
        super().__init__(f"Unsupported content type: {content_type}")
        self.content_type = content_type


class MalformedJsonError(SnippetGraphError):
    pass


class UnexpectedJsonShapeError(SnippetGraphError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"Expected JSON object and got {kind}")
        self.kind = kind


class UnsupportedValueKindError(SnippetGraphError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported JSON value kind: {kind}")
        self.kind = kind


class BodyTooDeepError(SnippetGraphError):
    def __init__(self, max_depth: int) -> None:
        super().__init__(f"Request body nests deeper than {max_depth} levels")
        self.max_depth = max_depth
