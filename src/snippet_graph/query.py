"""Query string normalization for code graph parameters.

OData filter values such as ``contains(displayName,'a')`` carry commas and
parentheses that would otherwise break ``key=value`` splitting, so function
call arguments are lifted out before parsing and re-attached afterwards.
Arguments end at the first closing parenthesis; parentheses inside quoted
arguments are not understood.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, List, Tuple
from urllib.parse import parse_qsl, unquote_plus

from .models import CodeProperty, PropertyType

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^\s*[+-]?[0-9]+\s*$")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _scan_function_calls(query: str) -> Iterator[Tuple[str, str]]:
    index = 0
    length = len(query)
    while index < length:
        if not _is_word_char(query[index]):
            index += 1
            continue
        start = index
        while index < length and _is_word_char(query[index]):
            index += 1
        if index < length and query[index] == "(":
            close = query.find(")", index + 1)
            if close > index + 1:
                yield query[start:index], query[index : close + 1]
                index = close + 1


def extract_function_calls(query: str) -> Tuple[str, Dict[str, str]]:
    """Strip ``identifier(arguments)`` argument lists from ``query``.

    Returns the residual query string and a mapping of identifier to the
    removed ``(arguments)`` text.
    """
    replacements: Dict[str, str] = {}
    for identifier, arguments in list(_scan_function_calls(query)):
        replacements.setdefault(identifier, arguments)
        query = query.replace(arguments, "")
    return query, replacements


def normalize_parameter_name(name: str) -> str:
    if name.startswith("$"):
        name = name[1:]
    name = unquote_plus(name)
    return name[:1].lower() + name[1:]


def _is_int32(value: str) -> bool:
    if not _INTEGER.match(value):
        return False
    return _INT32_MIN <= int(value) <= _INT32_MAX


def normalize_parameter_value(value: str, replacements: Dict[str, str]) -> str:
    decoded = unquote_plus(value)
    if decoded.lower() in {"true", "false"}:
        return decoded.lower()
    if _is_int32(decoded):
        return str(int(decoded))
    tokens = [token + replacements[token] if token in replacements else token for token in decoded.split(",")]
    return ",".join(tokens)


def parse_query_parameters(query_string: str | None) -> List[CodeProperty]:
    if not query_string:
        return []

    residual, replacements = extract_function_calls(query_string.lstrip("?"))
    if replacements:
        logger.debug("Lifted function calls from query: %s", sorted(replacements))

    grouped: Dict[str, List[str]] = {}
    for key, value in parse_qsl(residual, keep_blank_values=True):
        grouped.setdefault(key, []).append(value)

    return [
        CodeProperty(
            name=normalize_parameter_name(key),
            value=normalize_parameter_value(",".join(values), replacements),
            type=PropertyType.STRING,
        )
        for key, values in grouped.items()
    ]
