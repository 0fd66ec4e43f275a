"""Unit tests for query string normalization."""

import pytest

from snippet_graph.models import PropertyType
from snippet_graph.query import (
    extract_function_calls,
    normalize_parameter_name,
    normalize_parameter_value,
    parse_query_parameters,
)


def _pairs(query: str) -> list[tuple[str | None, str | None]]:
    return [(p.name, p.value) for p in parse_query_parameters(query)]


def test_odata_filter_and_top() -> None:
    """Function-call filters survive key=value splitting and system params lose their $."""
    assert _pairs("$filter=contains(displayName,'a')&$top=3") == [
        ("filter", "contains(displayName,'a')"),
        ("top", "3"),
    ]


def test_parameters_are_string_typed() -> None:
    params = parse_query_parameters("$select=id")
    assert params[0].type == PropertyType.STRING
    assert params[0].children is None


@pytest.mark.parametrize("query", ["", None])
def test_empty_query_yields_no_parameters(query: str | None) -> None:
    assert parse_query_parameters(query) == []


def test_leading_question_mark_is_ignored() -> None:
    assert _pairs("?$top=10") == [("top", "10")]


def test_comma_separated_values_are_kept() -> None:
    assert _pairs("$select=id,displayName") == [("select", "id,displayName")]


def test_repeated_keys_are_merged() -> None:
    assert _pairs("a=1&b=x&a=2") == [("a", "1,2"), ("b", "x")]


def test_encoded_key_is_decoded_before_stripping_marker() -> None:
    assert _pairs("%24count=true") == [("count", "true")]


def test_key_without_value() -> None:
    assert _pairs("$count") == [("count", "")]


def test_extract_function_calls_requires_arguments() -> None:
    residual, replacements = extract_function_calls("a=f()&b=g(x)")
    assert residual == "a=f()&b=g"
    assert replacements == {"g": "(x)"}


def test_extract_function_calls_keeps_first_arguments() -> None:
    residual, replacements = extract_function_calls("$filter=startswith(a,'x') or startswith(b,'y')")
    assert replacements == {"startswith": "(a,'x')"}
    assert residual == "$filter=startswith or startswith"


def test_arguments_end_at_first_closing_parenthesis() -> None:
    """Nested parentheses inside quoted arguments are not understood."""
    _, replacements = extract_function_calls("$filter=contains(name,'a)b')")
    assert replacements == {"contains": "(name,'a)"}


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("$filter", "filter"),
        ("$Expand", "expand"),
        ("$$odd", "$odd"),
        ("Top", "top"),
        ("page%20size", "page size"),
        ("", ""),
    ],
)
def test_normalize_parameter_name(name: str, expected: str) -> None:
    assert normalize_parameter_name(name) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("True", "true"),
        ("FALSE", "false"),
        ("42", "42"),
        ("007", "7"),
        ("-5", "-5"),
        ("3.0", "3.0"),
        ("99999999999", "99999999999"),
        ("1_000", "1_000"),
        ("hello%20world", "hello world"),
    ],
)
def test_normalize_parameter_value(value: str, expected: str) -> None:
    assert normalize_parameter_value(value, {}) == expected


def test_normalize_value_reattaches_function_arguments() -> None:
    replacements = {"contains": "(name,'a')"}
    assert normalize_parameter_value("id,contains", replacements) == "id,contains(name,'a')"


def test_canonical_integer_is_idempotent() -> None:
    once = normalize_parameter_value("0042", {})
    assert normalize_parameter_value(once, {}) == once == "42"
