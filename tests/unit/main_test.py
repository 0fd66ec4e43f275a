"""Unit tests for the snippet-graph CLI."""

import json
from pathlib import Path

import pytest

from snippet_graph.main import main


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "request.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_prints_graph_as_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(
        tmp_path,
        {
            "http_method": "POST",
            "path_nodes": ["me", "sendMail"],
            "headers": {"Host": "graph.microsoft.com"},
            "query_string": "$top=1",
            "content_type": "application/json",
            "request_body": '{"saveToSentItems": false}',
        },
    )

    assert main([str(path)]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["headers"] == []
    assert data["parameters"] == [{"name": "top", "type": "string", "value": "1"}]
    assert data["body"]["name"] == "SendMailPostRequestBody"
    assert data["body"]["children"][0]["name"] == "additionalData"


def test_writes_output_file(tmp_path: Path) -> None:
    path = _write(tmp_path, {"http_method": "GET"})
    output = tmp_path / "graph.json"

    assert main([str(path), "--output", str(output), "--indent", "0"]) == 0
    assert json.loads(output.read_text(encoding="utf-8"))["body"]["type"] == "default"


def test_graph_errors_exit_non_zero(tmp_path: Path) -> None:
    path = _write(tmp_path, {"http_method": "POST", "request_body": "{broken"})
    assert main([str(path)]) == 1


def test_invalid_description_exits_non_zero(tmp_path: Path) -> None:
    path = _write(tmp_path, {"path_nodes": ["me"]})
    assert main([str(path)]) == 1


def test_missing_file_exits_non_zero(tmp_path: Path) -> None:
    assert main([str(tmp_path / "missing.json")]) == 1
