"""CLI entry point for building snippet code graphs."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import get_settings
from .errors import SnippetGraphError
from .graph import build_code_graph
from .logging import configure_logging
from .request import SnippetRequest

logger = logging.getLogger(__name__)


def _load_request(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a language-neutral code graph for an HTTP request")
    parser.add_argument("request", type=Path, help="Path to a JSON request description")
    parser.add_argument("--output", type=Path, default=None, help="Write the graph to this file instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        request = SnippetRequest(**_load_request(args.request))
        graph = build_code_graph(request, settings)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read request description %s: %s", args.request, exc)
        return 1
    except ValidationError as exc:
        logger.error("Invalid request description: %s", exc)
        return 1
    except SnippetGraphError as exc:
        logger.error("Failed to build code graph: %s", exc)
        return 1

    rendered = json.dumps(graph.as_dict(), indent=args.indent)
    if args.output:
        args.output.write_text(rendered + "\n", encoding="utf-8")
        logger.info("Wrote code graph to %s", args.output)
    else:
        sys.stdout.write(rendered + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
