"""Logging helpers with redaction."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional


_SENSITIVE_KEYS = re.compile(r"(authorization|cookie|token|secret|api[_-]?key|password)", re.IGNORECASE)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_headers(headers: Mapping[str, Optional[List[str]]]) -> Dict[str, Optional[List[str]]]:
    redacted: Dict[str, Optional[List[str]]] = {}
    for key, values in headers.items():
        if _SENSITIVE_KEYS.search(key):
            redacted[key] = ["***REDACTED***"]
        else:
            redacted[key] = values
    return redacted
