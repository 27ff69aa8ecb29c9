# file: osintsim/logging_config.py
"""
Logging configuration.

osintsim uses standard library logging. Modules attach context through
`extra=` (target, seed, columns, ...); the JSON formatter carries those fields
through, the plain formatter drops them.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# Attributes every LogRecord has; anything else on a record came from `extra=`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}

# Third-party loggers that are noisy at DEBUG.
_QUIET_LOGGERS = ("PIL", "asyncio")

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for k, v in record.__dict__.items():
            if k in _STANDARD_ATTRS or k.startswith("_"):
                continue
            payload[k] = v

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)


def configure_logging(
    *, level: str = "INFO", json_logging: bool = False, stream: TextIO | None = None
) -> None:
    """
    Configure root logging for CLI/GUI use.

    Args:
        stream: Where records go (default stdout). The CLI passes stderr so
            command output on stdout stays machine-readable.
    """

    root = logging.getLogger()
    root.setLevel(level.upper())

    # Replace existing handlers so a GUI restart or repeated CLI invocation
    # in one process does not duplicate output.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    if json_logging:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
