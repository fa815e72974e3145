"""
Logging setup for querybench.

Every module logs through `get_logger(__name__)` and attaches per-query facts
(sequence, paths, timings, row counts) with `extra=`. How those lines look is
decided once, by `configure_logging`:

- console: one line per event, `time | level | logger | message`
- json: one object per event, with every `extra` field as a top-level key,
  ready for a log collector that aggregates benchmark runs

Example:
    from querybench.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_logs=True)
    get_logger("querybench.runners").info("Query streamed", extra={"sequence": 4, "rows": 250})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
CONSOLE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}


def _json_formatter(record: logging.LogRecord) -> str:
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info

    payload.update(
        (key, value) for key, value in vars(record).items() if key not in _RESERVED_ATTRS
    )
    # Callers may also pass extra={"extra": {...}}; flatten that too.
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)

    # Exceptions and paths in `extra` are rendered with str().
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Formats each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def _dict_config(level: str, formatter: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": CONSOLE_DATE_FORMAT},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "level": level,
            }
        },
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Send all querybench logging to stderr at `level`.

    `level` is case-insensitive ("debug" and "DEBUG" both work). Calling this
    again replaces the previous handler, so the CLI can reconfigure per run.
    """
    formatter = "json" if json_logs else "console"
    logging.config.dictConfig(_dict_config(level.upper(), formatter))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
