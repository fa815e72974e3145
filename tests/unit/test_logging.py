from __future__ import annotations

import json
import logging

from querybench.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_ROWS = 10
EXPECTED_SEQUENCE = 3


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.rows = EXPECTED_ROWS
    record.sequence = EXPECTED_SEQUENCE

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["rows"] == EXPECTED_ROWS
    assert payload["sequence"] == EXPECTED_SEQUENCE
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"sequence": EXPECTED_SEQUENCE}

    payload = json.loads(_json_formatter(record))

    assert payload["sequence"] == EXPECTED_SEQUENCE


def test_json_formatter_stringifies_unserializable_values() -> None:
    record = _record()
    record.error = ValueError("boom")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["error"] == "boom"


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        configure_logging(level="debug", json_logs=True)

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

        configure_logging(level="INFO")
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
