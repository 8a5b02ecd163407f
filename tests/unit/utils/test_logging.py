from __future__ import annotations

import json
import logging

from logfit.utils.logging import ContextFilter, JSONFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("logfit.fitting", logging.WARNING, __file__, 1, "Distribution fit failed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context_fields() -> None:
    record = _record(family="beta", stage="precheck", n_samples=2, unrelated="x")
    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "logfit.fitting"
    assert payload["message"] == "Distribution fit failed"
    assert payload["family"] == "beta"
    assert payload["stage"] == "precheck"
    assert payload["n_samples"] == 2
    assert "unrelated" not in payload
    assert payload["timestamp"].endswith("Z")


def test_context_filter_does_not_override_record_values() -> None:
    record = _record(component="ranking")
    ContextFilter(run_id="abc123", component="cli").filter(record)
    assert record.run_id == "abc123"
    assert record.component == "ranking"


def test_configure_logging_installs_single_json_handler() -> None:
    configure_logging(run_id="r1", component="cli", level="debug")
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert root.level == logging.DEBUG
