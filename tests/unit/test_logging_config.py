import json
import logging

import pytest

from practicelab.logging_config import (
    JSONFormatter,
    SensitiveDataFilter,
    log_structured,
    setup_logging,
)


def _record(msg, **extra):
    record = logging.LogRecord("practicelab.test", logging.INFO, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    payload = json.loads(JSONFormatter().format(_record("Routed", exercise_type="coding")))
    assert payload["message"] == "Routed"
    assert payload["level"] == "INFO"
    assert payload["exercise_type"] == "coding"


def test_sensitive_data_filter_redacts():
    record = _record("password=hunter2")
    assert SensitiveDataFilter().filter(record) is True
    assert "password" not in record.msg


def test_setup_logging_writes_to_log_dir(test_log_dir, monkeypatch):
    monkeypatch.setenv("LOG_DIR", test_log_dir)
    logger = setup_logging("practicelab.logtest", level="debug")

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 2

    # Calling again does not stack handlers
    assert len(setup_logging("practicelab.logtest").handlers) == 2


def test_log_structured_rejects_unknown_level():
    logger = logging.getLogger("practicelab.logtest.structured")
    with pytest.raises(ValueError):
        log_structured(logger, "loud", "message", {"a": 1})
