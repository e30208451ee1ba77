import logging
import uuid

from weatherservice.errorlog import log_error


def test_returns_uuid4_identifier():
    error_id = log_error(RuntimeError("boom"), {"lat": "42.0"})
    assert uuid.UUID(error_id).version == 4


def test_identifiers_are_unique():
    ids = {log_error(RuntimeError("boom"), {}) for _ in range(20)}
    assert len(ids) == 20


def test_logs_fields_with_identifier(caplog):
    caplog.set_level(logging.ERROR, logger="weatherservice.errorlog")
    error_id = log_error(RuntimeError("boom"), {"lat": "42.0", "lon": "23.0"})
    record = caplog.records[-1]
    assert record.getMessage() == "Error occurred"
    assert record.levelno == logging.ERROR
    assert record.error_fields == {"lat": "42.0", "lon": "23.0", "id": error_id}
    assert record.error_detail == "boom"


def test_caller_fields_are_left_untouched():
    fields = {"key": "value"}
    log_error(ValueError("bad"), fields)
    assert fields == {"key": "value"}


def test_accepts_missing_error(caplog):
    caplog.set_level(logging.ERROR, logger="weatherservice.errorlog")
    error_id = log_error(None, None)
    record = caplog.records[-1]
    assert record.error_detail is None
    assert record.error_fields == {"id": error_id}