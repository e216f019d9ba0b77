"""Tests for correlation ID propagation and log formatting."""

import logging

import pytest

from document_service.observability.correlation import correlation_scope, get_correlation_id
from document_service.observability.logger import ContextFormatter, CorrelationIdFilter, LOG_FORMAT


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)
    for name, value in extra.items():
        setattr(record, name, value)
    return record


def test_scope_binds_given_id():
    with correlation_scope("abc") as correlation_id:
        assert correlation_id == "abc"
        assert get_correlation_id() == "abc"
    assert get_correlation_id() == ""


def test_scope_generates_id():
    with correlation_scope() as correlation_id:
        assert correlation_id
        assert get_correlation_id() == correlation_id


def test_nested_scope_restores_outer_id():
    with correlation_scope("outer"):
        with correlation_scope("inner"):
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"


def test_scope_restores_after_exception():
    with pytest.raises(RuntimeError):
        with correlation_scope("req-1"):
            raise RuntimeError("boom")
    assert get_correlation_id() == ""


def test_filter_stamps_current_id():
    record = make_record()
    with correlation_scope("req-1"):
        assert CorrelationIdFilter().filter(record) is True
    assert record.correlation_id == "req-1"


def test_filter_outside_request():
    record = make_record()
    CorrelationIdFilter().filter(record)
    assert record.correlation_id == "-"


def test_filter_keeps_explicit_id():
    record = make_record(correlation_id="submission-9")
    with correlation_scope("req-1"):
        CorrelationIdFilter().filter(record)
    assert record.correlation_id == "submission-9"


def test_formatter_appends_context_fields():
    record = make_record(correlation_id="c-1", s3_key="FORM/a.pdf", error_code="SlowDown", unrelated="x")

    line = ContextFormatter(LOG_FORMAT).format(record)

    assert "[c-1] message" in line
    assert line.endswith("| s3_key=FORM/a.pdf error_code=SlowDown")


def test_formatter_without_context():
    line = ContextFormatter(LOG_FORMAT).format(make_record(correlation_id="c-1"))
    assert line.endswith("[c-1] message")
