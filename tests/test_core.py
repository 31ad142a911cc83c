"""
Tests for settings, logging helpers and the error taxonomy.
"""

import logging

import pytest
import structlog
import structlog.testing

from skima import ErrorCode, ValidationContext
from skima.core.config import Settings, get_settings
from skima.core.errors import (
    AppErrorException,
    CycleDetectedError,
    Err,
    Ok,
    cycle_detected,
    raise_error,
    raise_result,
    validation_error,
)
from skima.core.logging import LoggerRegistry, _censor_sensitive_keys, configure_logging, validation_logger


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("SKIMA_MAX_DEPTH", raising=False)
    settings = Settings(_env_file=None)

    assert settings.MAX_DEPTH == 64
    assert settings.GUARD_FAILURE_PATH == "base"
    assert settings.GUARD_FAILURE_MESSAGE == "is invalid"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SKIMA_MAX_DEPTH", "3")
    monkeypatch.setenv("SKIMA_GUARD_FAILURE_PATH", "__all__")

    settings = Settings(_env_file=None)

    assert settings.MAX_DEPTH == 3
    assert settings.GUARD_FAILURE_PATH == "__all__"


def test_context_reads_max_depth_from_settings():
    assert ValidationContext().max_depth == get_settings().MAX_DEPTH
    assert ValidationContext(max_depth=5).max_depth == 5


def test_contexts_do_not_share_state():
    a, b = ValidationContext(), ValidationContext()
    assert a.registry is not b.registry


def test_error_code_categories():
    assert ErrorCode.E2001_REQUIRED_FIELD_MISSING.category == "validation"
    assert ErrorCode.E5000_BUSINESS_GENERIC.category == "business"
    assert ErrorCode.E9011_CYCLE_DETECTED.is_fatal
    assert not ErrorCode.E2000_VALIDATION_GENERIC.is_fatal


def test_raise_error_maps_code_to_exception():
    error = cycle_detected("Node", "parent").error

    with pytest.raises(CycleDetectedError) as exc_info:
        raise_error(error)

    assert exc_info.value.error is error
    assert isinstance(exc_info.value, AppErrorException)


def test_raise_error_falls_back_to_base_exception():
    with pytest.raises(AppErrorException) as exc_info:
        raise_error(validation_error("bad").error)

    assert type(exc_info.value) is AppErrorException


def test_raise_result():
    raise_result(Ok(1))
    with pytest.raises(AppErrorException):
        raise_result(Err(validation_error("bad").error))


def test_censor_nested_sensitive_keys():
    event = {
        "event": "rule_violated",
        "value": "kept at top level",
        "context": {"password": "hunter2", "min": 3, "nested": [{"token": "abc"}]},
    }

    censored = _censor_sensitive_keys(None, "info", event)

    assert censored["value"] == "kept at top level"
    assert censored["context"]["password"] == "[REDACTED]"
    assert censored["context"]["min"] == 3
    assert censored["context"]["nested"][0]["token"] == "[REDACTED]"


def test_logger_registry_reuses_loggers():
    assert validation_logger() is LoggerRegistry.get("validation")


def test_validation_emits_events(invalid_order):
    with structlog.testing.capture_logs() as logs:
        invalid_order.validate()

    events = [entry["event"] for entry in logs]
    assert "rule_violated" in events
    assert "entity_validated" in events
    assert {"event": "entity_invalid", "entity": "Order", "stage": "syntactic", "violations": 3, "log_level": "info"} in logs


def test_configure_logging_sets_up_skima_logger():
    try:
        configure_logging(level="DEBUG", json_logs=True)
        logger = logging.getLogger("skima")
        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert len(logger.handlers) == 1
    finally:
        structlog.reset_defaults()
        logging.getLogger("skima").handlers = []
        logging.getLogger("skima").propagate = True
        logging.getLogger("skima").setLevel(logging.NOTSET)


def test_app_error_plain_view():
    error = cycle_detected("Node", "parent", origin="validator").error
    data = error.to_dict()

    assert data["code"] == "E9011_CYCLE_DETECTED"
    assert data["category"] == "internal"
    assert data["origin"] == "validator"
    assert data["metadata"] == {"entity": "Node", "path": "parent"}
    assert str(error).startswith("[E9011_CYCLE_DETECTED] Cyclic reference to Node at 'parent'")


def test_raise_error_logs_fault_with_correlation_id():
    error = cycle_detected("Node", "parent").error

    with structlog.testing.capture_logs() as logs:
        with pytest.raises(CycleDetectedError):
            raise_error(error)

    fault = next(entry for entry in logs if entry["event"] == "fault_raised")
    assert fault["log_level"] == "error"
    assert fault["correlation_id"] == error.correlation_id
    assert fault["code"] == "E9011_CYCLE_DETECTED"


def test_result_unwrapping():
    failure = Err(validation_error("bad").error)

    assert Ok(2).unwrap() == 2
    assert failure.is_err() and not failure.is_ok()
    with pytest.raises(ValueError):
        failure.unwrap()
    with pytest.raises(ValueError):
        Ok(1).unwrap_err()


def test_registry_membership_tracks_explicit_registrations():
    from skima import EntitySchema, SchemaRegistry

    from .entities import Order

    registry = SchemaRegistry()
    assert Order not in registry
    assert registry.lookup(Order) is Order.entity_schema()

    registry.register(Order, EntitySchema.build("Order", []))
    assert Order in registry
    assert registry.lookup(Order).fields == ()
