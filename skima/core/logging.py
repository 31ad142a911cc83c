"""Structured Logging

structlog on top of the stdlib "skima" logger. Libraries should not
configure logging for their host application, so nothing here runs on
import; applications call `configure_logging()` (or
`configure_from_settings()`) once at startup.

Events are emitted under four domain loggers:
- skima.validation: traversal and rule violations (debug)
- skima.guards: guard failures (info) and guard exceptions (error)
- skima.models: entity outcomes and create() calls
- skima.faults: contract faults, logged with their correlation id as raised
"""
import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

SERVICE = "skima"
VERSION = "0.1.0"

# Violation contexts and guard payloads may carry raw field values
SENSITIVE_KEYS = frozenset({"password", "password_confirmation", "token", "secret", "actual", "value"})
REDACTED = "[REDACTED]"
MAX_REDACT_DEPTH = 5


def _redact(obj: Any, depth: int = 0) -> Any:
    if depth > MAX_REDACT_DEPTH:
        return obj
    if isinstance(obj, dict):
        return {
            k: REDACTED if isinstance(k, str) and k.lower() in SENSITIVE_KEYS else _redact(v, depth + 1)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def _censor_sensitive_keys(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact sensitive keys inside nested payloads; top-level keys are left alone."""
    for key, value in event_dict.items():
        if isinstance(value, (dict, list, tuple)):
            event_dict[key] = _redact(value)
    return event_dict


def _add_service_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE)
    event_dict.setdefault("version", VERSION)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors applied to structlog and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_service_info,
        _censor_sensitive_keys,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route skima's structlog events through a stdout handler on the "skima" logger.

    Args:
        level: stdlib level name (DEBUG shows every rule violation)
        json_logs: JSON lines when True, colored console output otherwise
    """
    shared = get_shared_processors()

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_logs)],
    ))

    root = logging.getLogger(SERVICE)
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False


def configure_from_settings() -> None:
    from skima.core.config import get_settings

    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggerRegistry:
    """One shared logger per domain, named "skima.<domain>"."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, domain: str) -> structlog.stdlib.BoundLogger:
        if domain not in cls._loggers:
            cls._loggers[domain] = get_logger(f"{SERVICE}.{domain}")
        return cls._loggers[domain]


def validation_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("validation")


def guard_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("guards")


def model_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("models")


def fault_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("faults")
