"""Error Builders

One constructor per failure the library reports. Each returns `Err[AppError]`
so callers can either hand the Result on or raise it via
`raise_error(builder(...).error)`.
"""
from typing import Any

from .types import AppError, ErrorCode, Err


def _err(code: ErrorCode, message: str, origin: str, **metadata: Any) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        metadata={k: v for k, v in metadata.items() if v is not None},
        origin=origin,
    ))


# =============================================================================
# Data violations (E2xxx / E5xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata: Any,
) -> Err[AppError]:
    return _err(code, message, origin, field=field, **metadata)


def validation_failed(
    entity: str,
    errors: dict[str, list[dict[str, Any]]],
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    origin: str = "",
) -> Err[AppError]:
    """Whole-entity failure carrying the `{path: [{message, context}]}` mapping.

    A single violation is spelled out in the message; several are counted.
    """
    count = sum(len(entries) for entries in errors.values())
    if count == 1:
        path, entries = next(iter(errors.items()))
        message = f"{path}: {entries[0]['message']}"
    else:
        message = f"Validation of {entity} failed: {count} errors"
    return _err(code, message, origin, entity=entity, errors=errors, error_count=count)


# =============================================================================
# Contract faults (E9xxx)
# =============================================================================

def unknown_field(entity: str, field: str, rule: str, origin: str = "") -> Err[AppError]:
    return _err(
        ErrorCode.E9010_SCHEMA_INVALID,
        f"{rule} on {entity} references unknown field '{field}'",
        origin,
        entity=entity,
        field=field,
        rule=rule,
    )


def schema_missing(type_name: str, origin: str = "") -> Err[AppError]:
    return _err(ErrorCode.E9010_SCHEMA_INVALID, f"No entity schema registered for {type_name}", origin, entity=type_name)


def cycle_detected(entity: str, path: str, origin: str = "") -> Err[AppError]:
    return _err(
        ErrorCode.E9011_CYCLE_DETECTED,
        f"Cyclic reference to {entity} at '{path}'",
        origin,
        entity=entity,
        path=path,
    )


def depth_exceeded(path: str, max_depth: int, origin: str = "") -> Err[AppError]:
    return _err(
        ErrorCode.E9012_DEPTH_EXCEEDED,
        f"Nesting at '{path}' exceeds maximum depth of {max_depth}",
        origin,
        path=path,
        max_depth=max_depth,
    )


def guard_contract_violated(guard: str, reason: str, origin: str = "") -> Err[AppError]:
    return _err(
        ErrorCode.E9020_GUARD_CONTRACT,
        f"Guard {guard} violates the guard contract: {reason}",
        origin,
        guard=guard,
        reason=reason,
    )


def repository_unavailable(entity: str, reason: str = "", origin: str = "") -> Err[AppError]:
    message = f"Repository for {entity} not usable"
    if reason:
        message += f": {reason}"
    return _err(ErrorCode.E9030_REPOSITORY_UNAVAILABLE, message, origin, entity=entity, reason=reason or None)
