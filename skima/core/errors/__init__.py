"""Typed Errors and Fatal Faults

Data violations never surface here; they live in the Errors collector.
This package covers the two other cases:

- AppError / ErrorCode: typed error values, and Ok/Err Results carrying them
- AppErrorException subclasses: contract faults that abort a validate() call

Usage:
    from skima.core.errors import Err, Ok

    match order.validate_result():
        case Ok(entity):
            repository.create(entity)
        case Err(error):
            render(error.metadata["errors"])
"""
from .types import (
    AppError,
    Err,
    ErrorCode,
    Ok,
    Result,
)

from .builders import (
    cycle_detected,
    depth_exceeded,
    guard_contract_violated,
    repository_unavailable,
    schema_missing,
    unknown_field,
    validation_error,
    validation_failed,
)

from .exceptions import (
    AppErrorException,
    CycleDetectedError,
    DepthExceededError,
    GuardContractError,
    RepositoryUnavailableError,
    SchemaDefinitionError,
    raise_error,
    raise_result,
)

__all__ = [
    # Types
    "AppError",
    "Err",
    "ErrorCode",
    "Ok",
    "Result",
    # Builders
    "cycle_detected",
    "depth_exceeded",
    "guard_contract_violated",
    "repository_unavailable",
    "schema_missing",
    "unknown_field",
    "validation_error",
    "validation_failed",
    # Exceptions
    "AppErrorException",
    "CycleDetectedError",
    "DepthExceededError",
    "GuardContractError",
    "RepositoryUnavailableError",
    "SchemaDefinitionError",
    "raise_error",
    "raise_result",
]
