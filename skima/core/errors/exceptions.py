"""Exception Wrappers for Fatal Faults

Data violations never raise. Contract faults (bad schemas, cyclic graphs,
non-conforming guards, unusable repositories) abort the validating call by
raising an AppErrorException subclass that carries the AppError.
"""
from __future__ import annotations

from typing import NoReturn

from skima.core.logging import fault_logger

from .types import AppError, ErrorCode

log = fault_logger()


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class SchemaDefinitionError(AppErrorException):
    """A rule references a field its entity does not declare."""


class CycleDetectedError(AppErrorException):
    """The object graph refers back to an object still being validated."""


class DepthExceededError(AppErrorException):
    """The object graph nests deeper than the configured maximum."""


class GuardContractError(AppErrorException):
    """A guard is not callable as a guard or returned something other than a result."""


class RepositoryUnavailableError(AppErrorException):
    """The repository handed to create() cannot persist the entity."""


_EXCEPTIONS: dict[ErrorCode, type[AppErrorException]] = {
    ErrorCode.E9010_SCHEMA_INVALID: SchemaDefinitionError,
    ErrorCode.E9011_CYCLE_DETECTED: CycleDetectedError,
    ErrorCode.E9012_DEPTH_EXCEEDED: DepthExceededError,
    ErrorCode.E9020_GUARD_CONTRACT: GuardContractError,
    ErrorCode.E9030_REPOSITORY_UNAVAILABLE: RepositoryUnavailableError,
}


def raise_error(error: AppError) -> NoReturn:
    """Raise AppError as the exception matching its code.

    Usage:
        raise_error(cycle_detected("Order", "parent").error)
    """
    log.error("fault_raised", **error.to_dict())
    raise _EXCEPTIONS.get(error.code, AppErrorException)(error)


def raise_result(result) -> None:
    """Raise error if Result is Err, otherwise return.

    Usage:
        result = order.validate_result()
        raise_result(result)  # Raises if Err
    """
    if result.is_err():
        raise_error(result.unwrap_err())
