"""Guards

A guard is any object with `validate(entity)` returning a BusinessRuleResult
(an Errors collector is also accepted). Guards run in registration order and
only after syntactic validation found nothing; see Entity.validate().

    class UniqueOrderNumber:
        def validate(self, order):
            if repository.exists(order.order_number):
                return BusinessRuleResult.failure().add_violation("order_number", "is already taken")
            return BusinessRuleResult.success()
"""
from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable

from skima.core.config import get_settings
from skima.core.errors import guard_contract_violated, raise_error
from skima.core.logging import guard_logger

from .business import BusinessRuleResult
from .errors import Errors

log = guard_logger()


@runtime_checkable
class Guard(Protocol):
    """Business-rule check over a whole entity."""

    def validate(self, entity: Any) -> BusinessRuleResult: ...


def guard_name(guard: Any) -> str:
    return type(guard).__name__


def ensure_guard(guard: Any) -> Guard:
    """Return `guard` unchanged, or raise GuardContractError if it has no callable validate()."""
    if not isinstance(guard, Guard) or not callable(getattr(guard, "validate", None)):
        raise_error(guard_contract_violated(guard_name(guard), "missing callable validate()", origin="guards").error)
    return guard


def result_errors(guard: Any, result: Any) -> Errors:
    """Collector view of one guard's result.

    An invalid result that itemizes nothing still counts as a failure and is
    reported once under the configured base path.
    """
    if isinstance(result, Errors):
        return result
    if not isinstance(result, BusinessRuleResult):
        raise_error(guard_contract_violated(
            guard_name(guard), f"returned {type(result).__name__}, expected BusinessRuleResult", origin="guards",
        ).error)

    errors = result.to_errors()
    if not result.is_valid and not errors.any():
        settings = get_settings()
        errors.add(settings.GUARD_FAILURE_PATH, settings.GUARD_FAILURE_MESSAGE, {"guard": guard_name(guard)})
    return errors


def run_guards(entity: Any, guards: Iterable[Any]) -> Errors:
    """Run every guard against `entity` in order and fold their violations together.

    Exceptions raised inside a guard are not caught; they are logged and
    propagate to the caller.
    """
    errors = Errors()
    for guard in guards:
        name = guard_name(guard)
        ensure_guard(guard)
        try:
            result = guard.validate(entity)
        except Exception:
            log.exception("guard_raised", guard=name, entity=type(entity).__name__)
            raise
        guard_errors = result_errors(guard, result)
        if guard_errors.any():
            log.info("guard_failed", guard=name, entity=type(entity).__name__, paths=guard_errors.paths())
        errors.merge(guard_errors)
    return errors
