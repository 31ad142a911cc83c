"""Business Rule Result

Validity verdict plus per-path messages returned by guards. Starts valid;
any added violation flips it to invalid. Merging never drops messages and
merging a valid empty result changes nothing.

    result = BusinessRuleResult.success()
    result.add_violation("order_number", "is already taken")
    result.merge(check_dates(order))
"""
from __future__ import annotations

from .errors import Errors


class BusinessRuleResult:
    __slots__ = ("_valid", "_violations")

    def __init__(self) -> None:
        self._valid = True
        self._violations: dict[str, list[str]] = {}

    @classmethod
    def success(cls) -> BusinessRuleResult:
        return cls()

    @classmethod
    def failure(cls) -> BusinessRuleResult:
        """An invalid result with nothing itemized."""
        result = cls()
        result._valid = False
        return result

    def add_violation(self, field: str, message: str) -> BusinessRuleResult:
        """Record `message` at field path `field` (e.g. "order_items.0.start_date")."""
        self._valid = False
        self._violations.setdefault(field, []).append(message)
        return self

    def merge(self, other: BusinessRuleResult) -> BusinessRuleResult:
        if not other.is_valid:
            self._valid = False
            for field, messages in other._violations.items():
                self._violations.setdefault(field, []).extend(messages)
        return self

    @property
    def is_valid(self) -> bool:
        return self._valid

    @property
    def violations(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._violations.items()}

    def violations_for(self, field: str) -> list[str]:
        return list(self._violations.get(field, ()))

    def to_errors(self) -> Errors:
        """Collector view of the violations; guard messages carry an empty context."""
        errors = Errors()
        for field, messages in self._violations.items():
            for message in messages:
                errors.add(field, message)
        return errors

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BusinessRuleResult):
            return NotImplemented
        return self._valid == other._valid and self._violations == other._violations

    def __repr__(self) -> str:
        return f"BusinessRuleResult(valid={self._valid}, violations={self._violations!r})"
