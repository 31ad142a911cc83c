"""Error Collector

Violations keyed by dot-separated field path. Within a path, violations keep
insertion order; paths keep first-insertion order, which matches traversal
order. A collector only grows: there is no removal.

External shape (what `to_dict()` produces and renderers depend on):
{
    "order_number": [{"message": "must be present", "context": {}}],
    "order_items.0.quantity": [
        {"message": "must be greater than or equal to 0", "context": {"min": 0, "actual": -1}}
    ]
}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from skima.core.errors import AppError, ErrorCode, validation_failed


@dataclass(frozen=True, slots=True)
class Violation:
    """A single rendered violation: message plus the substitutions behind it."""
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "context": dict(self.context)}


class Errors:
    """Accumulates violations for one validation pass."""

    __slots__ = ("_errors",)

    def __init__(self) -> None:
        self._errors: dict[str, list[Violation]] = {}

    def add(self, path: str, message: str, context: Mapping[str, Any] | None = None) -> None:
        """Append a violation at `path`."""
        self.add_violation(path, Violation(message, context or {}))

    def add_violation(self, path: str, violation: Violation) -> None:
        self._errors.setdefault(path, []).append(violation)

    def for_path(self, path: str) -> list[Violation]:
        """Violations recorded at `path`; empty list if none."""
        return list(self._errors.get(path, ()))

    def any(self) -> bool:
        return bool(self._errors)

    def all(self) -> dict[str, list[Violation]]:
        return {path: list(violations) for path, violations in self._errors.items()}

    def count(self) -> int:
        """Total number of violations across all paths."""
        return sum(len(violations) for violations in self._errors.values())

    def paths(self) -> list[str]:
        return list(self._errors)

    def merge(self, other: Errors) -> Errors:
        """Append every violation of `other`, path by path, keeping its order."""
        for path, violations in other._errors.items():
            for violation in violations:
                self.add_violation(path, violation)
        return self

    def prefixed(self, prefix: str) -> Errors:
        """Copy with every path re-keyed as `{prefix}.{path}`."""
        rekeyed = Errors()
        for path, violations in self._errors.items():
            rekeyed._errors[f"{prefix}.{path}"] = list(violations)
        return rekeyed

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Serialize to the external `{path: [{message, context}]}` shape."""
        return {path: [v.to_dict() for v in violations] for path, violations in self._errors.items()}

    def messages(self) -> dict[str, list[str]]:
        """Rendered messages only, grouped by path."""
        return {path: [v.message for v in violations] for path, violations in self._errors.items()}

    def to_app_error(
        self,
        entity: str = "entity",
        code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
        origin: str = "",
    ) -> AppError:
        """Convert to an AppError carrying the full error mapping."""
        return validation_failed(entity, self.to_dict(), code=code, origin=origin).error

    def __getitem__(self, path: str) -> list[Violation]:
        return list(self._errors[path])

    def __contains__(self, path: object) -> bool:
        return path in self._errors

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._errors))

    def __len__(self) -> int:
        return self.count()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Errors):
            return NotImplemented
        return list(self._errors.items()) == list(other._errors.items())

    def __repr__(self) -> str:
        return f"Errors({self.messages()!r})"
