"""Error Types

AppError is the typed error value used in two places: fatal contract faults
(raised wrapped in an AppErrorException) and whole-entity validation failures
handed to callers through `Entity.validate_result()`. Ok/Err give callers a
Result to branch on instead of a bool plus a side channel.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
E = TypeVar("E", bound="AppError")

_CATEGORIES = {2: "validation", 5: "business", 9: "internal"}


class ErrorCode(Enum):
    """Error code taxonomy.

    E2xxx: syntactic rule violations
    E5xxx: business rule violations reported by guards
    E9xxx: contract faults that abort the validating call
    """
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2003_OUT_OF_RANGE = 2003
    E2006_TOO_SHORT = 2006
    E2007_MISMATCH = 2007
    E2008_CONDITIONAL_REQUIRED = 2008
    E2010_INVALID_EMAIL = 2010
    E2012_INVALID_DATE = 2012
    E2013_INVALID_TIME = 2013

    E5000_BUSINESS_GENERIC = 5000

    E9010_SCHEMA_INVALID = 9010
    E9011_CYCLE_DETECTED = 9011
    E9012_DEPTH_EXCEEDED = 9012
    E9020_GUARD_CONTRACT = 9020
    E9030_REPOSITORY_UNAVAILABLE = 9030

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.value // 1000, "internal")

    @property
    def is_fatal(self) -> bool:
        return self.category == "internal"


def _correlation_id() -> str:
    return uuid4().hex[:8]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AppError:
    """Typed error with a code, a message and structured metadata.

    `origin` names the component that produced the error ("validator",
    "schema", "guards", "entity"); `correlation_id` ties log lines to it.
    """
    code: ErrorCode
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    origin: str = ""
    correlation_id: str = field(default_factory=_correlation_id)
    timestamp: datetime = field(default_factory=_now)
    cause: BaseException | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for renderers (CLI, API layer)."""
        return {
            "code": self.code.name,
            "category": self.code.category,
            "message": self.message,
            "origin": self.origin,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful Result."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"unwrap_err() on Ok({self.value!r})")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed Result carrying an AppError."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"unwrap() on Err: {self.error}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
