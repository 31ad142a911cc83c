"""Rule Descriptors

Each rule is an immutable descriptor (kind + parameters + message template)
attached to a field at type-definition time through `Annotated` metadata:

    class Order(Entity):
        order_number: Annotated[str, Presence(), MinLength(3)] = ""
        customer_email: Annotated[str | None, Email()] = None

Evaluation is pure: `rule.evaluate(value, sibling)` yields at most one
Violation, where `sibling(name)` resolves another field of the same object.
Templates name their placeholders (`{min}`, `{max}`, `{format}`, `{name}`,
`{ifField}`, `{ifValue}`); the violation context carries the same values.
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, ClassVar, Mapping

from email_validator import EmailNotValidError, validate_email

from skima.core.errors import ErrorCode

from .errors import Violation

SiblingLookup = Callable[[str], Any]

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_TIME_FORMAT = "%H:%M"


def is_empty(value: Any) -> bool:
    """The shared notion of "absent": None, "", an empty collection, or False."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def strictly_equal(left: Any, right: Any) -> bool:
    """Equality that also requires identical types (1 is not 1.0, 0 is not False)."""
    return type(left) is type(right) and left == right


def as_number(value: Any) -> int | float | Decimal | None:
    """Numeric view of `value`, or None when it is not a number.

    Numeric strings are parsed as Decimal; bools are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        if isinstance(value, Decimal) and value.is_nan():
            return None
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
        return None if parsed.is_nan() else parsed
    return None


def comparable(number: int | float | Decimal, bound: int | float | Decimal) -> tuple[Any, Any]:
    """Put a Decimal and a float on the same footing before comparing them.

    The float side is converted through its shortest repr, so "0.1" against a
    bound of 0.1 compares equal instead of below the binary float.
    """
    if isinstance(number, Decimal) and isinstance(bound, float):
        return number, Decimal(repr(bound))
    if isinstance(number, float) and isinstance(bound, Decimal):
        return Decimal(repr(number)), bound
    return number, bound


def render(template: str, params: Mapping[str, Any]) -> str:
    """Substitute each `{name}` placeholder with `str(value)`; unknown braces stay."""
    message = template
    for name, value in params.items():
        message = message.replace("{" + name + "}", str(value))
    return message


class Rule(ABC):
    """Base class for rule descriptors."""

    __slots__ = ()

    message: str
    code: ClassVar[ErrorCode] = ErrorCode.E2000_VALIDATION_GENERIC

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Short constraint name used in logs."""

    @property
    def references(self) -> tuple[str, ...]:
        """Sibling fields this rule reads; checked when the schema is built."""
        return ()

    @abstractmethod
    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        """Check `value`. Returns a Violation, or None if the rule holds."""

    def violation(self, params: Mapping[str, Any] | None = None, **extra: Any) -> Violation:
        params = dict(params or {})
        return Violation(render(self.message, params), {**params, **extra})


# ============================================================================
# Presence
# ============================================================================

@dataclass(frozen=True, slots=True)
class Presence(Rule):
    """Value must not be None, "", an empty collection, or False."""
    code = ErrorCode.E2001_REQUIRED_FIELD_MISSING
    message: str = "must be present"

    @property
    def constraint_name(self) -> str:
        return "presence"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        return self.violation() if is_empty(value) else None


@dataclass(frozen=True, slots=True)
class ConditionalPresence(Rule):
    """Presence, but only while sibling `if_field` holds exactly `if_value`."""
    code = ErrorCode.E2008_CONDITIONAL_REQUIRED
    if_field: str
    if_value: Any
    message: str = "must be present because {ifField} is {ifValue}"

    @property
    def constraint_name(self) -> str:
        return f"conditional_presence[{self.if_field}={self.if_value!r}]"

    @property
    def references(self) -> tuple[str, ...]:
        return (self.if_field,)

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        if not strictly_equal(sibling(self.if_field), self.if_value):
            return None
        if not is_empty(value):
            return None
        return self.violation({"ifField": self.if_field, "ifValue": self.if_value})


# ============================================================================
# Length and Range
# ============================================================================

@dataclass(frozen=True, slots=True)
class MinLength(Rule):
    """Text must be at least `min` characters. Non-text values are not checked."""
    code = ErrorCode.E2006_TOO_SHORT
    min: int
    message: str = "is too short (minimum is {min} characters)"

    @property
    def constraint_name(self) -> str:
        return f"min_length[{self.min}]"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        if isinstance(value, str) and len(value) < self.min:
            return self.violation({"min": self.min})
        return None


@dataclass(frozen=True, slots=True)
class MinValue(Rule):
    """Numeric value must be >= `min`. None is exempt."""
    code = ErrorCode.E2003_OUT_OF_RANGE
    min: int | float | Decimal
    message: str = "must be greater than or equal to {min}"

    @property
    def constraint_name(self) -> str:
        return f"min_value[{self.min}]"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        number = as_number(value)
        if number is None:
            return None
        number, bound = comparable(number, self.min)
        if number < bound:
            return self.violation({"min": self.min}, actual=value)
        return None


@dataclass(frozen=True, slots=True)
class MaxValue(Rule):
    """Numeric value must be <= `max`. None is exempt."""
    code = ErrorCode.E2003_OUT_OF_RANGE
    max: int | float | Decimal
    message: str = "must be less than or equal to {max}"

    @property
    def constraint_name(self) -> str:
        return f"max_value[{self.max}]"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        number = as_number(value)
        if number is None:
            return None
        number, bound = comparable(number, self.max)
        if number > bound:
            return self.violation({"max": self.max}, actual=value)
        return None


# ============================================================================
# Format
# ============================================================================

@dataclass(frozen=True, slots=True)
class Email(Rule):
    """Non-empty value must be a syntactically valid email address."""
    code = ErrorCode.E2010_INVALID_EMAIL
    message: str = "is not a valid email address"

    @property
    def constraint_name(self) -> str:
        return "email"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        if is_empty(value):
            return None
        if not isinstance(value, str):
            return self.violation()
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return self.violation()
        return None


def format_moment(moment: datetime, pattern: str) -> str:
    """strftime with `%Y` always rendered as four digits.

    glibc leaves years below 1000 unpadded, so "0099-01-01" would never
    round-trip through `%Y-%m-%d` otherwise.
    """
    padded = re.sub(r"%[%Y]", lambda m: m.group() if m.group() == "%%" else f"{moment.year:04d}", pattern)
    return moment.strftime(padded)


def round_trips(value: str, pattern: str) -> bool:
    """True if `value` parses with `pattern` and formats back to exactly `value`."""
    try:
        parsed = datetime.strptime(value, pattern)
    except ValueError:
        return False
    return format_moment(parsed, pattern) == value


@dataclass(frozen=True, slots=True)
class DateFormat(Rule):
    """Non-empty value must be text that round-trips through `format`."""
    code = ErrorCode.E2012_INVALID_DATE
    format: str = DEFAULT_DATE_FORMAT
    message: str = "is not a valid date (expected format: {format})"

    @property
    def constraint_name(self) -> str:
        return f"date_format[{self.format}]"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        if value is None or value == "":
            return None
        if isinstance(value, str) and round_trips(value, self.format):
            return None
        return self.violation({"format": self.format}, value=value)


@dataclass(frozen=True, slots=True)
class TimeFormat(Rule):
    """Non-empty value must be text that round-trips through `format`."""
    code = ErrorCode.E2013_INVALID_TIME
    format: str = DEFAULT_TIME_FORMAT
    message: str = "is not a valid time (expected format: {format})"

    @property
    def constraint_name(self) -> str:
        return f"time_format[{self.format}]"

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        if value is None or value == "":
            return None
        if isinstance(value, str) and round_trips(value, self.format):
            return None
        return self.violation({"format": self.format}, value=value)


# ============================================================================
# Comparison
# ============================================================================

@dataclass(frozen=True, slots=True)
class SameAs(Rule):
    """Value must exactly equal sibling field `name`."""
    code = ErrorCode.E2007_MISMATCH
    name: str
    message: str = "must match property value of {name}"

    @property
    def constraint_name(self) -> str:
        return f"same_as[{self.name}]"

    @property
    def references(self) -> tuple[str, ...]:
        return (self.name,)

    def evaluate(self, value: Any, sibling: SiblingLookup) -> Violation | None:
        if strictly_equal(value, sibling(self.name)):
            return None
        return self.violation({"name": self.name})
