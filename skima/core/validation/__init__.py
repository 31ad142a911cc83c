"""Declarative Validation System

Rules are declared once per type, as metadata on fields, and evaluated by a
traversal engine that walks the whole object graph. Business rules that need
the whole entity (or the outside world) run afterwards as guards.

Key Features:
- Immutable rule descriptors attached through `Annotated` metadata
- Explicit per-type schemas looked up through a registry
- Nested and collection traversal with stable field paths
- Error collector keyed by dot-separated path
- Guards returning mergeable BusinessRuleResults

Usage:
    from skima.core.validation import Presence, MinLength, validate

    class Customer(Entity):
        name: Annotated[str, Presence(), MinLength(2)] = ""

    errors = validate(Customer(name="J"))
    errors.messages()  # {"name": ["is too short (minimum is 2 characters)"]}
"""

# Error collector
from .errors import (
    Errors,
    Violation,
)

# Rule descriptors
from .rules import (
    Rule,
    SiblingLookup,
    Presence,
    ConditionalPresence,
    MinLength,
    MinValue,
    MaxValue,
    Email,
    DateFormat,
    TimeFormat,
    SameAs,
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIME_FORMAT,
    is_empty,
    strictly_equal,
)

# Schemas
from .schema import (
    EntitySchema,
    FieldDescriptor,
    SchemaRegistry,
    MISSING,
)

# Traversal
from .validator import (
    ValidationContext,
    Validator,
    validate,
)

# Business rules
from .business import BusinessRuleResult

from .guards import (
    Guard,
    ensure_guard,
    run_guards,
)

__all__ = [
    # Errors
    "Errors",
    "Violation",
    # Rules
    "Rule",
    "SiblingLookup",
    "Presence",
    "ConditionalPresence",
    "MinLength",
    "MinValue",
    "MaxValue",
    "Email",
    "DateFormat",
    "TimeFormat",
    "SameAs",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_TIME_FORMAT",
    "is_empty",
    "strictly_equal",
    # Schemas
    "EntitySchema",
    "FieldDescriptor",
    "SchemaRegistry",
    "MISSING",
    # Traversal
    "ValidationContext",
    "Validator",
    "validate",
    # Business rules
    "BusinessRuleResult",
    "Guard",
    "ensure_guard",
    "run_guards",
]
