"""skima: declarative object-graph validation for pydantic entities."""

__version__ = "0.1.0"

from skima.core.errors import (
    AppError,
    AppErrorException,
    CycleDetectedError,
    DepthExceededError,
    Err,
    ErrorCode,
    GuardContractError,
    Ok,
    RepositoryUnavailableError,
    SchemaDefinitionError,
)
from skima.core.validation import (
    BusinessRuleResult,
    ConditionalPresence,
    DateFormat,
    Email,
    EntitySchema,
    Errors,
    FieldDescriptor,
    Guard,
    MaxValue,
    MinLength,
    MinValue,
    Presence,
    SameAs,
    SchemaRegistry,
    TimeFormat,
    ValidationContext,
    Validator,
    Violation,
    validate,
)
from skima.models import Entity, Repository

__all__ = [
    "__version__",
    # Entities
    "Entity",
    "Repository",
    # Rules
    "Presence",
    "ConditionalPresence",
    "MinLength",
    "MinValue",
    "MaxValue",
    "Email",
    "DateFormat",
    "TimeFormat",
    "SameAs",
    # Validation
    "Errors",
    "Violation",
    "EntitySchema",
    "FieldDescriptor",
    "SchemaRegistry",
    "ValidationContext",
    "Validator",
    "validate",
    "BusinessRuleResult",
    "Guard",
    # Errors
    "AppError",
    "AppErrorException",
    "ErrorCode",
    "Ok",
    "Err",
    "SchemaDefinitionError",
    "CycleDetectedError",
    "DepthExceededError",
    "GuardContractError",
    "RepositoryUnavailableError",
]
