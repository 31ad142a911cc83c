"""Validated Entity Base

Entities are pydantic models whose fields carry rule descriptors as
`Annotated` metadata. Pydantic handles construction; validate() runs the
two-stage check:

    Start -> syntactic + nested traversal
          -> any violation: Invalid (guards skipped)
          -> otherwise run guards in registration order
          -> Valid if nothing was reported, else Invalid

The collector produced by the last validate() call stays on the instance
until the next call replaces it.
"""
from __future__ import annotations

from typing import Any, ClassVar, Protocol, Self, runtime_checkable

from pydantic import BaseModel, ConfigDict, PrivateAttr

from skima.core.errors import AppError, Err, ErrorCode, Ok, Result, raise_error, repository_unavailable
from skima.core.logging import model_logger
from skima.core.validation import (
    EntitySchema,
    Errors,
    ValidationContext,
    Validator,
    ensure_guard,
    run_guards,
)

log = model_logger()


@runtime_checkable
class Repository(Protocol):
    """Persistence collaborator used by Entity.create()."""

    def create(self, entity: Any) -> Any: ...


class Entity(BaseModel):
    """Base class for validated domain objects.

    Subclasses declare rules per field:

        class OrderItem(Entity):
            item_id: int | None = None
            quantity: Annotated[int, MinValue(0)] = 0

    `identifier_field` names the field used as the item key when an entity
    sits in a collection; set it to None to always key by position.
    """

    model_config = ConfigDict(populate_by_name=True)

    identifier_field: ClassVar[str | None] = "item_id"
    __entity_schema__: ClassVar[EntitySchema | None] = None

    _guards: list[Any] = PrivateAttr(default_factory=list)
    _errors: Errors | None = PrivateAttr(default=None)
    _failed_stage: str | None = PrivateAttr(default=None)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        # Forward references not resolvable yet; entity_schema() builds it later
        if cls.__pydantic_complete__:
            cls.__entity_schema__ = EntitySchema.from_model(cls, cls.identifier_field)

    @classmethod
    def entity_schema(cls) -> EntitySchema:
        """Field-descriptor table of this class, built once and cached on it."""
        schema = cls.__dict__.get("__entity_schema__")
        if schema is None:
            if not cls.__pydantic_complete__:
                cls.model_rebuild()
            schema = EntitySchema.from_model(cls, cls.identifier_field)
            cls.__entity_schema__ = schema
        return schema

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def add_guard(self, guard: Any) -> Self:
        self._guards.append(ensure_guard(guard))
        return self

    @property
    def guards(self) -> tuple[Any, ...]:
        return tuple(self._guards)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, context: ValidationContext | None = None) -> bool:  # type: ignore[override]
        """Run syntactic validation, then guards if it came out clean."""
        errors = Validator(context).validate(self)
        stage = "syntactic"
        if not errors.any():
            errors = run_guards(self, self._guards)
            stage = "guards"

        self._errors = errors
        self._failed_stage = stage if errors.any() else None
        if self._failed_stage:
            log.info("entity_invalid", entity=type(self).__name__, stage=stage, violations=errors.count())
        else:
            log.debug("entity_valid", entity=type(self).__name__, guards=len(self._guards))
        return self._failed_stage is None

    @property
    def errors(self) -> Errors | None:
        """Collector of the last validate() call; None before the first."""
        return self._errors

    def has_errors(self) -> bool:
        return self._errors is not None and self._errors.any()

    def get_errors(self) -> dict[str, list[dict[str, Any]]]:
        """Violations of the last validate() call as `{path: [{message, context}]}`."""
        if self._errors is None:
            return {}
        return self._errors.to_dict()

    def validate_result(self, context: ValidationContext | None = None) -> Result[Self, AppError]:
        """Validate and return Ok(self), or Err carrying every violation.

        The error code tells the stages apart: E2000 for rule violations,
        E5000 for violations reported by guards.
        """
        if self.validate(context):
            return Ok(self)
        code = ErrorCode.E5000_BUSINESS_GENERIC if self._failed_stage == "guards" else ErrorCode.E2000_VALIDATION_GENERIC
        return Err(self._errors.to_app_error(entity=type(self).__name__, code=code, origin="entity"))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def create(self, repository: Repository) -> bool:
        """Validate, then hand the entity to `repository.create()`.

        Returns False without touching the repository when validation fails.
        """
        if not self.validate():
            return False
        if not callable(getattr(repository, "create", None)):
            raise_error(repository_unavailable(
                type(self).__name__, "missing callable create()", origin="entity",
            ).error)
        log.info("entity_create", entity=type(self).__name__, repository=type(repository).__name__)
        return bool(repository.create(self))
