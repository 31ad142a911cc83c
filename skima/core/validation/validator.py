"""Validation Traversal Engine

Walks an object's fields through its EntitySchema, recursing into nested
entities and collections of entities, and folds every violation into one
Errors collector keyed by field path:

    order_number                  direct field
    customer.email                nested entity
    order_items.7.quantity        collection item exposing identifier 7
    order_items.0.quantity        collection item without identifier (index 0)

Invalid data never raises. Structural misuse does: a missing schema, a cyclic
object graph, or nesting deeper than the context allows.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from skima.core.config import get_settings
from skima.core.errors import cycle_detected, depth_exceeded, raise_error, schema_missing
from skima.core.logging import validation_logger

from .errors import Errors
from .rules import SiblingLookup
from .schema import EntitySchema, FieldDescriptor, SchemaRegistry

log = validation_logger()


def _max_depth() -> int:
    return get_settings().MAX_DEPTH


@dataclass
class ValidationContext:
    """Per-call validation state, constructed by the caller.

    Holds the schema registry and the traversal limits. The in-progress
    stack used for cycle detection lives here, so a context must not be
    shared by two validations running at the same time.
    """
    registry: SchemaRegistry = field(default_factory=SchemaRegistry)
    max_depth: int = field(default_factory=_max_depth)
    _active: dict[int, str] = field(default_factory=dict, init=False, repr=False)


class Validator:
    """Syntactic validation of an object graph."""

    __slots__ = ("context",)

    def __init__(self, context: ValidationContext | None = None):
        self.context = context or ValidationContext()

    def validate(self, obj: Any) -> Errors:
        """Validate `obj` and everything reachable through its data fields."""
        schema = self.context.registry.schema_for(obj)
        if schema is None:
            raise_error(schema_missing(type(obj).__name__, origin="validator").error)
        errors = self._validate_object(obj, schema, path="", depth=0)
        log.debug("entity_validated", entity=schema.entity, violations=errors.count(), paths=errors.paths())
        return errors

    def _validate_object(self, obj: Any, schema: EntitySchema, path: str, depth: int) -> Errors:
        active = self.context._active
        if id(obj) in active:
            raise_error(cycle_detected(schema.entity, path or "<root>", origin="validator").error)
        if depth > self.context.max_depth:
            raise_error(depth_exceeded(path, self.context.max_depth, origin="validator").error)

        active[id(obj)] = path
        try:
            errors = Errors()
            sibling = schema.sibling_lookup(obj)
            for descriptor in schema.fields:
                self._validate_field(errors, obj, descriptor, sibling, path, depth)
            return errors
        finally:
            del active[id(obj)]

    def _validate_field(
        self,
        errors: Errors,
        obj: Any,
        descriptor: FieldDescriptor,
        sibling: SiblingLookup,
        path: str,
        depth: int,
    ) -> None:
        value = descriptor.resolve(obj)
        field_path = f"{path}.{descriptor.key}" if path else descriptor.key

        nested = self.context.registry.schema_for(value)
        if nested is not None:
            child = self._validate_object(value, nested, field_path, depth + 1)
            errors.merge(child.prefixed(descriptor.key))
        elif isinstance(value, (list, tuple, Mapping)):
            errors.merge(self._validate_collection(descriptor.key, value, field_path, depth))

        for rule in descriptor.rules:
            violation = rule.evaluate(value, sibling)
            if violation is not None:
                log.debug("rule_violated", path=field_path, constraint=rule.constraint_name, code=rule.code.name)
                errors.add_violation(descriptor.key, violation)

    def _validate_collection(self, key: str, items: Any, field_path: str, depth: int) -> Errors:
        """Recurse into entity items; scalar items are not validated here."""
        errors = Errors()
        pairs = items.items() if isinstance(items, Mapping) else enumerate(items)
        for index, item in pairs:
            schema = self.context.registry.schema_for(item)
            if schema is None:
                continue
            item_key = schema.item_key(item) or str(index)
            child = self._validate_object(item, schema, f"{field_path}.{item_key}", depth + 1)
            errors.merge(child.prefixed(f"{key}.{item_key}"))
        return errors


def validate(obj: Any, context: ValidationContext | None = None) -> Errors:
    """Syntactic and nested validation of `obj` with a fresh or given context."""
    return Validator(context).validate(obj)
