"""Entity Schemas

An EntitySchema is the explicit field-descriptor table of one type: for each
data field its name, its path key, an accessor, its rule descriptors and its
declared default. It is built once per type (pydantic entities build it when
the class is defined) and looked up through a SchemaRegistry keyed by type,
so the traversal never inspects objects structurally.

Types that are not pydantic entities can still be validated by registering a
hand-built schema:

    registry = SchemaRegistry()
    registry.register(Address, EntitySchema.build("Address", [
        FieldDescriptor.attribute("street", Presence()),
        FieldDescriptor.attribute("zip_code", Presence(), MinLength(4)),
    ]))
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from pydantic_core import PydanticUndefined

from skima.core.errors import raise_error, schema_missing, unknown_field

from .rules import Rule, SiblingLookup

if TYPE_CHECKING:
    from pydantic import BaseModel

MISSING: Any = object()


def _no_default() -> Any:
    return None


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One data field of an entity type."""
    name: str
    key: str
    accessor: Callable[[Any], Any]
    rules: tuple[Rule, ...] = ()
    default: Callable[[], Any] = _no_default

    @classmethod
    def attribute(cls, name: str, *rules: Rule, key: str | None = None, default: Any = None) -> FieldDescriptor:
        """Descriptor reading attribute `name`; unset attributes fall back to `default`."""
        return cls(
            name=name,
            key=key or name,
            accessor=lambda obj: getattr(obj, name, MISSING),
            rules=tuple(rules),
            default=lambda: default,
        )

    def resolve(self, obj: Any) -> Any:
        """Current value, or the declared default when the field is unset."""
        value = self.accessor(obj)
        return self.default() if value is MISSING else value


@dataclass(frozen=True, slots=True)
class EntitySchema:
    """Field-descriptor table of one entity type."""
    entity: str
    fields: tuple[FieldDescriptor, ...]
    identifier: str | None = None

    @classmethod
    def build(
        cls,
        entity: str,
        fields: Iterable[FieldDescriptor],
        identifier: str | None = None,
    ) -> EntitySchema:
        """Create a schema and check that every rule's sibling references exist."""
        schema = cls(entity=entity, fields=tuple(fields), identifier=identifier)
        schema.check_references()
        return schema

    @classmethod
    def from_model(cls, model: type[BaseModel], identifier_field: str | None = None) -> EntitySchema:
        """Schema of a pydantic model: rules come from each field's `Annotated` metadata."""
        descriptors = []
        for name, info in model.model_fields.items():
            descriptors.append(FieldDescriptor(
                name=name,
                key=info.alias or name,
                accessor=lambda obj, attr=name: getattr(obj, attr, MISSING),
                rules=tuple(m for m in info.metadata if isinstance(m, Rule)),
                default=_model_default(info),
            ))
        names = {d.name for d in descriptors}
        identifier = identifier_field if identifier_field in names else None
        return cls.build(model.__name__, descriptors, identifier=identifier)

    def field(self, name: str) -> FieldDescriptor:
        """Descriptor by field name or path key."""
        for descriptor in self.fields:
            if descriptor.name == name or descriptor.key == name:
                return descriptor
        raise_error(unknown_field(self.entity, name, "lookup", origin="schema").error)

    def has_field(self, name: str) -> bool:
        return any(d.name == name or d.key == name for d in self.fields)

    def check_references(self) -> None:
        for descriptor in self.fields:
            for rule in descriptor.rules:
                for ref in rule.references:
                    if not self.has_field(ref):
                        raise_error(unknown_field(
                            self.entity, ref, f"{type(rule).__name__} on '{descriptor.name}'", origin="schema",
                        ).error)

    def sibling_lookup(self, obj: Any) -> SiblingLookup:
        """Resolver for rules that read other fields of `obj`."""
        return lambda name: self.field(name).resolve(obj)

    def item_key(self, obj: Any) -> str | None:
        """Stable identifier of `obj` as a collection item, if it exposes one."""
        if self.identifier is None:
            return None
        value = self.field(self.identifier).resolve(obj)
        if value is None or value == "":
            return None
        return str(value)


def _model_default(info: Any) -> Callable[[], Any]:
    if info.default is PydanticUndefined and info.default_factory is None:
        return _no_default
    return lambda: info.get_default(call_default_factory=True)


class SchemaRegistry:
    """Schemas keyed by type.

    Explicit registrations win; otherwise a type providing an
    `entity_schema()` classmethod (every skima Entity) supplies its own.
    """

    def __init__(self) -> None:
        self._schemas: dict[type, EntitySchema] = {}

    def register(self, tp: type, schema: EntitySchema) -> None:
        self._schemas[tp] = schema

    def lookup(self, tp: type) -> EntitySchema | None:
        if tp in self._schemas:
            return self._schemas[tp]
        provider = getattr(tp, "entity_schema", None)
        if callable(provider):
            return provider()
        return None

    def require(self, tp: type) -> EntitySchema:
        """Like lookup(), but a type without schema raises SchemaDefinitionError."""
        schema = self.lookup(tp)
        if schema is None:
            raise_error(schema_missing(tp.__name__, origin="schema").error)
        return schema

    def schema_for(self, value: Any) -> EntitySchema | None:
        """Schema of `value`'s type, or None for scalars (including date/time values)."""
        if value is None or isinstance(value, type):
            return None
        return self.lookup(type(value))

    def __contains__(self, tp: object) -> bool:
        return tp in self._schemas
