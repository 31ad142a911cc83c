"""Temporal ordering guards.

Both guards compare a start and an end value and report the start field when
the end comes first. Values may be date/datetime objects or text in the
guard's strftime pattern; anything that does not parse is skipped, since the
format itself is a syntactic concern (DateFormat/TimeFormat).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping

from skima.core.validation import DEFAULT_DATE_FORMAT, BusinessRuleResult, EntitySchema, SchemaRegistry


def as_moment(value: Any, pattern: str) -> datetime | None:
    """Comparable datetime for `value`, or None when it has none."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, time):
        return datetime.combine(date.min, value.replace(tzinfo=None))
    if isinstance(value, str) and value:
        try:
            return datetime.strptime(value, pattern)
        except ValueError:
            return None
    return None


def out_of_order(schema: EntitySchema, obj: Any, start_field: str, end_field: str, pattern: str) -> bool:
    start = as_moment(schema.field(start_field).resolve(obj), pattern)
    end = as_moment(schema.field(end_field).resolve(obj), pattern)
    return start is not None and end is not None and end < start


@dataclass(frozen=True, slots=True)
class DateOrderGuard:
    """`end_field` must not precede `start_field` on the entity itself."""
    start_field: str
    end_field: str
    format: str = DEFAULT_DATE_FORMAT
    message: str = "must not be after {end}"

    def validate(self, entity: Any) -> BusinessRuleResult:
        result = BusinessRuleResult.success()
        schema = SchemaRegistry().require(type(entity))
        if out_of_order(schema, entity, self.start_field, self.end_field, self.format):
            end_key = schema.field(self.end_field).key
            result.add_violation(schema.field(self.start_field).key, self.message.replace("{end}", end_key))
        return result


@dataclass(frozen=True, slots=True)
class CollectionDateOrderGuard:
    """Date order check on every item of collection field `collection`.

    Violations land on synthetic item paths such as "order_items.3.start_date",
    keyed by the item identifier or its index exactly as the traversal keys them.
    """
    collection: str
    start_field: str
    end_field: str
    format: str = DEFAULT_DATE_FORMAT
    message: str = "must not be after {end}"

    def validate(self, entity: Any) -> BusinessRuleResult:
        result = BusinessRuleResult.success()
        registry = SchemaRegistry()
        descriptor = registry.require(type(entity)).field(self.collection)
        items = descriptor.resolve(entity) or ()
        pairs = items.items() if isinstance(items, Mapping) else enumerate(items)
        for index, item in pairs:
            schema = registry.schema_for(item)
            if schema is None or not out_of_order(schema, item, self.start_field, self.end_field, self.format):
                continue
            item_key = schema.item_key(item) or str(index)
            path = f"{descriptor.key}.{item_key}.{schema.field(self.start_field).key}"
            result.add_violation(path, self.message.replace("{end}", schema.field(self.end_field).key))
        return result
