"""Uniqueness guard backed by a caller-supplied lookup."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from skima.core.validation import BusinessRuleResult, SchemaRegistry, is_empty

# lookup(field, value, entity) -> True when another record already holds value
UniquenessLookup = Callable[[str, Any, Any], bool]


@dataclass(frozen=True, slots=True)
class UniqueFieldGuard:
    """Reports `field` when the lookup finds its value on another record.

    Store access is the lookup's concern; it receives the entity so it can
    exclude the record being updated. Empty values are left to Presence.

        order.add_guard(UniqueFieldGuard("order_number", orders.number_taken))
    """
    field: str
    lookup: UniquenessLookup
    message: str = "has already been taken"

    def validate(self, entity: Any) -> BusinessRuleResult:
        result = BusinessRuleResult.success()
        descriptor = SchemaRegistry().require(type(entity)).field(self.field)
        value = descriptor.resolve(entity)
        if not is_empty(value) and self.lookup(self.field, value, entity):
            result.add_violation(descriptor.key, self.message)
        return result
