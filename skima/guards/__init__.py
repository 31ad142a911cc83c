"""Ready-made guards for common business rules."""

from .temporal import CollectionDateOrderGuard, DateOrderGuard
from .uniqueness import UniqueFieldGuard, UniquenessLookup

__all__ = [
    "CollectionDateOrderGuard",
    "DateOrderGuard",
    "UniqueFieldGuard",
    "UniquenessLookup",
]
