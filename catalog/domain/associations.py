"""
Product/category link maintenance.

A product's category links are changed by computing the difference between
the links it has and the links it should have, so that links present on both
sides are never deleted and re-inserted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List


@dataclass(frozen=True)
class AssociationDelta:
    to_add: FrozenSet[int] = field(default_factory=frozenset)
    to_remove: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    def apply(self, current: Iterable[int]) -> FrozenSet[int]:
        """The link set that results from applying this delta to ``current``."""
        return (frozenset(current) - self.to_remove) | self.to_add


def dedupe_ids(ids: Iterable[int]) -> List[int]:
    """Drop repeated ids, keeping the first occurrence of each."""
    return list(dict.fromkeys(ids))


def reconcile(current: Iterable[int], target: Iterable[int]) -> AssociationDelta:
    """
    Compute the minimal add/remove delta turning ``current`` into ``target``.

    ``target`` must not be empty: a product keeps at least one category and
    callers reject an empty request before getting here. Whether the ids in
    ``target`` exist is left to the database.
    """
    wanted = frozenset(target)
    if not wanted:
        raise ValueError("target category set must not be empty")
    existing = frozenset(current)
    return AssociationDelta(to_add=wanted - existing, to_remove=existing - wanted)
