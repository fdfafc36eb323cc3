"""
Gear Catalog - browsing and cross-hike queries over all gear.

The catalog works on GearItem snapshots supplied by the storage layer.
The category list is injected rather than read from a global so callers
(and tests) decide which categories are offered.
"""

import dataclasses
from typing import Callable, Iterable, List, Optional, Sequence

from pack_planner.services.category_index import CategoryIndex
from pack_planner.services.dto import GearItem, HikeSnapshot, IntentKind, MutationIntent
from pack_planner.services.exceptions import GearNotFound
from pack_planner.services.logging_utils import get_service_logger, log_operation
from pack_planner.utils.constants import GEAR_CATEGORIES

logger = get_service_logger(__name__)


def _category_of(gear: GearItem) -> str:
    return gear.category


class GearCatalog:
    """
    Category-indexed view of the full gear collection.

    Attributes:
        gear: Catalog entries in storage order
        categories: Categories offered for new and edited gear
        store: Optional callable persisting MutationIntent values
    """

    def __init__(
        self,
        gear: Iterable[GearItem],
        categories: Optional[Sequence[str]] = None,
        store: Optional[Callable[[MutationIntent], object]] = None,
    ):
        self.gear: List[GearItem] = list(gear)
        self.categories: List[str] = list(categories if categories is not None else GEAR_CATEGORIES)
        self.store = store

    def get(self, gear_id: int) -> GearItem:
        """
        Look up a catalog entry.

        Raises:
            GearNotFound: If no entry has this id
        """
        for item in self.gear:
            if item.id == gear_id:
                return item
        raise GearNotFound(gear_id)

    def filtered(self, query: str = "") -> CategoryIndex[GearItem]:
        """
        Category index of gear whose name contains ``query``.

        Matching is case-insensitive and on the name only. An empty query
        includes all gear.
        """
        if not query:
            return CategoryIndex.build(self.gear, _category_of)

        needle = query.casefold()
        matches = [item for item in self.gear if needle in item.name.casefold()]
        return CategoryIndex.build(matches, _category_of)

    def unassigned_for(self, hike: HikeSnapshot) -> List[GearItem]:
        """Gear not yet packed for ``hike``, in catalog order."""
        packed = hike.gear_ids
        return [item for item in self.gear if item.id not in packed]

    def delete_cascading(
        self, gear_id: int, hikes: Iterable[HikeSnapshot] = ()
    ) -> List[HikeSnapshot]:
        """
        Delete a gear item and every assignment that references it.

        The item leaves the catalog, a DELETE_GEAR intent goes to ``store``
        (which must remove the assignments in every hike it holds), and
        the given hike snapshots are returned without those assignments.

        Raises:
            GearNotFound: If no entry has this id
        """
        self.get(gear_id)

        if self.store is not None:
            self.store(MutationIntent(IntentKind.DELETE_GEAR, gear_id))

        self.gear = [item for item in self.gear if item.id != gear_id]

        pruned = []
        removed = 0
        for hike in hikes:
            kept = tuple(a for a in hike.assignments if a.gear_id != gear_id)
            removed += len(hike.assignments) - len(kept)
            pruned.append(dataclasses.replace(hike, assignments=kept))

        log_operation(
            logger,
            operation="delete_cascading",
            outcome="success",
            gear_id=gear_id,
            assignments_removed=removed,
        )
        return pruned

    def __len__(self) -> int:
        return len(self.gear)
