"""
Hike Aggregator - weight totals and category sections for one hike.

Computes four weight distributions over a hike's gear assignments and
serves the category-sectioned rows a packing list displays.

Distributions:
- total: every assignment
- worn: assignments carried on the body
- consumable: assignments used up on the trip
- base: assignments that are neither worn nor consumable

An assignment flagged both worn and consumable is counted in both the
worn and consumable distributions and once in total, so base + worn +
consumable can exceed total. This matches how the numbers have always
been reported and is kept as is.

View states:
- ALL: every assignment is listed
- PENDING_ONLY: only assignments not yet verified are listed

The view state only changes which rows are listed. Weights are always
computed over the full assignment set.

Mutation Pattern:
- Each mutation first hands a MutationIntent to ``store`` (if one was
  given) so the change is persisted, then replaces the affected immutable
  assignment and recomputes everything synchronously. A store that raises
  leaves the snapshot unchanged.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from pack_planner.services.category_index import CategoryIndex
from pack_planner.services.dto import (
    GearItem,
    HikeGearAssignment,
    HikeSnapshot,
    IntentKind,
    MutationIntent,
)
from pack_planner.services.exceptions import (
    DanglingReferenceError,
    HikeGearNotFound,
    ValidationError,
)
from pack_planner.services.logging_utils import get_service_logger, log_operation
from pack_planner.services.unit_converter import format_major_minor
from pack_planner.utils.constants import UNKNOWN_CATEGORY
from pack_planner.utils.validators import validate_quantity

logger = get_service_logger(__name__)

Store = Callable[[MutationIntent], object]


class WeightKind(str, Enum):
    """The four weight distributions of a hike."""

    TOTAL = "total"
    BASE = "base"
    WORN = "worn"
    CONSUMABLE = "consumable"


class ViewState(str, Enum):
    """Which assignments are listed in the category sections."""

    ALL = "all"
    PENDING_ONLY = "pending_only"


@dataclass(frozen=True)
class WeightDistribution:
    """Scalar total plus per-category grams for one weight kind."""

    total_grams: float = 0.0
    by_category: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))


def _resolve_kind(kind: Union[WeightKind, str]) -> WeightKind:
    try:
        return WeightKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in WeightKind)
        raise ValidationError([f"Weight kind: '{kind}' is not one of {valid}"])


def _resolve_gear(assignment: HikeGearAssignment) -> GearItem:
    """Return the assignment's gear or raise DanglingReferenceError."""
    if assignment.gear is None:
        raise DanglingReferenceError(assignment.id)
    return assignment.gear


def _display_category(assignment: HikeGearAssignment) -> str:
    gear = assignment.gear
    return gear.category if gear is not None else UNKNOWN_CATEGORY


class HikeAggregator:
    """
    Weight and category engine for one hike snapshot.

    Attributes:
        hike: Current hike snapshot (replaced on every mutation)
        pending_only: True when only unverified assignments are listed
        imperial: Unit system for formatted weight strings
        display_assignments: Assignments listed in the category sections
    """

    def __init__(
        self,
        hike: HikeSnapshot,
        pending_only: bool = False,
        imperial: bool = False,
        store: Optional[Store] = None,
    ):
        self.hike = hike
        self.pending_only = pending_only
        self.imperial = imperial
        self.store = store
        self.display_assignments: List[HikeGearAssignment] = []
        self._distributions: Dict[WeightKind, WeightDistribution] = {}
        self._index: CategoryIndex[HikeGearAssignment] = CategoryIndex([], {})
        self.recompute()

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    @property
    def assignments(self) -> Tuple[HikeGearAssignment, ...]:
        """Full, unfiltered assignment list."""
        return self.hike.assignments

    @property
    def view_state(self) -> ViewState:
        return ViewState.PENDING_ONLY if self.pending_only else ViewState.ALL

    def recompute(self) -> None:
        """Recompute all four distributions and the display sections."""
        scalars = {kind: 0.0 for kind in WeightKind}
        category_maps: Dict[WeightKind, Dict[str, float]] = {kind: {} for kind in WeightKind}

        def add(kind: WeightKind, category: str, grams: float) -> None:
            scalars[kind] += grams
            category_maps[kind][category] = category_maps[kind].get(category, 0.0) + grams

        for assignment in self.assignments:
            try:
                gear = _resolve_gear(assignment)
                contribution = gear.weight_grams * assignment.quantity
                category = gear.category
            except DanglingReferenceError as e:
                log_operation(
                    logger,
                    operation="recompute",
                    outcome="dangling_reference",
                    level=logging.WARNING,
                    hike_id=self.hike.id,
                    assignment_id=assignment.id,
                    error=str(e),
                )
                contribution = 0.0
                category = UNKNOWN_CATEGORY

            add(WeightKind.TOTAL, category, contribution)
            if assignment.worn:
                add(WeightKind.WORN, category, contribution)
            if assignment.consumable:
                add(WeightKind.CONSUMABLE, category, contribution)
            if not assignment.worn and not assignment.consumable:
                add(WeightKind.BASE, category, contribution)

        self._distributions = {
            kind: WeightDistribution(
                total_grams=scalars[kind],
                by_category=MappingProxyType(category_maps[kind]),
            )
            for kind in WeightKind
        }
        self._rebuild_display()

        log_operation(
            logger,
            operation="recompute",
            outcome="success",
            level=logging.DEBUG,
            hike_id=self.hike.id,
            total_grams=scalars[WeightKind.TOTAL],
        )

    def _rebuild_display(self) -> None:
        if self.pending_only:
            self.display_assignments = [a for a in self.assignments if not a.verified]
        else:
            self.display_assignments = list(self.assignments)
        self._index = CategoryIndex.build(self.display_assignments, _display_category)

    def set_pending_only(self, pending_only: bool) -> None:
        """Switch view state. Weight distributions are left untouched."""
        self.pending_only = pending_only
        self._rebuild_display()

    # ------------------------------------------------------------------
    # Weights
    # ------------------------------------------------------------------

    def get_weight_grams(self, kind: Union[WeightKind, str]) -> float:
        return self._distributions[_resolve_kind(kind)].total_grams

    def get_weight_string(self, kind: Union[WeightKind, str]) -> str:
        """Formatted major/minor weight, e.g. "3 Lb 4.2 Oz"."""
        return format_major_minor(self.get_weight_grams(kind), self.imperial)

    def get_distribution(self, kind: Union[WeightKind, str]) -> Dict[str, float]:
        """Category -> grams for one weight kind (a copy)."""
        return dict(self._distributions[_resolve_kind(kind)].by_category)

    def get_weight_distribution(self, kind: Union[WeightKind, str]) -> WeightDistribution:
        """The immutable distribution value for one weight kind."""
        return self._distributions[_resolve_kind(kind)]

    # ------------------------------------------------------------------
    # Sections (display list only)
    # ------------------------------------------------------------------

    def get_category_sections(self) -> List[Tuple[str, List[HikeGearAssignment]]]:
        return self._index.sections()

    @property
    def section_count(self) -> int:
        return self._index.section_count

    def category_at(self, section: int) -> str:
        return self._index.category_at(section)

    def assignments_in_section(self, section: int) -> List[HikeGearAssignment]:
        return self._index.items_in(self._index.category_at(section))

    def assignment_at(self, section: int, row: int) -> HikeGearAssignment:
        return self._index.item_at(section, row)

    def is_empty(self) -> bool:
        """True when no rows are listed in the current view."""
        return not self.display_assignments

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _find(self, assignment_id: int) -> HikeGearAssignment:
        for assignment in self.assignments:
            if assignment.id == assignment_id:
                return assignment
        raise HikeGearNotFound(assignment_id)

    def _replace(self, updated: HikeGearAssignment) -> None:
        self.hike = dataclasses.replace(
            self.hike,
            assignments=tuple(updated if a.id == updated.id else a for a in self.assignments),
        )

    def _emit(self, intent: MutationIntent):
        result = self.store(intent) if self.store is not None else None
        log_operation(
            logger,
            operation=intent.kind.value,
            outcome="success",
            hike_id=self.hike.id,
            target_id=intent.target_id,
            value=intent.value,
        )
        return result

    def _toggle(self, assignment_id: int, flag: str, kind: IntentKind) -> HikeGearAssignment:
        assignment = self._find(assignment_id)
        updated = dataclasses.replace(assignment, **{flag: not getattr(assignment, flag)})
        self._emit(MutationIntent(kind=kind, target_id=assignment_id, value=getattr(updated, flag)))
        self._replace(updated)
        self.recompute()
        return updated

    def toggle_worn(self, assignment_id: int) -> HikeGearAssignment:
        return self._toggle(assignment_id, "worn", IntentKind.SET_WORN)

    def toggle_consumable(self, assignment_id: int) -> HikeGearAssignment:
        return self._toggle(assignment_id, "consumable", IntentKind.SET_CONSUMABLE)

    def toggle_verified(self, assignment_id: int) -> HikeGearAssignment:
        return self._toggle(assignment_id, "verified", IntentKind.SET_VERIFIED)

    def set_quantity(self, assignment_id: int, quantity: int) -> HikeGearAssignment:
        """
        Set an assignment's quantity.

        Raises:
            ValidationError: If quantity is not a whole number >= 1
            HikeGearNotFound: If the assignment is not in this hike
        """
        is_valid, error = validate_quantity(quantity)
        if not is_valid:
            log_operation(
                logger,
                operation="set_quantity",
                outcome="validation_failed",
                level=logging.WARNING,
                hike_id=self.hike.id,
                assignment_id=assignment_id,
                quantity=quantity,
            )
            raise ValidationError([error])

        updated = dataclasses.replace(self._find(assignment_id), quantity=quantity)
        self._emit(MutationIntent(IntentKind.SET_QUANTITY, assignment_id, quantity))
        self._replace(updated)
        self.recompute()
        return updated

    def remove_assignment(self, assignment_id: int) -> None:
        """Detach an assignment from the hike."""
        self._find(assignment_id)
        self._emit(MutationIntent(IntentKind.REMOVE_ASSIGNMENT, assignment_id))
        self.hike = dataclasses.replace(
            self.hike,
            assignments=tuple(a for a in self.assignments if a.id != assignment_id),
        )
        self.recompute()

    def add_gear(self, gear: GearItem, quantity: int = 1) -> Optional[HikeGearAssignment]:
        """
        Pack a gear item for this hike.

        Gear already in the hike is not added twice; None is returned then.
        The new assignment takes the id returned by ``store``; without a
        store (or if it returns no id) a provisional negative id is used.

        Raises:
            ValidationError: If quantity is not a whole number >= 1
        """
        is_valid, error = validate_quantity(quantity)
        if not is_valid:
            raise ValidationError([error])

        if gear.id in self.hike.gear_ids:
            log_operation(
                logger,
                operation="add_gear",
                outcome="already_packed",
                level=logging.DEBUG,
                hike_id=self.hike.id,
                gear_id=gear.id,
            )
            return None

        stored_id = self._emit(
            MutationIntent(IntentKind.ADD_GEAR, self.hike.id, gear.id, quantity=quantity)
        )
        if isinstance(stored_id, int) and not isinstance(stored_id, bool):
            assignment_id = stored_id
        else:
            assignment_id = min([0] + [a.id for a in self.assignments]) - 1

        assignment = HikeGearAssignment(id=assignment_id, gear=gear, quantity=quantity)
        self.hike = dataclasses.replace(self.hike, assignments=self.assignments + (assignment,))
        self.recompute()
        return assignment

    def __repr__(self) -> str:
        return (
            f"HikeAggregator(hike_id={self.hike.id}, view={self.view_state.value}, "
            f"assignments={len(self.assignments)})"
        )
