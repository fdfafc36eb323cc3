"""Data Transfer Objects for the weight engine.

The catalog and the hike aggregator never work on ORM rows. The storage
layer converts rows into the immutable snapshots below, and the engine
reports changes back as MutationIntent values for storage to persist.

Records:
- GearItem: one catalog entry, weight in grams
- HikeGearAssignment: one packed gear entry of a hike
- HikeSnapshot: a hike and its ordered assignments
- MutationIntent: a change the storage layer must persist
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from pack_planner.utils.constants import UNCATEGORIZED


@dataclass(frozen=True)
class GearItem:
    """Immutable catalog entry.

    Attributes:
        id: Gear identifier
        name: Gear name
        description: Free-text description
        weight_grams: Unit weight in grams
        category: Category label ("Uncategorized" when blank)
    """

    id: int
    name: str
    description: str = ""
    weight_grams: float = 0.0
    category: str = UNCATEGORIZED

    def __post_init__(self) -> None:
        if not self.category or not self.category.strip():
            object.__setattr__(self, "category", UNCATEGORIZED)

    @classmethod
    def from_model(cls, gear) -> "GearItem":
        """Build a snapshot from a Gear row."""
        return cls(
            id=gear.id,
            name=gear.name,
            description=gear.description or "",
            weight_grams=gear.weight_grams or 0.0,
            category=gear.category,
        )


@dataclass(frozen=True)
class HikeGearAssignment:
    """Immutable hike gear entry.

    ``gear`` is None when the referenced gear item could not be resolved.
    """

    id: int
    gear: Optional[GearItem]
    quantity: int = 1
    worn: bool = False
    consumable: bool = False
    verified: bool = False
    notes: str = ""

    @property
    def gear_id(self) -> Optional[int]:
        return self.gear.id if self.gear is not None else None

    @classmethod
    def from_model(cls, hike_gear) -> "HikeGearAssignment":
        """Build a snapshot from a HikeGear row."""
        gear = hike_gear.gear
        return cls(
            id=hike_gear.id,
            gear=GearItem.from_model(gear) if gear is not None else None,
            quantity=hike_gear.quantity,
            worn=bool(hike_gear.worn),
            consumable=bool(hike_gear.consumable),
            verified=bool(hike_gear.verified),
            notes=hike_gear.notes or "",
        )


@dataclass(frozen=True)
class HikeSnapshot:
    """Immutable hike with its assignments in list order."""

    id: int
    name: str
    description: str = ""
    distance: str = ""
    location: str = ""
    completed: bool = False
    external_links: Tuple[str, ...] = ()
    assignments: Tuple[HikeGearAssignment, ...] = field(default_factory=tuple)

    @property
    def gear_ids(self) -> set:
        """Ids of all resolvable gear in the hike."""
        return {a.gear_id for a in self.assignments if a.gear_id is not None}

    @classmethod
    def from_model(cls, hike) -> "HikeSnapshot":
        """Build a snapshot from a Hike row and its hike_gears."""
        return cls(
            id=hike.id,
            name=hike.name,
            description=hike.description or "",
            distance=hike.distance or "",
            location=hike.location or "",
            completed=bool(hike.completed),
            external_links=tuple(hike.external_links),
            assignments=tuple(HikeGearAssignment.from_model(hg) for hg in hike.hike_gears),
        )


class IntentKind(str, Enum):
    """
    Kinds of changes the engine asks storage to persist.

    Values:
        SET_WORN / SET_CONSUMABLE / SET_VERIFIED: flag set to ``value``
        SET_QUANTITY: quantity set to ``value``
        REMOVE_ASSIGNMENT: assignment ``target_id`` removed from its hike
        ADD_GEAR: gear ``value`` added to hike ``target_id``
        DELETE_GEAR: gear ``target_id`` deleted with all its assignments
    """

    SET_WORN = "set_worn"
    SET_CONSUMABLE = "set_consumable"
    SET_VERIFIED = "set_verified"
    SET_QUANTITY = "set_quantity"
    REMOVE_ASSIGNMENT = "remove_assignment"
    ADD_GEAR = "add_gear"
    DELETE_GEAR = "delete_gear"


@dataclass(frozen=True)
class MutationIntent:
    """A change for the storage layer.

    ``target_id`` is an assignment id, except for ADD_GEAR (hike id) and
    DELETE_GEAR (gear id). ``quantity`` is only used by ADD_GEAR.
    """

    kind: IntentKind
    target_id: int
    value: Any = None
    quantity: int = 1
