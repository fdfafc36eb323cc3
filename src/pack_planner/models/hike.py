"""
Hike models for per-trip packing lists.

This module contains:
- Hike: A trip with its descriptive fields
- HikeGear: A gear item packed for a hike, with trip-specific flags

Example: "John Muir Trail" with a HikeGear for "Rain Jacket" that is
         worn, not consumable, quantity 1.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from pack_planner.utils.constants import TABLE_GEAR, TABLE_HIKE, TABLE_HIKE_GEAR

from .base import BaseModel


class Hike(BaseModel):
    """
    Hike model representing one trip.

    Attributes:
        name: Trip name
        description: Free-text description
        distance: Distance as entered (e.g., "12 mi")
        location: Trailhead or area
        completed: Whether the trip is done
        external_link_1..3: Optional links (maps, permits, trip reports)

    Relationships:
        hike_gears: Packed gear, in the order it was added. Owned by the
            hike: removing an entry or deleting the hike deletes the rows.
    """

    __tablename__ = TABLE_HIKE

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    distance = Column(String(50), nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    external_link_1 = Column(String(500), nullable=True)
    external_link_2 = Column(String(500), nullable=True)
    external_link_3 = Column(String(500), nullable=True)

    hike_gears = relationship(
        "HikeGear",
        back_populates="hike",
        cascade="all, delete-orphan",
        order_by="HikeGear.id",
    )

    __table_args__ = (Index("idx_hike_name", "name"),)

    @property
    def external_links(self) -> list:
        """Non-empty external links in slot order."""
        links = [self.external_link_1, self.external_link_2, self.external_link_3]
        return [link for link in links if link]

    def __repr__(self) -> str:
        """String representation of hike."""
        return f"Hike(id={self.id}, name='{self.name}', completed={self.completed})"


class HikeGear(BaseModel):
    """
    HikeGear model linking a hike to a gear item.

    Attributes:
        hike_id: Owning hike
        gear_id: Packed gear item
        quantity: Number of units packed (at least 1)
        worn: Carried on the body rather than in the pack
        consumable: Used up during the trip (food, fuel, water)
        verified: Checked off while packing
        notes: Free-text notes for this trip
    """

    __tablename__ = TABLE_HIKE_GEAR

    hike_id = Column(Integer, ForeignKey(f"{TABLE_HIKE}.id", ondelete="CASCADE"), nullable=False)
    gear_id = Column(Integer, ForeignKey(f"{TABLE_GEAR}.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    worn = Column(Boolean, nullable=False, default=False)
    consumable = Column(Boolean, nullable=False, default=False)
    verified = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=False, default="")

    hike = relationship("Hike", back_populates="hike_gears")
    gear = relationship("Gear", back_populates="hike_gears")

    __table_args__ = (
        # A gear item is packed at most once per hike; quantity covers multiples
        UniqueConstraint("hike_id", "gear_id", name="uq_hike_gear_hike_gear"),
        CheckConstraint("quantity >= 1", name="ck_hike_gear_quantity_positive"),
        Index("idx_hike_gear_gear", "gear_id"),
    )

    def __repr__(self) -> str:
        """String representation of hike gear."""
        return (
            f"HikeGear(id={self.id}, hike_id={self.hike_id}, gear_id={self.gear_id}, "
            f"quantity={self.quantity})"
        )
