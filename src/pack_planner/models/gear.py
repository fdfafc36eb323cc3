"""
Gear model for the gear catalog.

A gear item is anything a hiker might pack (e.g., "Tent" in "Shelter",
1250 g). The weight is always stored in grams; display units are computed
on demand.
"""

from sqlalchemy import CheckConstraint, Column, Float, Index, String, Text
from sqlalchemy.orm import relationship

from pack_planner.utils.constants import TABLE_GEAR, UNCATEGORIZED

from .base import BaseModel


class Gear(BaseModel):
    """
    Gear model representing one catalog item.

    Attributes:
        name: Gear name (e.g., "Tent", "Rain Jacket")
        description: Free-text description
        weight_grams: Unit weight, always in grams
        category: Category label (defaults to "Uncategorized")

    Relationships:
        hike_gears: Assignments of this gear to hikes. Deleting the gear
            deletes every assignment that references it.
    """

    __tablename__ = TABLE_GEAR

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    weight_grams = Column(Float, nullable=False, default=0.0)
    category = Column(String(100), nullable=False, default=UNCATEGORIZED)

    hike_gears = relationship(
        "HikeGear",
        back_populates="gear",
        cascade="all",
    )

    __table_args__ = (
        CheckConstraint("weight_grams >= 0", name="ck_gear_weight_non_negative"),
        Index("idx_gear_category_name", "category", "name"),
    )

    def __repr__(self) -> str:
        """String representation of gear."""
        return f"Gear(id={self.id}, name='{self.name}', category='{self.category}')"
