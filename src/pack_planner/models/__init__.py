"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .gear import Gear
from .hike import Hike, HikeGear

__all__ = [
    "Base",
    "BaseModel",
    "Gear",
    "Hike",
    "HikeGear",
]
