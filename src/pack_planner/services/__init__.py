"""Services package - Business logic layer for Pack Planner.

Architecture:
- Weight engine: pure computation over immutable snapshots
  (unit_converter, category_index, gear_catalog, hike_aggregator)
- Services: Stateless functions organized by domain (gear, hike)
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Service Modules:
- gear_service: Gear catalog CRUD and wide search
- hike_service: Hike CRUD, packed gear, MutationIntent persistence

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- dto: Immutable snapshots and mutation intents
- logging_utils: Structured service logging
"""

from . import (
    database,
    unit_converter,
    category_index,
    dto,
    gear_catalog,
    hike_aggregator,
    gear_service,
    hike_service,
)

from .exceptions import (
    ServiceError,
    ValidationError,
    GearNotFound,
    HikeNotFound,
    HikeGearNotFound,
    DanglingReferenceError,
    DatabaseError,
)

__all__ = [
    "database",
    "unit_converter",
    "category_index",
    "dto",
    "gear_catalog",
    "hike_aggregator",
    "gear_service",
    "hike_service",
    "ServiceError",
    "ValidationError",
    "GearNotFound",
    "HikeNotFound",
    "HikeGearNotFound",
    "DanglingReferenceError",
    "DatabaseError",
]
