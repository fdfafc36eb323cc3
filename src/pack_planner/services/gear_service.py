"""
Gear Service - CRUD operations for the gear catalog.

Weights are entered in the caller's unit system and always stored in
grams. Categories are checked against an injected category list
(GEAR_CATEGORIES by default).

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from functools import partial
from typing import List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pack_planner.models.gear import Gear
from pack_planner.services.database import session_scope
from pack_planner.services.dto import GearItem
from pack_planner.services.exceptions import DatabaseError, GearNotFound, ValidationError
from pack_planner.services.gear_catalog import GearCatalog
from pack_planner.services.logging_utils import get_service_logger, log_operation
from pack_planner.services.unit_converter import from_display_value
from pack_planner.utils.constants import GEAR_CATEGORIES, UNCATEGORIZED
from pack_planner.utils.validators import validate_gear_data

logger = get_service_logger(__name__)


# ============================================================================
# Utility Functions
# ============================================================================


def _normalize_category(category: Optional[str]) -> str:
    """Blank or missing categories become "Uncategorized"."""
    if category is None or not category.strip():
        return UNCATEGORIZED
    return category.strip()


def _like_pattern(query: str) -> str:
    """Build a LIKE pattern matching ``query`` anywhere, with wildcards escaped."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _get_gear(sess: Session, gear_id: int) -> Gear:
    gear = sess.query(Gear).filter(Gear.id == gear_id).first()
    if gear is None:
        raise GearNotFound(gear_id)
    return gear


# ============================================================================
# CRUD Operations
# ============================================================================


def create_gear(
    name: str,
    description: str = "",
    weight: float = 0.0,
    category: Optional[str] = None,
    imperial: bool = False,
    categories: Optional[Sequence[str]] = None,
    session: Optional[Session] = None,
) -> Gear:
    """
    Create a new gear item.

    Args:
        name: Gear name
        description: Free-text description
        weight: Unit weight in ounces (imperial) or grams (metric)
        category: Category name; blank means "Uncategorized"
        imperial: Unit system ``weight`` was entered in
        categories: Allowed categories (default GEAR_CATEGORIES)
        session: Optional database session

    Returns:
        Created Gear instance

    Raises:
        ValidationError: If name is empty, weight negative or category unknown
    """
    category = _normalize_category(category)
    data = {"name": name, "description": description, "weight": weight, "category": category}
    is_valid, errors = validate_gear_data(data, categories or GEAR_CATEGORIES)
    if not is_valid:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Gear:
        gear = Gear(
            name=name.strip(),
            description=description or "",
            weight_grams=from_display_value(float(weight), imperial),
            category=category,
        )
        try:
            sess.add(gear)
            sess.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error creating gear: {e}")
            raise DatabaseError(f"Failed to create gear: {e}", original_error=e)

        log_operation(logger, operation="create_gear", outcome="success", gear_id=gear.id)
        return gear

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_gear(gear_id: int, session: Optional[Session] = None) -> Gear:
    """
    Get a gear item by ID.

    Raises:
        GearNotFound: If gear doesn't exist
    """
    if session is not None:
        return _get_gear(session, gear_id)

    with session_scope() as sess:
        return _get_gear(sess, gear_id)


def list_gear(session: Optional[Session] = None) -> List[Gear]:
    """
    List all gear ordered by category, then name.

    Args:
        session: Optional database session

    Returns:
        List of Gear objects
    """

    def _impl(sess: Session) -> List[Gear]:
        return sess.query(Gear).order_by(Gear.category, Gear.name, Gear.id).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def search_gear(query: str, session: Optional[Session] = None) -> List[Gear]:
    """
    Search gear by name, description or category.

    This is the wide search used by free-text lookup. The catalog's
    ``GearCatalog.filtered`` matches the name only.

    Args:
        query: Case-insensitive substring; empty returns all gear
        session: Optional database session

    Returns:
        Matching Gear objects ordered by category, then name
    """
    if not query:
        return list_gear(session=session)

    def _impl(sess: Session) -> List[Gear]:
        pattern = _like_pattern(query)
        return (
            sess.query(Gear)
            .filter(
                or_(
                    Gear.name.ilike(pattern, escape="\\"),
                    Gear.description.ilike(pattern, escape="\\"),
                    Gear.category.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Gear.category, Gear.name, Gear.id)
            .all()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_gear(
    gear_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
    weight: Optional[float] = None,
    category: Optional[str] = None,
    imperial: bool = False,
    categories: Optional[Sequence[str]] = None,
    session: Optional[Session] = None,
) -> Gear:
    """
    Update a gear item's fields. Fields left as None are unchanged.

    Args:
        gear_id: Gear ID
        weight: New unit weight in the ``imperial`` unit system

    Returns:
        Updated Gear instance

    Raises:
        GearNotFound: If gear doesn't exist
        ValidationError: If a new value is invalid
    """
    data = {}
    if name is not None:
        data["name"] = name
    if description is not None:
        data["description"] = description
    if weight is not None:
        data["weight"] = weight
    if category is not None:
        data["category"] = _normalize_category(category)

    def _impl(sess: Session) -> Gear:
        gear = _get_gear(sess, gear_id)

        is_valid, errors = validate_gear_data(
            {"name": gear.name, **data}, categories or GEAR_CATEGORIES
        )
        if not is_valid:
            raise ValidationError(errors)

        if "name" in data:
            gear.name = data["name"].strip()
        if "description" in data:
            gear.description = data["description"]
        if "weight" in data:
            gear.weight_grams = from_display_value(float(data["weight"]), imperial)
        if "category" in data:
            gear.category = data["category"]
        try:
            sess.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error updating gear: {e}")
            raise DatabaseError(f"Failed to update gear: {e}", original_error=e)

        log_operation(logger, operation="update_gear", outcome="success", gear_id=gear_id)
        return gear

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_gear(gear_id: int, session: Optional[Session] = None) -> int:
    """
    Delete a gear item and every hike assignment that references it.

    Args:
        gear_id: Gear ID
        session: Optional database session

    Returns:
        Number of hike assignments removed

    Raises:
        GearNotFound: If gear doesn't exist
    """

    def _impl(sess: Session) -> int:
        gear = _get_gear(sess, gear_id)
        assignments = list(gear.hike_gears)
        hikes = {hike_gear.hike for hike_gear in assignments}
        try:
            # Gear.hike_gears cascades the delete to every assignment
            sess.delete(gear)
            sess.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting gear: {e}")
            raise DatabaseError(f"Failed to delete gear: {e}", original_error=e)

        for hike in hikes:
            sess.expire(hike, ["hike_gears"])

        log_operation(
            logger,
            operation="delete_gear",
            outcome="success",
            gear_id=gear_id,
            assignments_removed=len(assignments),
        )
        return len(assignments)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Snapshots
# ============================================================================


def load_catalog(
    categories: Optional[Sequence[str]] = None,
    session: Optional[Session] = None,
) -> GearCatalog:
    """
    Load the whole catalog as a GearCatalog.

    The catalog's store persists its changes through
    ``hike_service.apply_intent``, inside ``session`` when one is given.
    """
    from pack_planner.services import hike_service  # Import here to avoid circular

    store = hike_service.apply_intent
    if session is not None:
        store = partial(hike_service.apply_intent, session=session)

    def _impl(sess: Session) -> GearCatalog:
        items = [GearItem.from_model(gear) for gear in list_gear(session=sess)]
        return GearCatalog(items, categories=categories, store=store)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
