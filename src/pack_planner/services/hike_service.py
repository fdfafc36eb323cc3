"""
Hike Service - CRUD operations for hikes and their packed gear.

This service also acts as the storage side of the weight engine:
``load_hike_snapshot`` hands immutable snapshots to HikeAggregator, and
``apply_intent`` persists the MutationIntent values the aggregator and
the gear catalog emit.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from functools import partial
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from pack_planner.models.gear import Gear
from pack_planner.models.hike import Hike, HikeGear
from pack_planner.services import gear_service
from pack_planner.services.database import session_scope
from pack_planner.services.dto import HikeSnapshot, IntentKind, MutationIntent
from pack_planner.services.exceptions import (
    DatabaseError,
    GearNotFound,
    HikeGearNotFound,
    HikeNotFound,
    ValidationError,
)
from pack_planner.services.hike_aggregator import HikeAggregator
from pack_planner.services.logging_utils import get_service_logger, log_operation
from pack_planner.utils.constants import COPY_NAME_PREFIX, MAX_EXTERNAL_LINKS
from pack_planner.utils.validators import validate_hike_data, validate_notes, validate_quantity

logger = get_service_logger(__name__)

_HIKE_FIELDS = (
    "name",
    "description",
    "distance",
    "location",
    "completed",
    "external_link_1",
    "external_link_2",
    "external_link_3",
)


# ============================================================================
# Utility Functions
# ============================================================================


def _get_hike(sess: Session, hike_id: int) -> Hike:
    hike = (
        sess.query(Hike)
        .options(selectinload(Hike.hike_gears).selectinload(HikeGear.gear))
        .filter(Hike.id == hike_id)
        .first()
    )
    if hike is None:
        raise HikeNotFound(hike_id)
    return hike


def _get_hike_gear(sess: Session, assignment_id: int) -> HikeGear:
    hike_gear = sess.query(HikeGear).filter(HikeGear.id == assignment_id).first()
    if hike_gear is None:
        raise HikeGearNotFound(assignment_id)
    return hike_gear


def _link_fields(external_links: Optional[List[str]]) -> dict:
    """Spread up to three links over the external_link_N columns."""
    links = [link for link in (external_links or []) if link]
    if len(links) > MAX_EXTERNAL_LINKS:
        raise ValidationError([f"External links: at most {MAX_EXTERNAL_LINKS} allowed"])
    links += [None] * (MAX_EXTERNAL_LINKS - len(links))
    return {f"external_link_{i + 1}": link for i, link in enumerate(links)}


def _flush(sess: Session, action: str) -> None:
    try:
        sess.flush()
    except SQLAlchemyError as e:
        logger.error(f"Database error during {action}: {e}")
        raise DatabaseError(f"Failed to {action}: {e}", original_error=e)


# ============================================================================
# Hike CRUD
# ============================================================================


def create_hike(
    name: str,
    description: str = "",
    distance: str = "",
    location: str = "",
    external_links: Optional[List[str]] = None,
    session: Optional[Session] = None,
) -> Hike:
    """
    Create a new hike with no gear.

    Args:
        name: Hike name
        description: Free-text description
        distance: Distance as entered (e.g., "12 mi")
        location: Trailhead or area
        external_links: Up to three links
        session: Optional database session

    Returns:
        Created Hike instance

    Raises:
        ValidationError: If name is empty or more than three links are given
    """
    data = {
        "name": name,
        "description": description or "",
        "distance": distance or "",
        "location": location or "",
        **_link_fields(external_links),
    }
    is_valid, errors = validate_hike_data(data)
    if not is_valid:
        raise ValidationError(errors)
    data["name"] = name.strip()

    def _impl(sess: Session) -> Hike:
        hike = Hike(completed=False, **data)
        sess.add(hike)
        _flush(sess, "create hike")
        log_operation(logger, operation="create_hike", outcome="success", hike_id=hike.id)
        return hike

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_hike(hike_id: int, session: Optional[Session] = None) -> Hike:
    """
    Get a hike by ID, with its gear loaded.

    Raises:
        HikeNotFound: If hike doesn't exist
    """
    if session is not None:
        return _get_hike(session, hike_id)

    with session_scope() as sess:
        return _get_hike(sess, hike_id)


def list_hikes(session: Optional[Session] = None) -> List[Hike]:
    """List all hikes ordered by name."""

    def _impl(sess: Session) -> List[Hike]:
        return sess.query(Hike).order_by(Hike.name, Hike.id).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def search_hikes(query: str, session: Optional[Session] = None) -> List[Hike]:
    """
    Search hikes by name, description or location (case-insensitive).

    An empty query returns all hikes.
    """
    if not query:
        return list_hikes(session=session)

    def _impl(sess: Session) -> List[Hike]:
        pattern = gear_service._like_pattern(query)
        return (
            sess.query(Hike)
            .filter(
                or_(
                    Hike.name.ilike(pattern, escape="\\"),
                    Hike.description.ilike(pattern, escape="\\"),
                    Hike.location.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Hike.name, Hike.id)
            .all()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_hike(hike_id: int, session: Optional[Session] = None, **fields) -> Hike:
    """
    Update a hike's descriptive fields.

    Args:
        hike_id: Hike ID
        **fields: Any of name, description, distance, location, completed,
            external_link_1, external_link_2, external_link_3

    Raises:
        HikeNotFound: If hike doesn't exist
        ValidationError: If a field is unknown or invalid
    """
    unknown = sorted(set(fields) - set(_HIKE_FIELDS))
    if unknown:
        raise ValidationError([f"Unknown hike field: {field}" for field in unknown])

    is_valid, errors = validate_hike_data(fields)
    if not is_valid:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Hike:
        hike = _get_hike(sess, hike_id)
        hike.update_from_dict(fields)
        _flush(sess, "update hike")
        log_operation(logger, operation="update_hike", outcome="success", hike_id=hike_id)
        return hike

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_hike(hike_id: int, session: Optional[Session] = None) -> None:
    """
    Delete a hike and all of its packed gear entries.

    Raises:
        HikeNotFound: If hike doesn't exist
    """

    def _impl(sess: Session) -> None:
        hike = _get_hike(sess, hike_id)
        sess.delete(hike)
        _flush(sess, "delete hike")
        log_operation(logger, operation="delete_hike", outcome="success", hike_id=hike_id)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def copy_hike(hike_id: int, session: Optional[Session] = None) -> Hike:
    """
    Copy a hike and its packed gear.

    The copy is named "Copy of <name>", is not completed, and every packed
    entry starts unverified. Quantities, flags and notes are kept.

    Raises:
        HikeNotFound: If hike doesn't exist
    """

    def _impl(sess: Session) -> Hike:
        original = _get_hike(sess, hike_id)
        copied = Hike(
            name=f"{COPY_NAME_PREFIX}{original.name}",
            description=original.description,
            distance=original.distance,
            location=original.location,
            completed=False,
            external_link_1=original.external_link_1,
            external_link_2=original.external_link_2,
            external_link_3=original.external_link_3,
        )
        for hike_gear in original.hike_gears:
            copied.hike_gears.append(
                HikeGear(
                    gear_id=hike_gear.gear_id,
                    quantity=hike_gear.quantity,
                    worn=hike_gear.worn,
                    consumable=hike_gear.consumable,
                    verified=False,
                    notes=hike_gear.notes,
                )
            )
        sess.add(copied)
        _flush(sess, "copy hike")
        log_operation(
            logger,
            operation="copy_hike",
            outcome="success",
            hike_id=hike_id,
            copy_id=copied.id,
        )
        return copied

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Packed Gear
# ============================================================================


def add_gear_to_hike(
    hike_id: int,
    gear_id: int,
    quantity: int = 1,
    session: Optional[Session] = None,
) -> Optional[HikeGear]:
    """
    Pack a gear item for a hike.

    Args:
        hike_id: Hike ID
        gear_id: Gear ID
        quantity: Number of units (at least 1)

    Returns:
        The new HikeGear, or None if the gear was already packed

    Raises:
        HikeNotFound / GearNotFound: If either row doesn't exist
        ValidationError: If quantity is invalid
    """
    is_valid, error = validate_quantity(quantity)
    if not is_valid:
        raise ValidationError([error])

    def _impl(sess: Session) -> Optional[HikeGear]:
        hike = _get_hike(sess, hike_id)
        if sess.query(Gear.id).filter(Gear.id == gear_id).first() is None:
            raise GearNotFound(gear_id)

        if any(hg.gear_id == gear_id for hg in hike.hike_gears):
            log_operation(
                logger,
                operation="add_gear_to_hike",
                outcome="already_packed",
                hike_id=hike_id,
                gear_id=gear_id,
            )
            return None

        hike_gear = HikeGear(gear_id=gear_id, quantity=quantity)
        hike.hike_gears.append(hike_gear)
        _flush(sess, "add gear to hike")
        log_operation(
            logger,
            operation="add_gear_to_hike",
            outcome="success",
            hike_id=hike_id,
            gear_id=gear_id,
            assignment_id=hike_gear.id,
        )
        return hike_gear

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def set_assignment_notes(
    assignment_id: int, notes: str, session: Optional[Session] = None
) -> HikeGear:
    """
    Replace the notes on a packed gear entry.

    Raises:
        HikeGearNotFound: If the entry doesn't exist
        ValidationError: If the notes are too long
    """
    is_valid, error = validate_notes(notes)
    if not is_valid:
        raise ValidationError([error])

    def _impl(sess: Session) -> HikeGear:
        hike_gear = _get_hike_gear(sess, assignment_id)
        hike_gear.notes = notes or ""
        _flush(sess, "update notes")
        return hike_gear

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Weight Engine Integration
# ============================================================================


def load_hike_snapshot(hike_id: int, session: Optional[Session] = None) -> HikeSnapshot:
    """
    Load a hike and its packed gear as an immutable snapshot.

    Raises:
        HikeNotFound: If hike doesn't exist
    """
    if session is not None:
        return HikeSnapshot.from_model(_get_hike(session, hike_id))

    with session_scope() as sess:
        return HikeSnapshot.from_model(_get_hike(sess, hike_id))


def build_aggregator(
    hike_id: int,
    pending_only: bool = False,
    imperial: bool = False,
    session: Optional[Session] = None,
) -> HikeAggregator:
    """
    Build a HikeAggregator whose mutations are persisted via apply_intent.

    When a session is given, mutations are applied in that session and
    become part of the caller's transaction.

    Raises:
        HikeNotFound: If hike doesn't exist
    """
    snapshot = load_hike_snapshot(hike_id, session=session)
    store = partial(apply_intent, session=session) if session is not None else apply_intent
    return HikeAggregator(snapshot, pending_only=pending_only, imperial=imperial, store=store)


def apply_intent(intent: MutationIntent, session: Optional[Session] = None):
    """
    Persist a change emitted by HikeAggregator or GearCatalog.

    Flag intents set the flag to the carried value rather than toggling,
    so applying the same intent twice has no further effect.

    Returns:
        The new assignment id for ADD_GEAR (None if already packed),
        the number of removed assignments for DELETE_GEAR, otherwise None

    Raises:
        HikeGearNotFound / HikeNotFound / GearNotFound: If a target is missing
        ValidationError: If a SET_QUANTITY value is invalid
    """
    kind = IntentKind(intent.kind)

    if kind == IntentKind.ADD_GEAR:
        hike_gear = add_gear_to_hike(
            intent.target_id, intent.value, quantity=intent.quantity, session=session
        )
        return hike_gear.id if hike_gear is not None else None

    if kind == IntentKind.DELETE_GEAR:
        return gear_service.delete_gear(intent.target_id, session=session)

    if kind == IntentKind.SET_QUANTITY:
        is_valid, error = validate_quantity(intent.value)
        if not is_valid:
            raise ValidationError([error])

    def _impl(sess: Session) -> None:
        hike_gear = _get_hike_gear(sess, intent.target_id)

        if kind == IntentKind.SET_WORN:
            hike_gear.worn = bool(intent.value)
        elif kind == IntentKind.SET_CONSUMABLE:
            hike_gear.consumable = bool(intent.value)
        elif kind == IntentKind.SET_VERIFIED:
            hike_gear.verified = bool(intent.value)
        elif kind == IntentKind.SET_QUANTITY:
            hike_gear.quantity = intent.value
        elif kind == IntentKind.REMOVE_ASSIGNMENT:
            # delete-orphan on Hike.hike_gears deletes the row at flush
            hike_gear.hike.hike_gears.remove(hike_gear)

        _flush(sess, kind.value)
        log_operation(
            logger,
            operation="apply_intent",
            outcome="success",
            intent=kind.value,
            target_id=intent.target_id,
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
