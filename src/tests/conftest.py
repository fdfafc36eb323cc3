"""Pytest configuration and fixtures for Pack Planner tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from pack_planner.models.base import Base
from pack_planner.services.database import get_session_factory  # noqa: F401
from pack_planner.services.dto import GearItem, HikeGearAssignment, HikeSnapshot


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    import pack_planner.models  # noqa: F401

    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import pack_planner.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)

    # Restore original session factory
    db_module.get_session_factory = original_get_session


# ============================================================================
# Snapshot factories (no database)
# ============================================================================


@pytest.fixture
def make_gear():
    """Build GearItem snapshots with sequential ids."""
    counter = {"next_id": 1}

    def _make(name="Gear", weight_grams=100.0, category="Shelter", description="", id=None):
        if id is None:
            id = counter["next_id"]
        counter["next_id"] = max(counter["next_id"], id) + 1
        return GearItem(
            id=id,
            name=name,
            description=description,
            weight_grams=weight_grams,
            category=category,
        )

    return _make


@pytest.fixture
def make_assignment():
    """Build HikeGearAssignment snapshots with sequential ids."""
    counter = {"next_id": 1}

    def _make(gear, quantity=1, worn=False, consumable=False, verified=False, id=None):
        if id is None:
            id = counter["next_id"]
        counter["next_id"] = max(counter["next_id"], id) + 1
        return HikeGearAssignment(
            id=id,
            gear=gear,
            quantity=quantity,
            worn=worn,
            consumable=consumable,
            verified=verified,
        )

    return _make


@pytest.fixture
def make_hike():
    """Build a HikeSnapshot around a list of assignments."""

    def _make(assignments=(), id=1, name="Test Hike"):
        return HikeSnapshot(id=id, name=name, assignments=tuple(assignments))

    return _make


@pytest.fixture
def recording_store():
    """A store callable that records every intent it receives."""

    class RecordingStore:
        def __init__(self):
            self.intents = []
            self.next_id = 100

        def __call__(self, intent):
            self.intents.append(intent)
            if intent.kind.value == "add_gear":
                self.next_id += 1
                return self.next_id
            return None

    return RecordingStore()


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture
def sample_gear(test_db):
    """Create a small gear catalog: tent, stove and rain jacket."""
    from pack_planner.services import gear_service

    tent = gear_service.create_gear(
        "Tent", description="Two-person shelter", weight=1250.0, category="Shelter"
    )
    stove = gear_service.create_gear(
        "Stove", description="Canister stove", weight=85.0, category="Cooking"
    )
    jacket = gear_service.create_gear(
        "Rain Jacket", description="Waterproof shell", weight=300.0, category="Clothing"
    )
    return tent, stove, jacket


@pytest.fixture
def sample_hike(test_db, sample_gear):
    """Create a hike with the tent (x1) and stove (x2) packed."""
    from pack_planner.services import hike_service

    tent, stove, _ = sample_gear
    hike = hike_service.create_hike(
        "Enchantments",
        description="Core zone thru-hike",
        distance="19 mi",
        location="Leavenworth",
        external_links=["https://example.com/permit"],
    )
    hike_service.add_gear_to_hike(hike.id, tent.id)
    hike_service.add_gear_to_hike(hike.id, stove.id, quantity=2)
    return hike
