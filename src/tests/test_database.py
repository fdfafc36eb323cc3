"""Tests for engine creation, table initialization and session scopes."""

import pytest
from sqlalchemy import inspect, text

import pack_planner.services.database as db_module
from pack_planner.models import Gear
from pack_planner.services.database import (
    close_connections,
    create_database_engine,
    init_database,
    reset_database,
    session_scope,
    verify_database,
)


@pytest.fixture
def memory_engine(monkeypatch):
    """Install an in-memory engine as the global engine."""
    engine = create_database_engine("sqlite:///:memory:")
    monkeypatch.setattr(db_module, "_engine", engine)
    monkeypatch.setattr(db_module, "_SessionFactory", None)
    yield engine
    engine.dispose()


class TestInitialization:
    def test_init_creates_tables(self, memory_engine):
        init_database(memory_engine)
        tables = inspect(memory_engine).get_table_names()
        assert {"gear", "hikes", "hike_gear"} <= set(tables)
        assert verify_database() is True

    def test_verify_fails_without_tables(self, memory_engine):
        assert verify_database() is False

    def test_foreign_keys_enforced(self, memory_engine):
        with memory_engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_reset_requires_confirmation(self, memory_engine):
        with pytest.raises(ValueError, match="confirm=True"):
            reset_database()

    def test_reset_drops_data(self, memory_engine):
        init_database(memory_engine)
        with session_scope() as session:
            session.add(Gear(name="Tent", weight_grams=1250.0, category="Shelter"))

        reset_database(confirm=True)

        with session_scope() as session:
            assert session.query(Gear).count() == 0

    def test_close_connections(self, memory_engine):
        close_connections()
        assert db_module._engine is None
        assert db_module._SessionFactory is None


class TestSessionScope:
    def test_rolls_back_on_error(self, memory_engine):
        init_database(memory_engine)

        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(Gear(name="Tent", weight_grams=1250.0, category="Shelter"))
                session.flush()
                raise RuntimeError("abort")

        with session_scope() as session:
            assert session.query(Gear).count() == 0
