"""Tests for snapshot database sessions and schema management."""

import pytest
from sqlalchemy import create_engine, inspect, select

from cricket_scorer.database import create_tables, drop_tables, get_session
from cricket_scorer.snapshots import StoreSnapshot


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'scorer.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


def stored_keys(engine):
    with get_session(engine) as session:
        return session.execute(select(StoreSnapshot.key)).scalars().all()


def test_create_tables_is_idempotent(engine):
    create_tables(engine)
    assert inspect(engine).get_table_names() == ["store_snapshots"]


def test_session_commits_on_success(engine):
    with get_session(engine) as session:
        session.add(StoreSnapshot(key="store", body="{}"))

    assert stored_keys(engine) == ["store"]


def test_session_rolls_back_on_error(engine):
    with pytest.raises(RuntimeError):
        with get_session(engine) as session:
            session.add(StoreSnapshot(key="store", body="{}"))
            session.flush()
            raise RuntimeError("abort")

    assert stored_keys(engine) == []


def test_row_timestamps_filled_by_database(engine):
    with get_session(engine) as session:
        session.add(StoreSnapshot(key="store", body="{}"))

    with get_session(engine) as session:
        record = session.execute(select(StoreSnapshot)).scalar_one()
        assert record.created_at is not None
        assert record.updated_at is not None


def test_drop_tables(engine):
    drop_tables(engine)
    assert inspect(engine).get_table_names() == []
    drop_tables(engine)
