"""Snapshot persistence for the root store."""

import json
import logging
from typing import Callable, Optional

from sqlalchemy import Column, DateTime, Engine, Integer, String, Text, func, select
from sqlalchemy.orm import declarative_base

from .checks import MatchIntegrityChecker
from .config import settings
from .database import create_tables, get_session
from .errors import SnapshotError
from .store import RootStore

logger = logging.getLogger(__name__)


class Base:
    """Base class for all database models."""

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


# Create the declarative base
Base = declarative_base(cls=Base)


class StoreSnapshot(Base):
    """Serialized root store, one row per snapshot key."""

    __tablename__ = "store_snapshots"

    key = Column(String(50), nullable=False, unique=True, index=True)
    body = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<StoreSnapshot(key='{self.key}', bytes={len(self.body or '')})>"


class SnapshotRepository:
    """Loads and saves a :class:`RootStore` as a JSON snapshot row."""

    def __init__(self, key: Optional[str] = None, engine: Optional[Engine] = None):
        self.key = key or settings.match.snapshot_key
        self.engine = engine

    def ensure_schema(self) -> None:
        create_tables(self.engine)

    def save(self, store: RootStore) -> None:
        # allow_nan=False: unlimited overs must already be encoded as a token
        body = json.dumps(store.snapshot(), allow_nan=False)
        with get_session(self.engine) as session:
            record = session.execute(
                select(StoreSnapshot).where(StoreSnapshot.key == self.key)
            ).scalar_one_or_none()
            if record is None:
                session.add(StoreSnapshot(key=self.key, body=body))
            else:
                record.body = body
        logger.debug(f"Saved snapshot '{self.key}' ({len(body)} bytes)")

    def load(self) -> Optional[RootStore]:
        """Rebuild the stored state, or None if nothing has been saved yet."""
        with get_session(self.engine) as session:
            record = session.execute(
                select(StoreSnapshot).where(StoreSnapshot.key == self.key)
            ).scalar_one_or_none()
            if record is None:
                return None
            body = record.body

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot '{self.key}' is not valid JSON: {e}") from e

        store = RootStore.from_snapshot(data)

        report = MatchIntegrityChecker().check_store(store)
        for match_id, issues in report["checks"].items():
            for issue in issues:
                logger.warning(f"Snapshot '{self.key}' match {match_id}: {issue['type']} - {issue['detail']}")

        logger.info(f"Loaded snapshot '{self.key}': {store.players_count} players, {len(store.matches)} matches")
        return store

    def load_or_create(self) -> RootStore:
        store = self.load()
        if store is None:
            logger.info(f"No snapshot '{self.key}' found, starting with an empty store")
            store = RootStore()
        return store

    def delete(self) -> bool:
        with get_session(self.engine) as session:
            record = session.execute(
                select(StoreSnapshot).where(StoreSnapshot.key == self.key)
            ).scalar_one_or_none()
            if record is None:
                return False
            session.delete(record)
        return True

    def attach(self, store: RootStore) -> Callable[[], None]:
        """Save ``store`` after every change; returns the unsubscribe function."""
        return store.subscribe(self.save)
