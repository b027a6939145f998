"""Engine and session handling for the snapshot database."""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

# Engine for settings.database.url, built on first use
_engine: Optional[Engine] = None
_default_factory: Optional[sessionmaker] = None


def get_database_engine() -> Engine:
    """Get or create the engine for the configured snapshot database."""
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.database.url,
            pool_pre_ping=True,
            echo=settings.database.echo,
        )
        logger.debug(f"Snapshot database: {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def _session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    global _default_factory
    if engine is not None:
        return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    if _default_factory is None:
        _default_factory = sessionmaker(bind=get_database_engine(), autoflush=False, expire_on_commit=False)
    return _default_factory


@contextmanager
def get_session(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """One transaction against the snapshot database.

    Commits when the block exits normally and rolls back if it raises.
    """
    with _session_factory(engine).begin() as session:
        yield session


def create_tables(engine: Optional[Engine] = None) -> None:
    """Create the snapshot table if it is missing."""
    from .snapshots import StoreSnapshot
    StoreSnapshot.__table__.create(bind=engine or get_database_engine(), checkfirst=True)


def drop_tables(engine: Optional[Engine] = None) -> None:
    """Drop the snapshot table, losing every saved store."""
    from .snapshots import StoreSnapshot
    StoreSnapshot.__table__.drop(bind=engine or get_database_engine(), checkfirst=True)
    logger.warning("Dropped the snapshot table")


def reset_engine() -> None:
    """Dispose the cached engine so the next call picks up new settings."""
    global _engine, _default_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _default_factory = None
