"""Cricket Scorer - match state model for amateur cricket scoring."""

from .config import settings
from .store import RootStore
from .snapshots import SnapshotRepository

__all__ = ["settings", "RootStore", "SnapshotRepository"]
