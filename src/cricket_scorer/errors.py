"""Exceptions raised by the scoring core."""


class ScoringError(Exception):
    """Base class for scoring errors."""
    pass


class InvalidDeliveryError(ScoringError, ValueError):
    """Raised when a delivery carries a run value that cannot be scored."""
    pass


class MatchStateError(ScoringError):
    """Raised when a structural match invariant would be broken."""
    pass


class SnapshotError(ScoringError):
    """Raised when a persisted snapshot cannot be restored."""
    pass
