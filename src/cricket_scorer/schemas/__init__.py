"""Pydantic schemas for command validation and scorecard views."""

from .players import PlayerCreate, PlayerUpdate
from .matches import MatchCreate, MatchSummary, TeamSummary
from .innings import InningsSummary, BatterLine
from .ball_by_ball import BallCreate

__all__ = [
    "PlayerCreate",
    "PlayerUpdate",
    "MatchCreate",
    "MatchSummary",
    "TeamSummary",
    "InningsSummary",
    "BatterLine",
    "BallCreate",
]
