"""Scoring entities: players, teams, innings, balls and matches."""

from .base import EntityModel, OversLimit, UNLIMITED_OVERS_TOKEN, new_id
from .players import Player
from .teams import Team
from .ball_by_ball import Ball, SCORING_RUNS
from .player_stats import PlayerScore
from .innings import Innings, InningsStatus
from .matches import Match, MatchStatus, TossCall, TossDecision

__all__ = [
    "EntityModel",
    "OversLimit",
    "UNLIMITED_OVERS_TOKEN",
    "new_id",
    "Player",
    "Team",
    "Ball",
    "SCORING_RUNS",
    "PlayerScore",
    "Innings",
    "InningsStatus",
    "Match",
    "MatchStatus",
    "TossCall",
    "TossDecision",
]
