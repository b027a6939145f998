"""Pydantic schemas for match data validation."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.base import OversLimit
from ..models.matches import Match, MatchStatus
from .innings import InningsSummary


class MatchCreate(BaseModel):
    """Schema for creating a new match."""

    innings_per_team: int = Field(1, ge=1, le=2, description="Innings per team (1 or 2)")
    overs_per_innings: OversLimit = Field(..., description="Overs per innings, or unlimited")


class TeamSummary(BaseModel):
    """Team line of a match summary."""

    id: str = Field(..., description="Team ID")
    name: str = Field(..., description="Team abbreviation")
    players: List[str] = Field(default_factory=list, description="Player names in roster order")


class MatchSummary(BaseModel):
    """Read-only view of a match for rendering."""

    id: str = Field(..., description="Match ID")
    status: MatchStatus
    innings_per_team: int = Field(..., ge=1, le=2)
    overs_per_innings: OversLimit
    teams: List[TeamSummary] = Field(..., min_length=2, max_length=2)
    toss_winner: Optional[str] = Field(None, description="Toss winner abbreviation")
    toss_decision: Optional[str] = Field(None, description="bat or bowl")
    target: Optional[int] = Field(None, description="Target in the final innings")
    winner: Optional[str] = Field(None, description="Winning team abbreviation")
    result: Optional[str] = Field(None, description="Result line")
    innings: List[InningsSummary] = Field(default_factory=list)

    @classmethod
    def from_match(cls, match: Match) -> "MatchSummary":
        toss_winner = match.toss_winner
        winner = match.winner
        return cls(
            id=match.id,
            status=match.status,
            innings_per_team=match.innings_per_team,
            overs_per_innings=match.overs_per_innings,
            teams=[
                TeamSummary(id=team.id, name=team.name, players=[p.name for p in team.players])
                for team in match.teams
            ],
            toss_winner=toss_winner.name if toss_winner is not None else None,
            toss_decision=match.toss_decision.value if match.toss_decision is not None else None,
            target=match.target,
            winner=winner.name if winner is not None else None,
            result=match.result_summary,
            innings=[
                InningsSummary.from_innings(innings, number)
                for number, innings in enumerate(match.innings, start=1)
            ],
        )
