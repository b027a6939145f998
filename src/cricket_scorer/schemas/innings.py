"""Pydantic schemas for innings scorecards."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.base import OversLimit
from ..models.innings import Innings, InningsStatus
from ..models.player_stats import PlayerScore


class BatterLine(BaseModel):
    """One row of the batting card."""

    player_id: str = Field(..., description="Player ID")
    name: str = Field(..., description="Player name, or '?' if the player was removed")
    runs: int = Field(..., ge=0)
    balls: int = Field(..., ge=0)
    fours: int = Field(0, ge=0)
    sixes: int = Field(0, ge=0)
    strike_rate: float = Field(..., ge=0)
    out: bool = Field(...)

    @classmethod
    def from_score(cls, score: PlayerScore) -> "BatterLine":
        player = score.player
        return cls(
            player_id=score.player_id,
            name=player.name if player is not None else "?",
            runs=score.total_runs,
            balls=score.balls_faced,
            fours=score.fours,
            sixes=score.sixes,
            strike_rate=round(score.strike_rate, 2),
            out=score.out,
        )


class InningsSummary(BaseModel):
    """Read-only view of an innings for rendering."""

    id: str = Field(..., description="Innings ID")
    number: int = Field(..., ge=1, le=4, description="Innings number within the match (1-4)")
    team_id: str = Field(..., description="Batting team ID")
    team_name: str = Field(..., description="Batting team abbreviation")
    runs: int = Field(..., ge=0)
    wickets: int = Field(..., ge=0)
    overs_played: float = Field(..., ge=0, description="Overs in X.Y notation")
    overs_to_play: OversLimit
    run_rate: float = Field(..., ge=0)
    target: Optional[int] = Field(None, description="Chase target, final innings only")
    status: InningsStatus
    batters: List[BatterLine] = Field(default_factory=list)
    yet_to_bat: List[str] = Field(default_factory=list, description="Names of players yet to bat")

    @classmethod
    def from_innings(cls, innings: Innings, number: int) -> "InningsSummary":
        team = innings.team
        return cls(
            id=innings.id,
            number=number,
            team_id=innings.team_id,
            team_name=team.name if team is not None else "?",
            runs=innings.total_runs,
            wickets=innings.total_wickets,
            overs_played=innings.overs_played,
            overs_to_play=innings.overs_to_play,
            run_rate=round(innings.run_rate, 2),
            target=innings.target,
            status=innings.status,
            batters=[BatterLine.from_score(score) for score in innings.scores],
            yet_to_bat=[player.name for player in innings.players_yet_to_bat],
        )

    @property
    def score_line(self) -> str:
        return f"{self.runs}/{self.wickets}"
