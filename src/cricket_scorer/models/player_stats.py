"""Per-innings batting scores derived from the ball log."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .ball_by_ball import Ball
from .players import Player


class PlayerScore(BaseModel):
    """Batting record of one player in one innings.

    Only the dismissal flag is stored. Everything else is read from the
    owning innings' ball log on access, so the figures cannot drift from
    the deliveries actually recorded.
    """

    model_config = ConfigDict(extra="ignore")

    player_id: str = Field(..., min_length=1)
    out: bool = False

    _innings = PrivateAttr(default=None)

    @property
    def player(self) -> Optional[Player]:
        """Resolved player, or None if the player was removed from the store."""
        if self._innings is None:
            return None
        return self._innings.lookup_player(self.player_id)

    @property
    def balls(self) -> List[Ball]:
        """Deliveries faced by this player, in log order."""
        if self._innings is None:
            return []
        return [ball for ball in self._innings.balls if ball.player_id == self.player_id]

    @property
    def total_runs(self) -> int:
        return sum(ball.runs for ball in self.balls)

    @property
    def balls_faced(self) -> int:
        return len(self.balls)

    @property
    def fours(self) -> int:
        return sum(1 for ball in self.balls if ball.is_four)

    @property
    def sixes(self) -> int:
        return sum(1 for ball in self.balls if ball.is_six)

    @property
    def strike_rate(self) -> float:
        """Runs per 100 balls faced."""
        balls = self.balls
        if not balls:
            return 0.0
        return sum(ball.runs for ball in balls) / len(balls) * 100

    def __repr__(self) -> str:
        return f"<PlayerScore(player='{self.player_id}', {self.total_runs}{'' if self.out else '*'})>"
