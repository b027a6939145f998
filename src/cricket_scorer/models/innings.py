"""Innings model: ball log, batting scores and completion state."""

import logging
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import Field, PrivateAttr

from ..errors import InvalidDeliveryError
from .ball_by_ball import SCORING_RUNS, Ball
from .base import EntityModel, OversLimit, ref_id
from .player_stats import PlayerScore
from .players import Player

logger = logging.getLogger(__name__)


class InningsStatus(str, Enum):
    """Enumeration of innings statuses."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DECLARED = "declared"


class Innings(EntityModel):
    """One team's batting period within a match."""

    team_id: str = Field(..., min_length=1)
    balls: List[Ball] = Field(default_factory=list)
    scores: List[PlayerScore] = Field(default_factory=list)
    overs_to_play: OversLimit
    declared: bool = False

    _match = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for score in self.scores:
            score._innings = self

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    @property
    def match(self):
        return self._match

    @property
    def team(self):
        if self._match is None:
            return None
        return self._match.team_by_id(self.team_id)

    def lookup_player(self, player_id: str) -> Optional[Player]:
        if self._match is None:
            return None
        return self._match.lookup_player(player_id)

    def score_for(self, player: Union[Player, str]) -> Optional[PlayerScore]:
        player_id = ref_id(player)
        for score in self.scores:
            if score.player_id == player_id:
                return score
        return None

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def total_runs(self) -> int:
        return sum(ball.runs for ball in self.balls)

    @property
    def total_wickets(self) -> int:
        return sum(1 for score in self.scores if score.out)

    @property
    def ball_count(self) -> int:
        return len(self.balls)

    @property
    def overs_played(self) -> float:
        """Overs in cricket notation: 7 balls is 1.1, not 1.1667."""
        count = len(self.balls)
        return count // 6 + (count % 6) / 10

    @property
    def run_rate(self) -> float:
        overs = self.overs_played
        if overs == 0:
            return 0.0
        return self.total_runs / overs

    @property
    def active_scores(self) -> List[PlayerScore]:
        """Batters currently at the crease."""
        return [score for score in self.scores if not score.out]

    @property
    def players_yet_to_bat(self) -> List[Player]:
        team = self.team
        if team is None:
            return []
        batted = {score.player_id for score in self.scores}
        return [player for player in team.players if player.id not in batted]

    @property
    def target(self) -> Optional[int]:
        """Chase target, set only while this is the match's final innings."""
        if self._match is None:
            return None
        return self._match.target_for(self)

    @property
    def is_all_out(self) -> bool:
        return not self.active_scores and not self.players_yet_to_bat

    @property
    def is_complete(self) -> bool:
        target = self.target
        if target is not None and self.total_runs >= target:
            return True
        overs_completed = self.overs_played >= self.overs_to_play
        return overs_completed or self.is_all_out or self.declared

    @property
    def status(self) -> InningsStatus:
        if not self.is_complete:
            return InningsStatus.IN_PROGRESS
        if self.declared:
            return InningsStatus.DECLARED
        return InningsStatus.COMPLETED

    @property
    def is_current(self) -> bool:
        if self._match is None:
            return True
        return self._match.current_innings is self

    @property
    def successor(self) -> Optional["Innings"]:
        """Innings that followed this one, if any."""
        if self._match is None:
            return None
        innings = self._match.innings
        for position, candidate in enumerate(innings[:-1]):
            if candidate is self:
                return innings[position + 1]
        return None

    @property
    def can_undo(self) -> bool:
        """Balls exist and no later innings has started scoring."""
        if not self.balls:
            return False
        if self.is_current:
            return True
        successor = self.successor
        return successor is not None and successor.is_current and not successor.balls

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_player_score(self, player: Union[Player, str]) -> PlayerScore:
        """Send a batter in. Returns the existing score if they already batted."""
        existing = self.score_for(player)
        if existing is not None:
            return existing
        score = PlayerScore(player_id=ref_id(player))
        score._innings = self
        self.scores.append(score)
        return score

    def add_ball(self, runs: int, wicket: bool = False, player: Union[Player, str, None] = None) -> bool:
        """Record a delivery faced by ``player``.

        Returns False without touching the log when the innings is already
        complete or the player is not at the crease.
        """
        if runs not in SCORING_RUNS:
            raise InvalidDeliveryError(
                f"Cannot score {runs} runs off one ball; expected one of {SCORING_RUNS}"
            )

        if player is None:
            active = self.active_scores
            if not active:
                logger.warning(f"No batter at the crease in innings {self.id}, ball rejected")
                return False
            player_id = active[0].player_id
        else:
            player_id = ref_id(player)

        if self.is_complete:
            logger.warning(f"Innings {self.id} is complete, ball rejected")
            return False

        score = self.score_for(player_id)
        if score is None or score.out:
            logger.warning(f"Player {player_id} is not batting in innings {self.id}, ball rejected")
            return False

        replacement_id = None
        if wicket:
            score.out = True
            yet_to_bat = self.players_yet_to_bat
            if yet_to_bat:
                replacement_id = yet_to_bat[0].id
                self.add_player_score(replacement_id)

        self.balls.append(
            Ball(runs=runs, wicket=wicket, player_id=player_id, replacement_id=replacement_id)
        )
        logger.debug(f"Innings {self.id}: {runs} run(s){' and a wicket' if wicket else ''} off the bat of {player_id}")
        self._changed()
        return True

    def undo_last_ball(self) -> Optional[Ball]:
        """Remove the most recent delivery and everything it caused."""
        if not self.balls:
            return None
        if not self.can_undo:
            logger.warning(f"Innings {self.id} has been followed by a scored innings, undo rejected")
            return None

        ball = self.balls.pop()
        if ball.wicket:
            score = self.score_for(ball.player_id)
            if score is not None:
                score.out = False
            if ball.replacement_id is not None:
                self.scores = [s for s in self.scores if s.player_id != ball.replacement_id]

        logger.debug(f"Innings {self.id}: undid {ball!r}")
        self._changed()
        return ball

    def declare(self) -> bool:
        """Close the innings early. Cannot be reversed."""
        if self.is_complete:
            logger.info(f"Innings {self.id} is already complete, declaration ignored")
            return False
        self.declared = True
        logger.info(f"Innings {self.id} declared at {self.total_runs}/{self.total_wickets}")
        self._changed()
        return True

    def _changed(self) -> None:
        if self._match is not None:
            self._match.after_change()

    def __repr__(self) -> str:
        return f"<Innings(team='{self.team_id}', {self.total_runs}/{self.total_wickets} in {self.overs_played:.1f})>"
