"""Match model and the rule that moves a match from toss to result."""

import logging
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import Field, PrivateAttr, field_validator

from ..errors import MatchStateError
from .base import EntityModel, OversLimit, ref_id
from .innings import Innings
from .players import Player
from .teams import Team

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    """Enumeration of match statuses."""
    AWAITING_TOSS = "awaiting_toss"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TossCall(str, Enum):
    HEADS = "heads"
    TAILS = "tails"


class TossDecision(str, Enum):
    BAT = "bat"
    BOWL = "bowl"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class Match(EntityModel):
    """A two-team match of one or two innings per side."""

    teams: List[Team] = Field(..., min_length=2, max_length=2)
    innings: List[Innings] = Field(default_factory=list)
    overs_per_innings: OversLimit
    innings_per_team: int = Field(1, ge=1, le=2)

    # Toss
    completed_toss: bool = False
    toss_winner_id: Optional[str] = None
    toss_decision: Optional[TossDecision] = None
    toss_call: Optional[TossCall] = None

    winner_id: Optional[str] = None

    _store = PrivateAttr(default=None)

    @field_validator("teams")
    @classmethod
    def validate_distinct_teams(cls, v):
        """Validate that the two teams are different entities."""
        if v[0].id == v[1].id:
            raise ValueError("A match needs two distinct teams")
        return v

    def model_post_init(self, __context: Any) -> None:
        for team in self.teams:
            team._match = self
        for innings in self.innings:
            innings._match = self

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    @property
    def store(self):
        return self._store

    def attach(self, store) -> None:
        """Link this match to the store that owns the player registry."""
        self._store = store

    def lookup_player(self, player_id: str) -> Optional[Player]:
        if self._store is None:
            return None
        return self._store.players.get(player_id)

    def team_by_id(self, team_id: Optional[str]) -> Optional[Team]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def other_team(self, team: Union[Team, str]) -> Team:
        team_id = ref_id(team)
        if self.team_by_id(team_id) is None:
            raise MatchStateError(f"Team {team_id} is not playing in match {self.id}")
        return self.teams[1] if self.teams[0].id == team_id else self.teams[0]

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def scheduled_innings(self) -> int:
        return self.innings_per_team * 2

    @property
    def current_innings(self) -> Optional[Innings]:
        return self.innings[-1] if self.innings else None

    @property
    def undoable_innings(self) -> Optional[Innings]:
        """Innings whose last ball an undo would remove, if any."""
        for innings in reversed(self.innings[-2:]):
            if innings.can_undo:
                return innings
        return None

    @property
    def in_final_innings(self) -> bool:
        return len(self.innings) == self.scheduled_innings

    @property
    def target(self) -> Optional[int]:
        """Runs the side batting in the final innings needs to win."""
        if not self.in_final_innings:
            return None
        if self.innings_per_team == 2:
            first_team_id = self.innings[0].team_id
            first_team_total = sum(
                innings.total_runs for innings in self.innings if innings.team_id == first_team_id
            )
            return first_team_total - self.innings[1].total_runs + 1
        return self.innings[0].total_runs + 1

    def target_for(self, innings: Innings) -> Optional[int]:
        """Target for ``innings``; only the final scheduled innings chases one."""
        if not self.in_final_innings or self.innings[-1] is not innings:
            return None
        return self.target

    @property
    def is_complete(self) -> bool:
        return self.in_final_innings and all(innings.is_complete for innings in self.innings)

    @property
    def winner(self) -> Optional[Team]:
        return self.team_by_id(self.winner_id)

    @property
    def toss_winner(self) -> Optional[Team]:
        return self.team_by_id(self.toss_winner_id)

    @property
    def status(self) -> MatchStatus:
        if self.is_complete:
            return MatchStatus.COMPLETED
        if not self.completed_toss and not self.innings:
            return MatchStatus.AWAITING_TOSS
        return MatchStatus.IN_PROGRESS

    @property
    def result_summary(self) -> Optional[str]:
        """Result line such as 'ABC won by 12 runs'."""
        winner = self.winner
        final = self.current_innings
        if winner is None or final is None:
            return None
        target = self.target or 0
        if winner.id == final.team_id:
            if target <= 0 and not final.balls:
                return f"{winner.name} won by an innings and {_plural(1 - target, 'run')}"
            in_hand = len(winner.players) - final.total_wickets
            return f"{winner.name} won by {_plural(in_hand, 'wicket')}"
        margin = target - 1 - final.total_runs
        if margin <= 0:
            return f"{winner.name} won with the scores level"
        return f"{winner.name} won by {_plural(margin, 'run')}"

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_innings(self, team: Union[Team, str]) -> Optional[Innings]:
        """Open an innings for ``team``.

        Rejected (returns None) once every scheduled innings has started,
        while the current innings is still in play, or if ``team`` batted
        in the previous innings.
        """
        team_id = ref_id(team)
        if self.team_by_id(team_id) is None:
            raise MatchStateError(f"Team {team_id} is not playing in match {self.id}")
        if len(self.innings) >= self.scheduled_innings:
            logger.warning(f"Match {self.id} has played all {self.scheduled_innings} innings")
            return None
        current = self.current_innings
        if current is not None and not current.is_complete:
            logger.warning(f"Match {self.id} still has an innings in play")
            return None
        if current is not None and current.team_id == team_id:
            logger.warning(f"Team {team_id} cannot bat in two consecutive innings")
            return None

        innings = self._open_innings(team_id)
        self.after_change()
        return innings

    def complete_toss(self) -> None:
        self.completed_toss = True
        self._notify()

    def record_toss(
        self,
        winner: Union[Team, str],
        decision: TossDecision,
        call: Optional[TossCall] = None,
    ) -> None:
        """Store the toss outcome. Starting the innings is the caller's next step."""
        winner_id = ref_id(winner)
        if self.team_by_id(winner_id) is None:
            raise MatchStateError(f"Team {winner_id} is not playing in match {self.id}")
        self.toss_winner_id = winner_id
        self.toss_decision = TossDecision(decision)
        self.toss_call = TossCall(call) if call is not None else None

    def sync_progress(self) -> None:
        """Bring innings and result in line with the current completion state.

        Runs after every mutation. Starting the next innings or naming the
        winner happens here, and so does undoing either when an undo makes
        the triggering innings incomplete again.
        """
        # Each step opens, retracts or settles one innings
        for _ in range(self.scheduled_innings * 2 + 2):
            if not self._advance():
                break

    def after_change(self) -> None:
        self.sync_progress()
        self._notify()

    def _advance(self) -> bool:
        current = self.current_innings
        if current is None:
            return False

        if len(self.innings) > 1 and not current.balls and not self.innings[-2].is_complete:
            self.innings.pop()
            logger.info(f"Match {self.id}: withdrew innings {current.id}, previous innings resumed")
            return True

        if not current.is_complete:
            if self.winner_id is not None:
                logger.info(f"Match {self.id}: result withdrawn, final innings back in play")
                self.winner_id = None
            return False

        if self.in_final_innings:
            winner = self._decide_winner(current)
            if self.winner_id != winner.id:
                self.winner_id = winner.id
                logger.info(f"Match {self.id}: {self.result_summary}")
            return False

        self._open_innings(self.other_team(current.team_id).id)
        return True

    def _decide_winner(self, final: Innings) -> Team:
        target = self.target
        if target is not None and final.total_runs >= target:
            return self.team_by_id(final.team_id)
        return self.other_team(final.team_id)

    def _open_innings(self, team_id: str) -> Innings:
        innings = Innings(team_id=team_id, overs_to_play=self.overs_per_innings)
        innings._match = self
        team = self.team_by_id(team_id)
        for player in team.players[:2]:
            innings.add_player_score(player)
        self.innings.append(innings)
        logger.info(f"Match {self.id}: innings {len(self.innings)} of {self.scheduled_innings} started for {team.name}")
        return innings

    def _notify(self) -> None:
        if self._store is not None:
            self._store.notify()

    def __repr__(self) -> str:
        return f"<Match(id='{self.id}', innings={len(self.innings)}/{self.scheduled_innings}, status={self.status.value})>"
