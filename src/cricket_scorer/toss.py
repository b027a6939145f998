"""Coin toss: who calls, who wins, and who bats first."""

import logging
import random
from typing import Optional, Union

from pydantic import BaseModel, Field

from .models import Innings, Match, Team, TossCall, TossDecision
from .models.base import ref_id

logger = logging.getLogger(__name__)


class TossOutcome(BaseModel):
    """Result of a single coin flip."""

    calling_team_id: str = Field(..., description="Team that called")
    call: TossCall
    result: TossCall = Field(..., description="Face the coin landed on")
    winner_id: str = Field(..., description="Team that won the toss")

    @property
    def caller_won(self) -> bool:
        return self.call == self.result


def pick_calling_team(match: Match, rng: Optional[random.Random] = None) -> Team:
    """Choose at random which team calls."""
    rng = rng or random.Random()
    return match.teams[rng.randrange(2)]


def flip_coin(
    match: Match,
    calling_team: Union[Team, str],
    call: Union[TossCall, str],
    rng: Optional[random.Random] = None,
) -> TossOutcome:
    """Flip the coin independently of the call; the caller wins on a match."""
    rng = rng or random.Random()
    call = TossCall(call)
    calling_team_id = ref_id(calling_team)
    result = TossCall.HEADS if rng.random() > 0.5 else TossCall.TAILS
    if result == call:
        winner_id = calling_team_id
    else:
        winner_id = match.other_team(calling_team_id).id
    return TossOutcome(calling_team_id=calling_team_id, call=call, result=result, winner_id=winner_id)


def apply_toss_decision(
    match: Match,
    winner: Union[Team, str],
    decision: Union[TossDecision, str],
    call: Optional[TossCall] = None,
) -> Optional[Innings]:
    """Record the toss winner's choice and open the first innings.

    Returns None if the toss has already been completed for this match.
    """
    if match.completed_toss or match.innings:
        logger.warning(f"Toss already completed for match {match.id}")
        return None

    decision = TossDecision(decision)
    winner_id = ref_id(winner)
    match.record_toss(winner_id, decision, call)
    batting_team = match.team_by_id(winner_id) if decision == TossDecision.BAT else match.other_team(winner_id)
    innings = match.start_innings(batting_team)
    match.complete_toss()
    logger.info(f"Match {match.id}: {match.toss_winner.name} won the toss and chose to {decision.value}")
    return innings


def run_toss(
    match: Match,
    call: Union[TossCall, str],
    decision: Union[TossDecision, str],
    rng: Optional[random.Random] = None,
) -> Optional[TossOutcome]:
    """Whole toss in one step: pick the caller, flip, apply the winner's choice."""
    rng = rng or random.Random()
    calling_team = pick_calling_team(match, rng)
    outcome = flip_coin(match, calling_team, call, rng)
    if apply_toss_decision(match, outcome.winner_id, decision, outcome.call) is None:
        return None
    return outcome
