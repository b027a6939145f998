"""Tests for match targets, automatic progression and results."""

import pytest

from cricket_scorer.errors import MatchStateError
from cricket_scorer.models import MatchStatus

from conftest import WICKET, make_store, play, start_match


@pytest.fixture
def t5_match(big_store):
    """One innings per side, five overs, eight players each."""
    return start_match(big_store, 1, 5)


def first_innings_50_for_3():
    # 3 wickets + 8 sixes + a two + 18 dots = 30 balls, 50 runs
    return [WICKET] * 3 + [6] * 8 + [2] + [0] * 18


def test_new_match_awaits_toss(big_store):
    match = big_store.add_match(1, 5)
    assert match.status == MatchStatus.AWAITING_TOSS
    assert match.current_innings is None
    assert match.target is None
    assert match.winner is None
    assert not match.is_complete


def test_second_innings_starts_automatically(t5_match):
    team_a, team_b = t5_match.teams
    first = t5_match.current_innings
    assert t5_match.target is None

    play(first, first_innings_50_for_3())

    assert first.total_runs == 50
    assert first.total_wickets == 3
    assert first.is_complete
    assert len(t5_match.innings) == 2
    second = t5_match.current_innings
    assert second.team is team_b
    assert second.overs_to_play == 5
    assert t5_match.target == 51
    assert second.target == 51
    assert first.target is None
    assert t5_match.winner is None
    assert t5_match.status == MatchStatus.IN_PROGRESS


def test_chase_completes_on_reaching_target(t5_match):
    team_a, team_b = t5_match.teams
    play(t5_match.current_innings, first_innings_50_for_3())
    second = t5_match.current_innings

    # 2 wickets, 16 dots, a three and 8 sixes: 27 balls, the last six reaches 51
    play(second, [WICKET] * 2 + [0] * 16 + [3] + [6] * 7)
    assert not second.is_complete
    play(second, [6])

    assert second.total_runs == 51
    assert second.overs_played == pytest.approx(4.3)
    assert second.is_complete
    assert t5_match.is_complete
    assert t5_match.winner is team_b
    assert t5_match.status == MatchStatus.COMPLETED
    assert t5_match.result_summary == f"{team_b.name} won by 6 wickets"
    assert len(t5_match.innings) == 2


def test_defended_total(t5_match):
    team_a, team_b = t5_match.teams
    play(t5_match.current_innings, first_innings_50_for_3())
    second = t5_match.current_innings

    # 7 wickets + 6 sixes + a four + 16 dots = 30 balls, 40 runs
    play(second, [WICKET] * 7 + [6] * 6 + [4] + [0] * 16)

    assert second.total_runs == 40
    assert second.total_wickets == 7
    assert second.is_complete
    assert t5_match.winner is team_a
    assert t5_match.result_summary == f"{team_a.name} won by 10 runs"


def test_level_scores_go_to_the_side_batting_first(t5_match):
    team_a, _ = t5_match.teams
    play(t5_match.current_innings, first_innings_50_for_3())
    play(t5_match.current_innings, [6] * 8 + [2] + [0] * 21)

    assert t5_match.current_innings.total_runs == 50
    assert t5_match.winner is team_a


def test_undo_after_winning_ball_withdraws_result(t5_match):
    play(t5_match.current_innings, first_innings_50_for_3())
    second = t5_match.current_innings
    play(second, [6] * 8 + [3])
    assert t5_match.winner is not None

    second.undo_last_ball()

    assert t5_match.winner is None
    assert not t5_match.is_complete
    assert second.add_ball(4)
    assert t5_match.winner is second.team


def test_undo_reopens_innings_ended_by_last_ball(t5_match):
    first = t5_match.current_innings
    play(first, [1] * 30)
    assert len(t5_match.innings) == 2
    assert t5_match.current_innings.can_undo is False
    assert first.can_undo
    assert t5_match.undoable_innings is first

    removed = first.undo_last_ball()

    assert removed.runs == 1
    assert len(t5_match.innings) == 1
    assert t5_match.current_innings is first
    assert not first.is_complete
    assert first.ball_count == 29
    assert first.add_ball(4)
    assert len(t5_match.innings) == 2


def test_undo_reopens_innings_ended_by_all_out():
    store = make_store(4)
    match = start_match(store, 1, 5)
    first = match.current_innings
    play(first, [4, WICKET, WICKET])
    assert len(match.innings) == 2

    first.undo_last_ball()

    assert len(match.innings) == 1
    assert not first.is_complete
    assert len(first.active_scores) == 1
    assert match.target is None


def test_followed_innings_locked_once_next_innings_scores(t5_match):
    first = t5_match.current_innings
    play(first, [1] * 30)
    play(t5_match.current_innings, [2])

    assert first.can_undo is False
    assert first.undo_last_ball() is None
    assert first.ball_count == 30
    assert len(t5_match.innings) == 2
    assert t5_match.undoable_innings is t5_match.current_innings


def test_start_innings_rejected_while_innings_in_play(t5_match):
    team_a, team_b = t5_match.teams
    assert t5_match.start_innings(team_b) is None
    assert len(t5_match.innings) == 1


def test_start_innings_rejects_unknown_team(t5_match):
    with pytest.raises(MatchStateError):
        t5_match.start_innings("not-a-team")


def test_start_innings_rejected_when_all_innings_played(t5_match):
    team_a, team_b = t5_match.teams
    play(t5_match.current_innings, [0] * 30)
    play(t5_match.current_innings, [0] * 30)

    assert t5_match.is_complete
    assert t5_match.start_innings(team_a) is None
    assert len(t5_match.innings) == 2


def test_two_innings_per_side_target_and_alternation():
    store = make_store(8)
    match = start_match(store, 2, "unlimited")
    team_a, team_b = match.teams

    play(match.current_innings, [4] * 5)       # A: 20
    match.current_innings.declare()
    play(match.current_innings, [3] * 5)       # B: 15
    match.current_innings.declare()
    assert match.target is None
    play(match.current_innings, [2] * 5)       # A: 10
    match.current_innings.declare()

    assert [i.team_id for i in match.innings] == [team_a.id, team_b.id, team_a.id, team_b.id]
    assert match.target == 20 + 10 - 15 + 1

    play(match.current_innings, [4] * 4)
    assert match.winner is team_b


def test_innings_victory_when_target_already_passed():
    store = make_store(8)
    match = start_match(store, 2, "unlimited")
    team_a, team_b = match.teams

    play(match.current_innings, [1] * 5)       # A: 5
    match.current_innings.declare()
    play(match.current_innings, [6] * 5)       # B: 30
    match.current_innings.declare()
    play(match.current_innings, [2] * 5)       # A: 10
    match.current_innings.declare()

    assert len(match.innings) == 4
    assert match.target == 5 + 10 - 30 + 1
    assert match.current_innings.is_complete
    assert match.winner is team_b
    assert match.result_summary == f"{team_b.name} won by an innings and 15 runs"


def test_all_out_ends_innings_and_starts_next():
    store = make_store(4)
    match = start_match(store, 1, 5)
    first = match.current_innings

    play(first, [4, WICKET, WICKET])

    assert first.is_complete
    assert first.total_wickets == 2
    assert len(match.innings) == 2
    assert match.target == 5


def test_team_name_from_initials():
    store = make_store(4)
    match = store.add_match(1, 5)
    for team in match.teams:
        expected = "".join(p.name[0] for p in team.players).upper()[:3]
        assert team.name == expected
        assert len(team.name) == 2


def test_other_team(t5_match):
    team_a, team_b = t5_match.teams
    assert t5_match.other_team(team_a) is team_b
    assert t5_match.other_team(team_b.id) is team_a
