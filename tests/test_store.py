"""Tests for the player registry, match creation and change notification."""

import math

import pytest
from pydantic import ValidationError

from cricket_scorer.models import MatchStatus
from cricket_scorer.store import RootStore

from conftest import make_store


def test_add_player_registers_by_id():
    store = RootStore()
    player = store.add_player("  Virat ")

    assert player.name == "Virat"
    assert store.get_player(player.id) is player
    assert store.players_count == 1


def test_players_with_same_name_are_distinct():
    store = RootStore()
    first = store.add_player("Joe")
    second = store.add_player("Joe")

    assert first.id != second.id
    assert store.players_count == 2


def test_blank_player_name_rejected():
    store = RootStore()
    with pytest.raises(ValidationError):
        store.add_player("   ")
    assert store.players_count == 0


def test_update_player(store):
    player = next(iter(store.players.values()))

    assert store.update_player(player.id, "Sachin") is True
    assert store.get_player(player.id).name == "Sachin"
    assert store.update_player("missing", "Nobody") is False


def test_remove_player_keeps_team_reference(store):
    match = store.add_match(1, 5)
    team = match.teams[0]
    removed_id = team.player_ids[0]

    assert store.remove_player(removed_id) is True
    assert store.get_player(removed_id) is None
    assert team.has_player(removed_id)
    assert removed_id not in [p.id for p in team.players]
    assert store.remove_player(removed_id) is False


def test_add_match_needs_minimum_players():
    store = make_store(3)
    assert store.add_match(1, 5) is None
    assert store.matches == {}

    store.add_player("Kane")
    assert store.add_match(1, 5) is not None


def test_min_players_is_configurable():
    store = make_store(6, min_players=8)
    assert store.add_match() is None


def test_add_match_splits_every_player(store):
    match = store.add_match(2, 10)
    first, second = (set(team.player_ids) for team in match.teams)

    assert len(first) == len(second) == 4
    assert first.isdisjoint(second)
    assert first | second == set(store.players)
    assert match.innings_per_team == 2
    assert match.overs_per_innings == 10
    assert match.status == MatchStatus.AWAITING_TOSS
    assert store.get_match(match.id) is match


def test_odd_player_count_goes_to_second_team():
    store = make_store(7)
    match = store.add_match()
    first, second = match.teams

    assert len(first.player_ids) == 3
    assert len(second.player_ids) == 4
    assert math.isinf(match.overs_per_innings)


def test_odd_player_can_play_for_both_teams():
    store = make_store(7, share_leftover_player=True)
    match = store.add_match()
    first, second = (set(team.player_ids) for team in match.teams)

    assert len(first) == len(second) == 4
    assert len(first & second) == 1
    assert first | second == set(store.players)


def test_split_is_reproducible_with_seed():
    first = make_store(8, seed=7).add_match()
    second = make_store(8, seed=7).add_match()

    first_names = [[p.name for p in team.players] for team in first.teams]
    second_names = [[p.name for p in team.players] for team in second.teams]
    assert first_names == second_names


def test_add_match_rejects_bad_format(store):
    with pytest.raises(ValidationError):
        store.add_match(3, 5)
    with pytest.raises(ValidationError):
        store.add_match(1, 0)
    assert store.matches == {}


def test_delete_match(store):
    match = store.add_match(1, 5)

    assert store.delete_match(match.id) is True
    assert store.get_match(match.id) is None
    assert match.store is None
    assert store.delete_match(match.id) is False


def test_listeners_called_after_each_command():
    store = RootStore()
    calls = []
    unsubscribe = store.subscribe(calls.append)

    store.add_player("Steve")
    store.add_player("Pat")
    assert calls == [store, store]

    unsubscribe()
    store.add_player("Mark")
    assert len(calls) == 2


def test_scoring_notifies_store(match):
    store = match.store
    calls = []
    store.subscribe(calls.append)

    match.current_innings.add_ball(4)
    match.current_innings.undo_last_ball()

    assert len(calls) == 2


def test_rejected_ball_does_not_notify(match):
    store = match.store
    calls = []
    store.subscribe(calls.append)

    yet_to_bat = match.current_innings.players_yet_to_bat[0]
    match.current_innings.add_ball(1, False, yet_to_bat)

    assert calls == []


def test_demo_players_registered_once():
    store = RootStore()
    store.add_player("virat")

    added = store.add_demo_players()

    assert [p.name for p in added] == ["Rohit", "Shikhar", "KL", "Mark", "Pat", "David", "Joe"]
    assert store.players_count == 8
    assert store.add_demo_players() == []
    assert store.add_match(1, 5) is not None
