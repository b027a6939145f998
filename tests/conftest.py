"""Pytest configuration and fixtures for scorer tests."""

import random
from typing import Iterable, Union

import pytest

from cricket_scorer.config import MatchSettings
from cricket_scorer.models import Innings, Match
from cricket_scorer.store import RootStore
from cricket_scorer.toss import apply_toss_decision

NAMES = [
    "Virat", "Rohit", "Shikhar", "KL", "Mark", "Pat", "David", "Joe",
    "Ben", "Steve", "Kane", "Trent", "Babar", "Shaheen", "Rashid", "Quinton",
]

WICKET = "W"


def make_store(players: int = 8, seed: int = 42, **rules) -> RootStore:
    """Store with ``players`` registered and a deterministic RNG."""
    store = RootStore().configure(rules=MatchSettings(**rules), rng=random.Random(seed))
    for name in NAMES[:players]:
        store.add_player(name)
    return store


def start_match(store: RootStore, innings_per_team: int = 1, overs: Union[int, float, str] = 5) -> Match:
    """Create a match and let the first team bat after the toss."""
    match = store.add_match(innings_per_team, overs)
    apply_toss_decision(match, match.teams[0], "bat")
    return match


def play(innings: Innings, deliveries: Iterable[Union[int, str]]) -> None:
    """Record deliveries for whoever is first at the crease; ``"W"`` is a wicket."""
    for delivery in deliveries:
        if delivery == WICKET:
            accepted = innings.add_ball(0, True)
        else:
            accepted = innings.add_ball(delivery)
        assert accepted, f"delivery {delivery!r} was rejected"


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def store():
    """Store with eight players."""
    return make_store(8)


@pytest.fixture
def big_store():
    """Store with sixteen players, eight per side."""
    return make_store(16)


@pytest.fixture
def match(store):
    """One-innings, five-over match with the first team batting."""
    return start_match(store, 1, 5)
