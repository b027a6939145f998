"""Root store: the player registry and the match collection."""

import logging
import math
import random
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from .config import MatchSettings, settings
from .errors import SnapshotError
from .models import Match, Player, Team
from .schemas import MatchCreate, PlayerCreate, PlayerUpdate

logger = logging.getLogger(__name__)

Listener = Callable[["RootStore"], None]

# Squad registered by the seed-players command for trying the scorer out
DEMO_PLAYER_NAMES = ("Virat", "Rohit", "Shikhar", "KL", "Mark", "Pat", "David", "Joe")


class RootStore(BaseModel):
    """Sole owner of players and matches.

    Teams and innings belong to their match and refer to players by id.
    Listeners registered with :meth:`subscribe` are called after every
    completed command, which is how snapshots get saved.
    """

    model_config = ConfigDict(extra="ignore")

    players: Dict[str, Player] = Field(default_factory=dict)
    matches: Dict[str, Match] = Field(default_factory=dict)

    _listeners: List[Listener] = PrivateAttr(default_factory=list)
    _rules: Optional[MatchSettings] = PrivateAttr(default=None)
    _rng: Optional[random.Random] = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for match in self.matches.values():
            match.attach(self)

    def configure(self, rules: Optional[MatchSettings] = None, rng: Optional[random.Random] = None) -> "RootStore":
        """Override match rules or the random source (seeded in tests)."""
        if rules is not None:
            self._rules = rules
        if rng is not None:
            self._rng = rng
        return self

    @property
    def rules(self) -> MatchSettings:
        return self._rules or settings.match

    @property
    def rng(self) -> random.Random:
        if self._rng is None:
            self._rng = random.Random()
        return self._rng

    @property
    def players_count(self) -> int:
        return len(self.players)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def add_player(self, name: str) -> Player:
        payload = PlayerCreate(name=name)
        player = Player(name=payload.name)
        self.players[player.id] = player
        logger.info(f"Registered player {player.name} ({player.id})")
        self.notify()
        return player

    def add_demo_players(self) -> List[Player]:
        """Register the demo squad, skipping names that are already taken."""
        taken = {player.name.lower() for player in self.players.values()}
        return [self.add_player(name) for name in DEMO_PLAYER_NAMES if name.lower() not in taken]

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def update_player(self, player_id: str, name: str) -> bool:
        player = self.players.get(player_id)
        if player is None:
            logger.debug(f"Unknown player {player_id}, rename skipped")
            return False
        player.name = PlayerUpdate(name=name).name
        self.notify()
        return True

    def remove_player(self, player_id: str) -> bool:
        """Delete a player. Teams and scores that refer to them keep the id."""
        player = self.players.pop(player_id, None)
        if player is None:
            logger.debug(f"Unknown player {player_id}, removal skipped")
            return False
        logger.info(f"Removed player {player.name} ({player.id})")
        self.notify()
        return True

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------

    def add_match(self, innings_per_team: int = 1, overs_per_innings: Union[float, str, None] = math.inf) -> Optional[Match]:
        """Create a match from a random split of every registered player.

        Returns None when fewer than ``rules.min_players`` are registered.
        """
        payload = MatchCreate(innings_per_team=innings_per_team, overs_per_innings=overs_per_innings)
        rules = self.rules
        if self.players_count < rules.min_players:
            logger.warning(
                f"Need at least {rules.min_players} players to create a match, have {self.players_count}"
            )
            return None

        first, second = self.split_teams(rules.share_leftover_player)
        match = Match(
            teams=[Team(player_ids=first), Team(player_ids=second)],
            innings_per_team=payload.innings_per_team,
            overs_per_innings=payload.overs_per_innings,
        )
        match.attach(self)
        self.matches[match.id] = match
        logger.info(
            f"Created match {match.id}: {match.teams[0].name} v {match.teams[1].name}, "
            f"{payload.innings_per_team} innings per side"
        )
        self.notify()
        return match

    def split_teams(self, share_leftover: bool = False) -> Tuple[List[str], List[str]]:
        """Shuffle the registry and halve it into two rosters of player ids.

        With an odd count the spare player joins the second roster, or
        both rosters when ``share_leftover`` is set.
        """
        ids = list(self.players)
        self.rng.shuffle(ids)
        half = len(ids) // 2
        if len(ids) % 2 and share_leftover:
            leftover = ids[-1]
            return ids[:half] + [leftover], ids[half:-1] + [leftover]
        return ids[:half], ids[half:]

    def get_match(self, match_id: str) -> Optional[Match]:
        return self.matches.get(match_id)

    def delete_match(self, match_id: str) -> bool:
        match = self.matches.pop(match_id, None)
        if match is None:
            logger.debug(f"Unknown match {match_id}, delete skipped")
            return False
        match.attach(None)
        logger.info(f"Deleted match {match_id}")
        self.notify()
        return True

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Complete JSON-compatible state of the store."""
        return self.model_dump(mode="json")

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "RootStore":
        """Rebuild a live store from :meth:`snapshot` output."""
        try:
            store = cls.model_validate(data)
        except ValidationError as e:
            raise SnapshotError(f"Invalid store snapshot: {e}") from e
        for match in store.matches.values():
            match.sync_progress()
        return store

    def __repr__(self) -> str:
        return f"<RootStore(players={len(self.players)}, matches={len(self.matches)})>"
