"""Team model for matches."""

from typing import List, Tuple

from pydantic import Field, PrivateAttr

from .base import EntityModel
from .players import Player


class Team(EntityModel):
    """Fixed group of players formed when a match is created."""

    # Membership is fixed at creation
    player_ids: Tuple[str, ...] = Field(..., min_length=1)

    _match = PrivateAttr(default=None)

    @property
    def players(self) -> List[Player]:
        """Members in roster order, skipping players no longer registered."""
        if self._match is None:
            return []
        resolved = (self._match.lookup_player(player_id) for player_id in self.player_ids)
        return [player for player in resolved if player is not None]

    @property
    def name(self) -> str:
        """Abbreviation built from member initials, e.g. VRS."""
        return "".join(player.initial for player in self.players).upper()[:3]

    def has_player(self, player_id: str) -> bool:
        return player_id in self.player_ids

    def __repr__(self) -> str:
        return f"<Team(id='{self.id}', players={len(self.player_ids)})>"
