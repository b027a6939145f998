"""Player model for the scoring store."""

from pydantic import Field

from .base import EntityModel


class Player(EntityModel):
    """Player registered with the store. Identity is the id; the name is editable."""

    name: str = Field(..., max_length=100)

    @property
    def initial(self) -> str:
        """First letter of the display name, used for team abbreviations."""
        return self.name[:1]

    def __repr__(self) -> str:
        return f"<Player(id='{self.id}', name='{self.name}')>"
