"""Pydantic schemas for player data validation."""

from pydantic import BaseModel, Field, field_validator


class PlayerBase(BaseModel):
    """Base player schema with common fields."""

    name: str = Field(..., min_length=1, max_length=100, description="Player display name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate that the name has visible characters."""
        v = v.strip()
        if not v:
            raise ValueError("Player name cannot be blank")
        return v


class PlayerCreate(PlayerBase):
    """Schema for registering a new player."""
    pass


class PlayerUpdate(PlayerBase):
    """Schema for renaming a player."""
    pass

