"""Pydantic schemas for ball-by-ball input validation."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.ball_by_ball import SCORING_RUNS


class BallCreate(BaseModel):
    """Schema for recording a delivery."""

    runs: int = Field(0, ge=0, le=6, description="Runs scored off the ball")
    wicket: bool = Field(False, description="Whether the batter was dismissed")
    player_id: Optional[str] = Field(None, description="Batter on strike; defaults to the first batter at the crease")

    @field_validator("runs")
    @classmethod
    def validate_runs(cls, v):
        """Validate runs against the values a scorer can record."""
        if v not in SCORING_RUNS:
            raise ValueError(f"Runs must be one of: {', '.join(str(r) for r in SCORING_RUNS)}")
        return v
