"""Ball-by-ball model for innings scoring."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Run values a scorer can record off a single legal delivery
SCORING_RUNS = (0, 1, 2, 3, 4, 6)


class Ball(BaseModel):
    """A single legal delivery, recorded against the batter on strike."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    runs: int = Field(0, ge=0)
    wicket: bool = False
    player_id: str = Field(..., min_length=1)
    # Batter whose innings this wicket opened, so undo can retract it
    replacement_id: Optional[str] = None

    @property
    def is_four(self) -> bool:
        return self.runs == 4

    @property
    def is_six(self) -> bool:
        return self.runs == 6

    def __repr__(self) -> str:
        return f"<Ball({self.runs} runs{', W' if self.wicket else ''}, player='{self.player_id}')>"
