from enum import Enum
from pydantic import Field
from typing import Optional

from .base import BaseGolfModel

LOST_BALL_PENALTY = 2  # stroke + distance


class OopsieKind(str, Enum):
    """Short-game / tee mishaps tracked per hole."""
    LOST_BALL = "lost_ball"
    BUNKER = "bunker"
    DUFFED = "duffed"


class TeeShotResult(str, Enum):
    FAIRWAY = "fairway"
    TROUBLE = "trouble"


class Oopsies(BaseGolfModel):
    """Mishap counts for a single hole."""
    lost_ball: int = Field(0, ge=0)
    bunker: int = Field(0, ge=0)
    duffed: int = Field(0, ge=0)

    def get(self, kind: OopsieKind) -> int:
        if kind is OopsieKind.LOST_BALL:
            return self.lost_ball
        if kind is OopsieKind.BUNKER:
            return self.bunker
        return self.duffed

    def with_count(self, kind: OopsieKind, value: int) -> "Oopsies":
        """Return a copy with one counter replaced."""
        return self.patched(**{kind.value: value})


class Hole(BaseGolfModel):
    """One hole of a round: static layout (par, stroke index) plus the player's entries."""
    n: int = Field(..., ge=1, le=18)
    par: int = Field(4, ge=3, le=5)
    stroke_index: int = Field(..., ge=1, le=18)

    strokes: Optional[int] = Field(None, ge=0)
    putts: Optional[int] = Field(None, ge=0)
    missed_putts_6ft: Optional[int] = Field(None, ge=0)
    # Only meaningful when par != 3
    reached_sd: Optional[bool] = None
    tee_shot_result: Optional[TeeShotResult] = None

    oopsies: Oopsies = Field(default_factory=Oopsies)

    @property
    def is_played(self) -> bool:
        return self.strokes is not None

    @property
    def is_par3(self) -> bool:
        return self.par == 3

    def has_entries(self) -> bool:
        """True once any entry field has been touched."""
        return (
            self.strokes is not None
            or self.putts is not None
            or self.missed_putts_6ft is not None
            or self.reached_sd is not None
            or self.tee_shot_result is not None
            or self.oopsies != Oopsies()
        )

    def cleared(self) -> "Hole":
        """Copy of this hole with layout kept and every entry field reset."""
        return Hole(n=self.n, par=self.par, stroke_index=self.stroke_index)

    def with_oopsie(self, kind: OopsieKind, value: int) -> "Hole":
        return self.patched(oopsies=self.oopsies.with_count(kind, value).model_dump())
