from pydantic import Field, model_validator
from typing import Any, List, Literal

from .base import BaseGolfModel
from .hole import Hole, OopsieKind
from .level import Level

DEFAULT_SCORING_DISTANCE = 125
MIN_SCORING_DISTANCE = 40
MAX_SCORING_DISTANCE = 200

HolesCount = Literal[9, 18]


class Weights(BaseGolfModel):
    """Per-round multipliers for bunker and duffed mishaps (lost balls are fixed at 2)."""
    bunker: float = Field(1.0, ge=0)
    duffed: float = Field(1.0, ge=0)

    def for_kind(self, kind: OopsieKind) -> float:
        if kind is OopsieKind.BUNKER:
            return self.bunker
        if kind is OopsieKind.DUFFED:
            return self.duffed
        raise ValueError(f"No configurable weight for {kind.value}")


def _default_holes(count: int) -> List[Hole]:
    return [Hole(n=i, par=4, stroke_index=i) for i in range(1, count + 1)]


class RoundState(BaseGolfModel):
    """
    A round being played.

    Only the first ``holes_count`` entries of ``holes`` are authoritative; the
    rest are kept so toggling 9 <-> 18 does not discard entries.
    """
    holes_count: HolesCount = 18
    level: Level = Level.BOGEY_GOLF
    scoring_distance: int = Field(
        DEFAULT_SCORING_DISTANCE, ge=MIN_SCORING_DISTANCE, le=MAX_SCORING_DISTANCE
    )
    weights: Weights = Field(default_factory=Weights)
    holes: List[Hole] = Field(default_factory=lambda: _default_holes(18))

    @model_validator(mode='after')
    def validate_hole_positions(self):
        if len(self.holes) < self.holes_count:
            raise ValueError(
                f"Round has {len(self.holes)} holes but holes_count is {self.holes_count}"
            )
        for index, hole in enumerate(self.active_holes):
            if hole.n != index + 1:
                raise ValueError(f"Hole at position {index + 1} is numbered {hole.n}")
        return self

    @property
    def active_holes(self) -> List[Hole]:
        return self.holes[:self.holes_count]

    @property
    def total_par(self) -> int:
        return sum(h.par for h in self.active_holes)

    def _with_holes(self, holes: List[Hole], **changes: Any) -> "RoundState":
        return self.patched(holes=[h.model_dump() for h in holes], **changes)

    def update_hole(self, index: int, **patch: Any) -> "RoundState":
        """New state with hole at 0-based ``index`` patched."""
        holes = list(self.holes)
        holes[index] = holes[index].patched(**patch)
        return self._with_holes(holes)

    def update_oopsie(self, index: int, kind: OopsieKind, value: int) -> "RoundState":
        holes = list(self.holes)
        holes[index] = holes[index].with_oopsie(kind, value)
        return self._with_holes(holes)

    def with_level(self, level: Level) -> "RoundState":
        return self._with_holes(list(self.holes), level=level)

    def with_weights(self, weights: Weights) -> "RoundState":
        return self._with_holes(list(self.holes), weights=weights.model_dump())

    def with_holes_count(self, holes_count: int) -> "RoundState":
        """
        Switch between 9 and 18 holes.

        Existing holes are kept as-is, including ones beyond the new count,
        so switching back restores them. Positions that never existed are
        filled with default holes.
        """
        holes = list(self.holes)
        holes.extend(_default_holes(holes_count)[len(holes):])
        return self._with_holes(holes, holes_count=holes_count)
