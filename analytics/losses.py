from typing import Iterable, Optional

from models.hole import LOST_BALL_PENALTY, Hole, OopsieKind
from models.level import Level
from models.round import RoundState, Weights

from .rounding import round1
from .targets import allowed_shots_to_sd, target_after_sd

PAR_PUTTS = 2


def putting_lost(putts: Optional[int]) -> int:
    """Putts beyond two on a hole. Zero when putts were not entered."""
    if putts is None:
        return 0
    return max(0, putts - PAR_PUTTS)


def oopsie_lost(hole: Hole, weights: Weights, kind: OopsieKind) -> float:
    """Strokes lost to one kind of mishap on a hole."""
    count = hole.oopsies.get(kind)
    if kind is OopsieKind.LOST_BALL:
        return count * LOST_BALL_PENALTY
    return count * weights.for_kind(kind)


def hole_strokes_lost(hole: Hole, weights: Weights) -> float:
    """
    Strokes lost on a hole: lost balls (2 each), weighted bunker and duffed
    shots, plus putting loss. Works on unfinished holes too.
    """
    total = sum(oopsie_lost(hole, weights, kind) for kind in OopsieKind)
    return round1(total + putting_lost(hole.putts))


def par3_equivalent(level: Level, hole: Hole) -> Optional[bool]:
    """
    Did the hole play like a successful par-3 finish?

    On par 4/5 this assumes exactly the allowed shots were used to reach
    scoring distance. That is an approximation, not a measurement.
    """
    if hole.strokes is None:
        return None
    target = target_after_sd(hole)

    if hole.par == 3:
        return hole.strokes <= target

    allowed = allowed_shots_to_sd(level, hole)
    if allowed is None:
        return None
    return hole.strokes - allowed <= target


def lost_ball_penalty_total(round_state: RoundState) -> float:
    """Penalty strokes from lost balls across the active holes."""
    return round1(sum(h.oopsies.lost_ball * LOST_BALL_PENALTY for h in round_state.active_holes))


def oopsie_counts(holes: Iterable[Hole]) -> dict:
    """Raw mishap counts keyed by OopsieKind value."""
    counts = {kind.value: 0 for kind in OopsieKind}
    for hole in holes:
        for kind in OopsieKind:
            counts[kind.value] += hole.oopsies.get(kind)
    return counts
