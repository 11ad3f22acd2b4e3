"""Target rules derived from skill level, par and stroke index.

Stroke index 1 is the hardest hole, 18 the easiest. Indexes 1-9 are the
"harder half", 10-18 the "easier half".
"""

from typing import Optional

from models.hole import Hole
from models.level import Level

EASY_HALF_MIN_SI = 10
# Target for the part of the hole after scoring distance is reached
PAR3_FINISH = 3
HARD_PAR3_FINISH = 4


def _easy_half(stroke_index: int) -> bool:
    return stroke_index >= EASY_HALF_MIN_SI


def allowed_shots_to_sd(level: Level, hole: Hole) -> Optional[int]:
    """Shots allowed to reach scoring distance; None on par 3s (no approach phase)."""
    if hole.par == 3:
        return None
    if level == Level.BOGEY_GOLF:
        return 2
    if level == Level.BREAK_80:
        return 1 if _easy_half(hole.stroke_index) else 2
    return 1


def target_after_sd(hole: Hole) -> int:
    """
    Strokes expected once at scoring distance, finishing the hole like a par 3.

    Harder par 3s (SI 1-9) are played to a par-4 finish.
    """
    if hole.par == 3:
        return PAR3_FINISH if _easy_half(hole.stroke_index) else HARD_PAR3_FINISH
    return PAR3_FINISH


def goal_score(level: Level, par: int, stroke_index: int) -> int:
    """
    Goal score for a hole.

    Scratch: par. Bogey Golf: par + 1 everywhere.
    Break 80: par + 1 on the easier half (SI 10-18), otherwise par.
    """
    if level == Level.SCRATCH:
        return par
    if level == Level.BOGEY_GOLF:
        return par + 1
    return par + 1 if _easy_half(stroke_index) else par
