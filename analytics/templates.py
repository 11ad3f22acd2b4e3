"""Builders for default holes, course templates and fresh rounds on a known layout."""

import re
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from models.course_template import CourseTemplate, TemplateHole
from models.hole import Hole
from models.level import Level
from models.round import DEFAULT_SCORING_DISTANCE, RoundState, Weights

MAX_NAME_LENGTH = 60


def sanitize_name(name: str) -> str:
    """Trim, collapse whitespace runs and cap the length of a user-entered name."""
    return re.sub(r"\s+", " ", name.strip())[:MAX_NAME_LENGTH]


def make_default_holes(count: int) -> List[Hole]:
    """``count`` par-4 holes numbered 1..count with stroke index equal to the number."""
    return [Hole(n=i + 1, par=4, stroke_index=(i % 18) + 1) for i in range(count)]


def default_round(
    holes_count: int = 18,
    *,
    level: Level = Level.BOGEY_GOLF,
    scoring_distance: int = DEFAULT_SCORING_DISTANCE,
    weights: Optional[Weights] = None,
) -> RoundState:
    return RoundState(
        holes_count=holes_count,
        level=level,
        scoring_distance=scoring_distance,
        weights=weights or Weights(),
        holes=make_default_holes(holes_count),
    )


def template_from_round(round_state: RoundState, name: str) -> CourseTemplate:
    """Snapshot the layout (par, stroke index) of the active holes."""
    return CourseTemplate(
        id=str(uuid4()),
        name=name,
        holes_count=round_state.holes_count,
        holes=[
            TemplateHole(n=h.n, par=h.par, stroke_index=h.stroke_index)
            for h in round_state.active_holes
        ],
        created_at=datetime.now(timezone.utc),
    )


def apply_template_to_new_round(template: CourseTemplate, base: RoundState) -> RoundState:
    """
    Start a new round on the template's layout.

    ``base`` supplies level, scoring distance and weights; its holes are
    ignored. Positions missing from the template keep default layout.
    """
    holes = make_default_holes(template.holes_count)
    for index, src in enumerate(template.holes[:template.holes_count]):
        holes[index] = Hole(n=index + 1, par=src.par, stroke_index=src.stroke_index)

    return RoundState(
        holes_count=template.holes_count,
        level=base.level,
        scoring_distance=base.scoring_distance,
        weights=base.weights.model_copy(),
        holes=holes,
    )


def reset_round_keep_course(round_state: RoundState) -> RoundState:
    """Same course, blank scorecard: keep par and stroke index, clear every entry."""
    return RoundState(
        holes_count=round_state.holes_count,
        level=round_state.level,
        scoring_distance=round_state.scoring_distance,
        weights=round_state.weights.model_copy(),
        holes=[h.cleared() for h in round_state.active_holes],
    )
