"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the row shapes stored remotely
(rounds, round_holes, courses, course_holes, round_summaries) and the
in-memory RoundState / CourseTemplate / RoundSummary models.
"""

import json
from typing import Any, Optional
from uuid import UUID

from analytics.losses import lost_ball_penalty_total
from analytics.templates import make_default_holes
from models import (
    DEFAULT_SCORING_DISTANCE,
    CourseTemplate,
    Hole,
    Level,
    Oopsies,
    RoundState,
    RoundSummary,
    TemplateHole,
    Weights,
)

# Keys written by older clients
_CAMEL_OOPSIE_KEYS = {"lostBall": "lost_ball"}
_FLOAT_SUMMARY_FIELDS = {"avg_putts", "putts_lost_total", "strokes_lost_total"}


def _json_value(value: Any) -> Any:
    """JSONB values arrive decoded from the pool codec; older rows and fixtures may hold raw text."""
    if isinstance(value, str):
        return json.loads(value)
    return value


def _get(row, key: str, default: Any = None) -> Any:
    try:
        value = row[key]
    except KeyError:
        return default
    return default if value is None else value


def oopsies_from_json(value: Any) -> Oopsies:
    data = _json_value(value) or {}
    normalized = {_CAMEL_OOPSIE_KEYS.get(k, k): v for k, v in data.items()}
    return Oopsies(**{k: v for k, v in normalized.items() if k in Oopsies.model_fields})


def weights_from_json(value: Any) -> Weights:
    data = _json_value(value) or {}
    return Weights(**{k: v for k, v in data.items() if k in Weights.model_fields})


def level_from_value(value: Optional[str]) -> Level:
    try:
        return Level(value)
    except ValueError:
        return Level.BOGEY_GOLF


# ================================================================
# Row -> Model (reads)
# ================================================================

def hole_from_row(row, default: Hole) -> Hole:
    """round_holes row -> Hole, falling back to ``default`` for missing layout."""
    return Hole(
        n=default.n,
        par=_get(row, "par", default.par),
        stroke_index=_get(row, "stroke_index", default.stroke_index),
        strokes=_get(row, "strokes"),
        putts=_get(row, "putts"),
        missed_putts_6ft=_get(row, "missed_putts_6ft"),
        reached_sd=_get(row, "reached_sd"),
        tee_shot_result=_get(row, "tee_shot_result"),
        oopsies=oopsies_from_json(_get(row, "oopsies")),
    )


def round_state_from_rows(round_row, hole_rows: list) -> RoundState:
    """Assemble a RoundState from a rounds row + its round_holes rows.

    Starts from default holes so a round with missing hole rows still has a
    full layout. Rows whose hole_no falls outside the round are ignored.
    """
    holes_count = 9 if _get(round_row, "holes_count") == 9 else 18
    holes = make_default_holes(holes_count)

    for row in hole_rows:
        index = (_get(row, "hole_no", 0)) - 1
        if index < 0 or index >= len(holes):
            continue
        holes[index] = hole_from_row(row, holes[index])

    return RoundState(
        holes_count=holes_count,
        level=level_from_value(_get(round_row, "level")),
        scoring_distance=_get(round_row, "scoring_distance", DEFAULT_SCORING_DISTANCE),
        weights=weights_from_json(_get(round_row, "weights")),
        holes=holes,
    )


def template_from_rows(course_row, hole_rows: list) -> CourseTemplate:
    """courses row + course_holes rows -> CourseTemplate."""
    holes = sorted(
        [
            TemplateHole(n=r["hole_no"], par=r["par"], stroke_index=r["stroke_index"])
            for r in hole_rows
        ],
        key=lambda h: h.n,
    )
    return CourseTemplate(
        id=str(course_row["id"]),
        name=course_row["name"],
        holes_count=course_row["holes_count"],
        holes=holes,
        created_at=course_row["created_at"],
    )


def summary_from_row(row) -> RoundSummary:
    """round_summaries row -> RoundSummary (NUMERIC columns come back as Decimal)."""
    data = {}
    for field in RoundSummary.model_fields:
        value = _get(row, field)
        if value is None:
            continue
        data[field] = float(value) if field in _FLOAT_SUMMARY_FIELDS else int(value)
    return RoundSummary(**data)


# ================================================================
# Model -> Row (writes)
# ================================================================

def round_to_row(round_state: RoundState, user_id: Optional[UUID] = None,
                 course_id: Optional[UUID] = None) -> dict:
    """RoundState -> dict for rounds INSERT/UPDATE."""
    return {
        "created_by": user_id,
        "course_id": course_id,
        "holes_count": round_state.holes_count,
        "level": round_state.level.value,
        "scoring_distance": round_state.scoring_distance,
        "weights": round_state.weights.model_dump(),
    }


def hole_to_row(hole: Hole, round_id: UUID) -> tuple:
    """Hole -> tuple for round_holes upsert (for executemany)."""
    return (
        round_id, hole.n, hole.par, hole.stroke_index,
        hole.strokes, hole.putts, hole.reached_sd,
        hole.oopsies.model_dump(),
        hole.missed_putts_6ft,
        hole.tee_shot_result.value if hole.tee_shot_result else None,
    )


def template_hole_to_row(hole: TemplateHole, course_id: UUID) -> tuple:
    """TemplateHole -> tuple for course_holes INSERT."""
    return (course_id, hole.n, hole.par, hole.stroke_index)


def summary_to_row(
    summary: RoundSummary,
    round_state: RoundState,
    *,
    user_id: UUID,
    round_id: UUID,
    course_id: Optional[UUID] = None,
) -> dict:
    """RoundSummary -> dict for round_summaries upsert."""
    return {
        "user_id": user_id,
        "round_id": round_id,
        "course_id": course_id,
        "holes": round_state.holes_count,
        "level": round_state.level.value,
        "scoring_distance": round_state.scoring_distance,
        **summary.model_dump(),
        "lost_ball_penalty": lost_ball_penalty_total(round_state),
    }
