"""API-specific request/response models."""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from models import Level, RoundState, RoundSummary, Weights


class HoleTargetsResponse(BaseModel):
    """Per-hole targets and losses for the scorecard view."""
    n: int
    par: int
    stroke_index: int
    goal: int
    allowed_shots_to_sd: Optional[int] = None
    target_after_sd: int
    strokes_lost: float
    par3_equivalent: Optional[bool] = None


class RoundSettings(BaseModel):
    """Per-round settings a new round inherits."""
    level: Level = Level.BOGEY_GOLF
    scoring_distance: int = Field(125, ge=40, le=200)
    weights: Weights = Field(default_factory=Weights)


class SaveRoundResponse(BaseModel):
    round_id: str
    summary: RoundSummary


class NewRoundResponse(BaseModel):
    round_id: str
    course_id: Optional[str] = None
    round: RoundState


class RoundHistoryItem(BaseModel):
    """Finished round for list views."""
    round_id: str
    course_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    level: Level
    holes_count: int
    summary: RoundSummary


class MetricTrendResponse(BaseModel):
    key: str
    title: str
    subtitle: str
    values: List[float]
    latest: Optional[float] = None
    average: Optional[float] = None
    delta: Optional[float] = None
    direction: str
    latest_display: str
    average_display: str
    delta_display: str


class InsightsResponse(BaseModel):
    rounds_used: int
    rolling: int
    metrics: List[MetricTrendResponse]
