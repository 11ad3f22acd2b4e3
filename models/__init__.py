from .base import BaseGolfModel
from .course_template import CourseTemplate, TemplateHole
from .hole import LOST_BALL_PENALTY, Hole, OopsieKind, Oopsies, TeeShotResult
from .level import Level
from .round import DEFAULT_SCORING_DISTANCE, RoundState, Weights
from .summary import RoundSummary

__all__ = [
    "BaseGolfModel",
    "CourseTemplate",
    "DEFAULT_SCORING_DISTANCE",
    "Hole",
    "LOST_BALL_PENALTY",
    "Level",
    "OopsieKind",
    "Oopsies",
    "RoundState",
    "RoundSummary",
    "TeeShotResult",
    "TemplateHole",
    "Weights",
]
