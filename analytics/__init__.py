from .losses import (
    hole_strokes_lost,
    lost_ball_penalty_total,
    par3_equivalent,
    putting_lost,
)
from .rounding import round1, round_half_up
from .stats import compute_round_summary
from .targets import allowed_shots_to_sd, goal_score, target_after_sd
from .templates import (
    apply_template_to_new_round,
    default_round,
    make_default_holes,
    reset_round_keep_course,
    sanitize_name,
    template_from_round,
)
from .trends import insights, metric_series, metric_trend, round_points
from .visualizations import plot_insights_grid, plot_metric_trend

__all__ = [
    "allowed_shots_to_sd",
    "target_after_sd",
    "goal_score",
    "putting_lost",
    "hole_strokes_lost",
    "par3_equivalent",
    "lost_ball_penalty_total",
    "round1",
    "round_half_up",
    "compute_round_summary",
    "make_default_holes",
    "default_round",
    "template_from_round",
    "apply_template_to_new_round",
    "reset_round_keep_course",
    "sanitize_name",
    "round_points",
    "metric_series",
    "metric_trend",
    "insights",
    "plot_metric_trend",
    "plot_insights_grid",
]
