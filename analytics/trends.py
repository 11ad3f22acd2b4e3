"""
Insights over a player's finished rounds.

Each round is summarized, one value per metric is collected in play order,
and every series can be smoothed with a trailing rolling average and
classified as improving, worsening or flat from its least-squares slope.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

from models.level import Level
from models.round import RoundState
from models.summary import RoundSummary

from .losses import oopsie_counts
from .rounding import round_half_up
from .stats import compute_round_summary

FLAT_SLOPE_EPSILON = 0.02
ROLLING_WINDOWS = (0, 3, 5, 10)
MISSING = "—"


class Metric(NamedTuple):
    key: str
    title: str
    subtitle: str
    better: str  # "down" or "up"


METRICS: List[Metric] = [
    Metric("strokes_lost_total", "Strokes lost", "Lower is better", "down"),
    Metric("to_par", "To Par", "Lower is better", "down"),
    Metric("putts_lost_total", "Putts lost", "Lower is better", "down"),
    Metric("sd_pct", "SD%", "Higher is better", "up"),
    Metric("npir_pct", "NPIR%", "Lower is better (Not-Puttable-In-Regulation)", "down"),
    Metric("p3_pct", "Par-3%", "Higher is better", "up"),
    Metric("lost_balls", "Lost balls", "Lower is better", "down"),
    Metric("duffed_shots", "Duffed shots", "Lower is better", "down"),
]
METRICS_BY_KEY = {m.key: m for m in METRICS}
PERCENT_METRICS = {"sd_pct", "npir_pct", "p3_pct"}


class RoundPoint(NamedTuple):
    round_id: Optional[str]
    level: Level
    holes_count: int
    summary: RoundSummary
    lost_balls: int
    duffed_shots: int

    def value(self, key: str) -> Optional[float]:
        if key == "lost_balls":
            return self.lost_balls
        if key == "duffed_shots":
            return self.duffed_shots
        return getattr(self.summary, key)


def round_points(
    rounds: Iterable[tuple],
    level: Optional[Level] = None,
) -> List[RoundPoint]:
    """
    Summarize ``(round_id, RoundState)`` pairs, oldest first.

    Lost balls and duffed shots are raw counts over the active holes.
    When ``level`` is given, rounds at other levels are dropped.
    """
    points: List[RoundPoint] = []
    for round_id, round_state in rounds:
        if level is not None and round_state.level != level:
            continue
        counts = oopsie_counts(round_state.active_holes)
        points.append(
            RoundPoint(
                round_id=round_id,
                level=round_state.level,
                holes_count=round_state.holes_count,
                summary=compute_round_summary(round_state),
                lost_balls=counts["lost_ball"],
                duffed_shots=counts["duffed"],
            )
        )
    return points


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def metric_series(points: Sequence[RoundPoint]) -> Dict[str, List[float]]:
    """One list per metric; rounds where the metric is undefined are skipped."""
    series: Dict[str, List[float]] = {m.key: [] for m in METRICS}
    for point in points:
        for metric in METRICS:
            value = point.value(metric.key)
            if _is_finite(value):
                series[metric.key].append(value)
    return series


def rolling_average(values: Sequence[float], window: int) -> List[float]:
    """Trailing mean; the first few points average over what is available."""
    if not values or window <= 1:
        return list(values)
    out: List[float] = []
    for i in range(len(values)):
        chunk = values[max(0, i - window + 1):i + 1]
        out.append(sum(chunk) / len(chunk))
    return out


def linear_slope(values: Sequence[float]) -> float:
    """Least-squares slope against x = 0..n-1."""
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for x, y in enumerate(values):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_xx += x * x
    denom = n * sum_xx - sum_x * sum_x
    if denom == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denom


def slope_direction(better: str, slope: float) -> str:
    """"up" = improving, "down" = worsening, "flat" = no meaningful change."""
    if abs(slope) < FLAT_SLOPE_EPSILON:
        return "flat"
    if better == "down":
        return "up" if slope < 0 else "down"
    return "up" if slope > 0 else "down"


def metric_trend(key: str, values: Sequence[float], rolling: int = 0) -> Dict[str, Any]:
    """Latest / average / delta and direction for one metric series."""
    metric = METRICS_BY_KEY[key]
    y = rolling_average(values, rolling) if rolling else list(values)
    return {
        "key": key,
        "title": metric.title,
        "subtitle": metric.subtitle,
        "values": y,
        "latest": y[-1] if y else None,
        "average": sum(y) / len(y) if y else None,
        "delta": y[-1] - y[0] if len(y) >= 2 else None,
        "direction": slope_direction(metric.better, linear_slope(y)),
    }


def insights(
    rounds: Iterable[tuple],
    *,
    level: Optional[Level] = None,
    rolling: int = 0,
) -> Dict[str, Any]:
    """Trend block for every metric plus the number of rounds used."""
    if rolling not in ROLLING_WINDOWS:
        raise ValueError(f"rolling must be one of {ROLLING_WINDOWS}, got {rolling}")
    points = round_points(rounds, level)
    series = metric_series(points)
    return {
        "rounds_used": len(points),
        "rolling": rolling,
        "metrics": [metric_trend(m.key, series[m.key], rolling) for m in METRICS],
    }


def format_metric(key: str, value: Optional[float]) -> str:
    if value is None or not math.isfinite(value):
        return MISSING
    n = round_half_up(value)
    if key in PERCENT_METRICS:
        return f"{n}%"
    if key == "to_par":
        return f"+{n}" if n > 0 else f"{n}"
    return f"{n}"


def format_delta(key: str, value: Optional[float]) -> str:
    if value is None or not math.isfinite(value):
        return MISSING
    n = round_half_up(value)
    sign = "+" if n > 0 else ""
    suffix = "%" if key in PERCENT_METRICS else ""
    return f"{sign}{n}{suffix}"
