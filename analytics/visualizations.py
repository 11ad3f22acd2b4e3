from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from .trends import METRICS, METRICS_BY_KEY, linear_slope, rolling_average, slope_direction

DIRECTION_LABELS = {"up": "Improving", "down": "Worse", "flat": "Flat"}


def _load_plt():
    try:
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualizations. Install it with: pip install matplotlib"
        ) from exc
    return plt


def _default_labels(count: int) -> List[str]:
    return [f"R{index}" for index in range(1, count + 1)]


def sparse_tick_positions(count: int, max_labels: int = 12) -> List[int]:
    """Evenly spaced tick indexes; the last round is always labelled."""
    if count <= max_labels:
        return list(range(count))
    positions = list(range(0, count, count // max_labels))
    if positions[-1] != count - 1:
        positions.append(count - 1)
    return positions


def _label_rounds(ax, labels: Sequence[str]) -> None:
    positions = sparse_tick_positions(len(labels))
    ax.set_xticks(positions)
    ax.set_xticklabels([labels[i] for i in positions], rotation=45, ha="right")


def _draw_metric(ax, key: str, values: Sequence[float], rolling: int) -> str:
    metric = METRICS_BY_KEY[key]
    x = list(range(len(values)))
    ax.plot(x, values, marker="o", linewidth=1.0, alpha=0.5 if rolling else 1.0, label="Raw")

    shown = list(values)
    if rolling:
        shown = rolling_average(values, rolling)
        ax.plot(x, shown, color="black", linewidth=1.8, label=f"{rolling}-round avg")

    direction = slope_direction(metric.better, linear_slope(shown))
    ax.set_title(f"{metric.title} ({DIRECTION_LABELS[direction]})")
    ax.grid(axis="y", alpha=0.2)
    return direction


def plot_metric_trend(
    key: str,
    values: Sequence[float],
    labels: Optional[Sequence[str]] = None,
    rolling: int = 0,
):
    """Line chart of one metric across rounds, optionally with a rolling average."""
    plt = _load_plt()
    metric = METRICS_BY_KEY[key]
    x_labels = list(labels) if labels is not None else _default_labels(len(values))

    fig, ax = plt.subplots(figsize=(10, 5))
    _draw_metric(ax, key, values, rolling)
    ax.set_xlabel("Round")
    ax.set_ylabel(metric.subtitle)
    if values:
        _label_rounds(ax, x_labels)
    if rolling:
        ax.legend(loc="upper left")
    fig.tight_layout()
    return fig, ax


def plot_insights_grid(series: Dict[str, Sequence[float]], rolling: int = 0, columns: int = 2):
    """Small-multiples view: one panel per metric in METRICS order."""
    plt = _load_plt()
    rows = math.ceil(len(METRICS) / columns)
    fig, axes = plt.subplots(rows, columns, figsize=(6 * columns, 2.6 * rows), squeeze=False)

    for index, metric in enumerate(METRICS):
        ax = axes[index // columns][index % columns]
        _draw_metric(ax, metric.key, series.get(metric.key, []), rolling)
        ax.set_xticks([])

    for index in range(len(METRICS), rows * columns):
        axes[index // columns][index % columns].set_visible(False)

    fig.tight_layout()
    return fig, axes
