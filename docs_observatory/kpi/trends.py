"""
Trend Analyzer

Two separate algorithms live here and are intentionally not unified:

- KPI trend (``calculate_kpi_trend``): raw two-point comparison of the first
  and last non-null values in the recent measurement window.
- Session trend (``calculate_session_trend``): moving-average smoothing of
  completed onboarding durations, with a +/-10% band deciding the direction.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from docs_observatory.domain.constants import kpi_pipeline
from docs_observatory.domain.metrics import InsufficientData, KPITrend, Measurement, MetricDefinition
from docs_observatory.domain.onboarding import OnboardingSession
from docs_observatory.kpi.catalog import KPICatalog
from docs_observatory.utils.datetime_utils import to_iso
from docs_observatory.utils.formatting import fixed

# Session trend directions
IMPROVING = "improving"
DECLINING = "declining"
STABLE = "stable"
INSUFFICIENT_DATA = "insufficient_data"


# ---------------------------------------------------------------------------
# KPI trend (raw two-point)
# ---------------------------------------------------------------------------


def calculate_kpi_trend(
    history: Sequence[Measurement],
    metric: MetricDefinition,
    window: int = kpi_pipeline.TREND_WINDOW,
) -> KPITrend | InsufficientData:
    """
    Two-point trend of one metric over the last ``window`` measurements.

    Null values inside the window are ignored. ``change_percent`` is None
    when the first value is 0.

    Returns:
        KPITrend, or InsufficientData with fewer than two non-null values
    """
    values = [m.value(metric.id) for m in history[-window:]]
    values = [v for v in values if v is not None]
    if len(values) < 2:
        return InsufficientData()

    first, last = values[0], values[-1]
    change = last - first
    change_percent = change / first * 100 if first != 0 else None

    if change > 0:
        direction = "up"
    elif change < 0:
        direction = "down"
    else:
        direction = "stable"

    is_improving = change < 0 if metric.lower_is_better else change > 0
    return KPITrend(direction=direction, change=change, change_percent=change_percent, is_improving=is_improving)


def calculate_kpi_trends(
    history: Sequence[Measurement],
    catalog: KPICatalog,
    window: int = kpi_pipeline.TREND_WINDOW,
) -> dict[str, KPITrend | InsufficientData] | InsufficientData:
    """
    Per-metric trends. Each metric is analyzed independently; with fewer than
    two snapshots overall the whole result is the insufficient-data marker.
    """
    if len(history) < 2:
        return InsufficientData()
    return {metric.id: calculate_kpi_trend(history, metric, window) for metric in catalog}


def trends_to_dict(trends: dict[str, KPITrend | InsufficientData] | InsufficientData) -> dict[str, Any]:
    if isinstance(trends, InsufficientData):
        return trends.to_dict()
    return {metric_id: trend.to_dict() for metric_id, trend in trends.items()}


# ---------------------------------------------------------------------------
# Session trend (moving average)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MovingAveragePoint:
    """Mean duration of the window ending at ``date``."""

    date: datetime
    average_time: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": to_iso(self.date), "averageTime": fixed(self.average_time)}


@dataclass(frozen=True)
class SessionImprovement:
    """Raw first-vs-last change of onboarding duration (positive means faster)."""

    percentage: float | None
    direction: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "percentage": fixed(self.percentage) if self.percentage is not None else None,
            "direction": self.direction,
        }


@dataclass(frozen=True)
class SessionTrend:
    moving_averages: list[MovingAveragePoint]
    trend: str
    improvement: SessionImprovement | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "movingAverages": [point.to_dict() for point in self.moving_averages],
            "trend": self.trend,
            "improvement": self.improvement.to_dict() if self.improvement else None,
        }


def moving_averages(
    points: Sequence[tuple[datetime, float]],
    window: int = kpi_pipeline.MOVING_AVERAGE_WINDOW,
) -> list[MovingAveragePoint]:
    """
    Sliding-window means over ``(timestamp, value)`` points in time order.

    The window shrinks to the number of points when fewer are available, so
    n points yield ``n - min(window, n) + 1`` averages.
    """
    if not points:
        return []
    size = min(window, len(points))
    averages = []
    for end in range(size - 1, len(points)):
        chunk = points[end - size + 1 : end + 1]
        averages.append(
            MovingAveragePoint(date=points[end][0], average_time=sum(value for _, value in chunk) / len(chunk))
        )
    return averages


def session_trend_direction(
    averages: Sequence[MovingAveragePoint],
    improving_factor: float = kpi_pipeline.IMPROVING_FACTOR,
    declining_factor: float = kpi_pipeline.DECLINING_FACTOR,
) -> str:
    """Compare the first and last smoothed points; shorter durations are improvements."""
    if len(averages) < 2:
        return INSUFFICIENT_DATA

    first = averages[0].average_time
    last = averages[-1].average_time
    if last < first * improving_factor:
        return IMPROVING
    if last > first * declining_factor:
        return DECLINING
    return STABLE


def session_improvement(durations: Sequence[float]) -> SessionImprovement | None:
    if len(durations) < 2:
        return None
    first, last = durations[0], durations[-1]
    percentage = (first - last) / first * 100 if first != 0 else None
    return SessionImprovement(percentage=percentage, direction="improvement" if last < first else "regression")


def calculate_session_trend(sessions: Iterable[OnboardingSession]) -> SessionTrend | InsufficientData:
    """
    Smoothed trend of completed onboarding durations, ordered by end time.

    Returns:
        SessionTrend, or InsufficientData with fewer than two completed sessions
    """
    completed = sorted(
        (s for s in sessions if s.is_completed and s.end_time is not None),
        key=lambda s: s.end_time,
    )
    if len(completed) < 2:
        return InsufficientData()

    points = [(s.end_time, s.total_time) for s in completed]
    averages = moving_averages(points)
    return SessionTrend(
        moving_averages=averages,
        trend=session_trend_direction(averages),
        improvement=session_improvement([s.total_time for s in completed]),
    )
