"""
KPI domain models

Foundation types of the KPI pipeline:
    - MetricDefinition: catalog entry with target and four-tier thresholds
    - Measurement: one collection cycle's values
    - EvaluationEntry: a metric's classified status (``no_data`` is its own variant)
    - Alert: an evaluation whose status is in the alerting set
    - KPITrend / InsufficientData: two-point KPI trend results
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from docs_observatory.exceptions import ConfigurationError, UnknownMetricError
from docs_observatory.utils.datetime_utils import parse_iso, to_iso
from docs_observatory.utils.formatting import to_number


class EvaluationStatus(str, Enum):
    """Four-tier status plus the explicit ``no_data`` variant."""

    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    NO_DATA = "no_data"

    @property
    def glyph(self) -> str:
        return _STATUS_GLYPHS[self]

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_GLYPHS = {
    EvaluationStatus.EXCELLENT: "🟢",
    EvaluationStatus.GOOD: "🟡",
    EvaluationStatus.WARNING: "🟠",
    EvaluationStatus.CRITICAL: "🔴",
    EvaluationStatus.NO_DATA: "⚪",
}

_STATUS_LABELS = {
    EvaluationStatus.EXCELLENT: "Excellent performance",
    EvaluationStatus.GOOD: "Good performance",
    EvaluationStatus.WARNING: "Needs attention",
    EvaluationStatus.CRITICAL: "Critical - immediate action required",
    EvaluationStatus.NO_DATA: "No data available",
}


@dataclass(frozen=True)
class MetricThresholds:
    """
    Four-tier thresholds, expressed in the same polarity as the target.

    For higher-is-better metrics ``excellent >= good >= warning >= critical``;
    lower-is-better metrics use the mirrored order.
    """

    excellent: float
    good: float
    warning: float
    critical: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], metric_id: str = "?") -> "MetricThresholds":
        values = {}
        for tier in ("excellent", "good", "warning", "critical"):
            number = to_number(data.get(tier))
            if number is None:
                raise ConfigurationError(f"KPI '{metric_id}' is missing a numeric '{tier}' threshold")
            values[tier] = number
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {"excellent": self.excellent, "good": self.good, "warning": self.warning, "critical": self.critical}


@dataclass(frozen=True)
class MetricDefinition:
    """
    A tracked KPI from the metric catalog.

    Attributes:
        id: Unique catalog key (e.g. "documentation_coverage")
        name: Display name
        target: Target value, same polarity as the thresholds
        thresholds: Four-tier thresholds
        unit: Display unit appended to values ("%", "minutes", "count", "/5")
        category: Grouping used for alerts ("coverage", "quality", ...)
        lower_is_better: Polarity; False means higher values are better
        description: Optional human description

    Example:
        coverage = MetricDefinition(
            id="documentation_coverage",
            name="Documentation Coverage",
            target=85,
            thresholds=MetricThresholds(excellent=90, good=80, warning=70, critical=60),
            unit="%",
            category="coverage",
        )
    """

    id: str
    name: str
    target: float
    thresholds: MetricThresholds
    unit: str = ""
    category: str = "general"
    lower_is_better: bool = False
    description: str = ""

    @classmethod
    def from_dict(cls, metric_id: str, data: Mapping[str, Any]) -> "MetricDefinition":
        """
        Build a definition from a ``kpi-config.json`` entry.

        Raises:
            ConfigurationError: If target or thresholds are missing
        """
        target = to_number(data.get("target"))
        if target is None:
            raise ConfigurationError(f"KPI '{metric_id}' is missing a numeric target")

        thresholds = data.get("thresholds")
        if not isinstance(thresholds, Mapping):
            raise ConfigurationError(f"KPI '{metric_id}' is missing thresholds")

        return cls(
            id=metric_id,
            name=str(data.get("name", metric_id)),
            target=target,
            thresholds=MetricThresholds.from_dict(thresholds, metric_id),
            unit=str(data.get("unit", "")),
            category=str(data.get("category", "general")),
            lower_is_better=bool(data.get("lowerIsBetter", False)),
            description=str(data.get("description", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "target": self.target,
            "thresholds": self.thresholds.to_dict(),
            "unit": self.unit,
            "category": self.category,
        }
        if self.lower_is_better:
            data["lowerIsBetter"] = True
        return data


@dataclass(frozen=True)
class Measurement:
    """
    One collection cycle's KPI values.

    ``values`` maps metric id to a number, or to None when the collaborator
    had no data. Metric ids missing from the mapping are also "no data".
    """

    timestamp: datetime
    values: Mapping[str, float | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime):
            raise TypeError(f"timestamp must be datetime, got {type(self.timestamp)}")
        # Freeze the mapping so a stored measurement can never change
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def value(self, metric_id: str) -> float | None:
        return self.values.get(metric_id)

    def validate_against(self, metric_ids: Iterable[str]) -> None:
        """
        Check that every measured id exists in the catalog.

        Raises:
            UnknownMetricError: For ids outside the catalog
        """
        unknown = sorted(set(self.values) - set(metric_ids))
        if unknown:
            raise UnknownMetricError(f"Measurement references unknown metrics: {', '.join(unknown)}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Measurement":
        timestamp = parse_iso(data.get("timestamp"))
        if timestamp is None:
            raise ValueError("measurement is missing a timestamp")
        values = {key: to_number(value) for key, value in data.items() if key != "timestamp"}
        return cls(timestamp=timestamp, values=values)

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": to_iso(self.timestamp), **dict(self.values)}


@dataclass(frozen=True)
class EvaluationEntry:
    """
    A metric's classified status.

    Use ``EvaluationEntry.no_data()`` for metrics without a value; every
    other entry carries a value and the catalog target.
    """

    status: EvaluationStatus
    value: float | None
    target: float | None
    message: str

    @classmethod
    def no_data(cls) -> "EvaluationEntry":
        return cls(
            status=EvaluationStatus.NO_DATA,
            value=None,
            target=None,
            message=f"{EvaluationStatus.NO_DATA.glyph} {EvaluationStatus.NO_DATA.label}",
        )

    @property
    def has_data(self) -> bool:
        return self.status is not EvaluationStatus.NO_DATA

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EvaluationEntry":
        status = EvaluationStatus(data.get("status", EvaluationStatus.NO_DATA.value))
        if status is EvaluationStatus.NO_DATA:
            return cls.no_data()
        return cls(
            status=status,
            value=to_number(data.get("value")),
            target=to_number(data.get("target")),
            message=str(data.get("message", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value, "value": self.value, "message": self.message}
        if self.has_data:
            data["target"] = self.target
        return data


Evaluation = dict[str, EvaluationEntry]


@dataclass(frozen=True)
class Alert:
    """An evaluation whose status fell in the configured alerting set."""

    timestamp: datetime
    metric_id: str
    name: str
    status: EvaluationStatus
    value: float | None
    target: float | None
    message: str
    category: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Alert":
        timestamp = parse_iso(data.get("timestamp"))
        if timestamp is None:
            raise ValueError("alert is missing a timestamp")
        return cls(
            timestamp=timestamp,
            metric_id=str(data.get("kpi") or data.get("metricId") or ""),
            name=str(data.get("name", "")),
            status=EvaluationStatus(data.get("status", EvaluationStatus.NO_DATA.value)),
            value=to_number(data.get("value")),
            target=to_number(data.get("target")),
            message=str(data.get("message", "")),
            category=str(data.get("category", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": to_iso(self.timestamp),
            "kpi": self.metric_id,
            "name": self.name,
            "status": self.status.value,
            "value": self.value,
            "target": self.target,
            "message": self.message,
            "category": self.category,
        }


@dataclass(frozen=True)
class KPITrend:
    """
    Raw two-point trend of a KPI across the recent history window.

    Attributes:
        direction: "up", "down" or "stable" (sign of change)
        change: last - first (unsmoothed)
        change_percent: change / first * 100, or None when first is 0
        is_improving: Polarity-aware verdict
    """

    direction: str
    change: float
    change_percent: float | None
    is_improving: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction,
            "change": round(self.change, 2),
            "changePercent": round(self.change_percent, 2) if self.change_percent is not None else None,
            "isImproving": self.is_improving,
        }


@dataclass(frozen=True)
class InsufficientData:
    """Marker for a trend that needs at least two observations."""

    reason: str = "Insufficient data for trend analysis"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.reason}
