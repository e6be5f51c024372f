"""
Metric catalog loading

Parses ``kpi-config.json`` into frozen MetricDefinition objects plus the
alerting and reporting settings. A missing file is initialized with the
default catalog; a corrupt one is backed up and re-initialized.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docs_observatory.core.logging_config import get_logger
from docs_observatory.domain.constants import DEFAULT_ALERTING_STATUSES, default_kpi_config
from docs_observatory.domain.metrics import EvaluationStatus, MetricDefinition
from docs_observatory.exceptions import ConfigurationError
from docs_observatory.utils_atomic_json import load_json_with_recovery

logger = get_logger(__name__)


@dataclass(frozen=True)
class AlertingConfig:
    """Which evaluation statuses raise alerts, and where alerts are sent."""

    enabled: bool = True
    channels: tuple[str, ...] = ("console", "file")
    statuses: frozenset[EvaluationStatus] = frozenset(EvaluationStatus(s) for s in DEFAULT_ALERTING_STATUSES)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlertingConfig":
        try:
            statuses = frozenset(EvaluationStatus(s) for s in data.get("thresholds", DEFAULT_ALERTING_STATUSES))
        except ValueError as e:
            raise ConfigurationError(f"Invalid alerting threshold status: {e}") from e
        return cls(
            enabled=bool(data.get("enabled", True)),
            channels=tuple(data.get("channels", ("console", "file"))),
            statuses=statuses,
        )

    def to_dict(self) -> dict[str, Any]:
        ordered = [s.value for s in EvaluationStatus if s in self.statuses]
        return {"enabled": self.enabled, "channels": list(self.channels), "thresholds": ordered}


@dataclass(frozen=True)
class ReportingConfig:
    frequency: str = "weekly"
    include_graphs: bool = True
    include_trends: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReportingConfig":
        return cls(
            frequency=str(data.get("frequency", "weekly")),
            include_graphs=bool(data.get("includeGraphs", True)),
            include_trends=bool(data.get("includeTrends", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"frequency": self.frequency, "includeGraphs": self.include_graphs, "includeTrends": self.include_trends}


@dataclass(frozen=True)
class KPICatalog:
    """
    The set of tracked KPIs, in configuration order.

    Example:
        catalog = KPICatalog.from_dict(default_kpi_config())
        coverage = catalog["documentation_coverage"]
        print(coverage.target, coverage.unit)
    """

    metrics: Mapping[str, MetricDefinition]
    alerting: AlertingConfig = field(default_factory=AlertingConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)

    def __getitem__(self, metric_id: str) -> MetricDefinition:
        return self.metrics[metric_id]

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self.metrics

    def __iter__(self) -> Iterator[MetricDefinition]:
        return iter(self.metrics.values())

    def __len__(self) -> int:
        return len(self.metrics)

    @property
    def ids(self) -> list[str]:
        return list(self.metrics)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KPICatalog":
        """
        Raises:
            ConfigurationError: If the catalog is empty or an entry is invalid
        """
        kpis = data.get("kpis")
        if not isinstance(kpis, Mapping) or not kpis:
            raise ConfigurationError("KPI configuration must define at least one KPI under 'kpis'")

        metrics = {}
        for metric_id, entry in kpis.items():
            if not isinstance(entry, Mapping):
                raise ConfigurationError(f"KPI '{metric_id}' must be an object")
            metrics[metric_id] = MetricDefinition.from_dict(metric_id, entry)

        return cls(
            metrics=metrics,
            alerting=AlertingConfig.from_dict(data.get("alerting") or {}),
            reporting=ReportingConfig.from_dict(data.get("reporting") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kpis": {metric_id: metric.to_dict() for metric_id, metric in self.metrics.items()},
            "alerting": self.alerting.to_dict(),
            "reporting": self.reporting.to_dict(),
        }


def load_kpi_catalog(config_file: str | Path) -> KPICatalog:
    """
    Load the KPI catalog, writing the default catalog when the file is missing.

    Raises:
        ConfigurationError: If the file holds an invalid catalog
    """
    data = load_json_with_recovery(config_file, default_kpi_config)
    catalog = KPICatalog.from_dict(data)
    logger.debug("Loaded KPI catalog", extra={"path": str(config_file), "kpi_count": len(catalog)})
    return catalog
