"""
Measurement Store

Bounded history of KPI snapshots and alerts. Each collection cycle appends
one MeasurementRecord; the oldest entries are evicted once the caps are
reached. KPIDataRepository persists the store as ``kpi-data.json`` with a
lock-protected read-modify-write cycle and atomic replacement.
"""

from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from docs_observatory.core.logging_config import get_logger
from docs_observatory.domain.constants import kpi_pipeline
from docs_observatory.domain.metrics import Alert, Evaluation, EvaluationEntry, Measurement
from docs_observatory.utils.datetime_utils import to_iso
from docs_observatory.utils.error_handling import log_and_continue
from docs_observatory.utils_atomic_json import atomic_json_save, file_lock, load_json_with_recovery

logger = get_logger(__name__)


@dataclass(frozen=True)
class MeasurementRecord:
    """One collection cycle: the measurement, its evaluation and the alerts it raised."""

    measurement: Measurement
    evaluation: Evaluation
    alerts: list[Alert] = field(default_factory=list)

    @property
    def timestamp(self) -> datetime:
        return self.measurement.timestamp

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MeasurementRecord":
        values = dict(data.get("measurements") or {})
        values.setdefault("timestamp", data.get("timestamp"))
        return cls(
            measurement=Measurement.from_dict(values),
            evaluation={
                metric_id: EvaluationEntry.from_dict(entry) for metric_id, entry in (data.get("evaluation") or {}).items()
            },
            alerts=[Alert.from_dict(alert) for alert in data.get("alerts") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": to_iso(self.timestamp),
            "measurements": self.measurement.to_dict(),
            "evaluation": {metric_id: entry.to_dict() for metric_id, entry in self.evaluation.items()},
            "alerts": [alert.to_dict() for alert in self.alerts],
        }


class MeasurementStore:
    """
    In-memory bounded history.

    Both sequences are FIFO-capped: appending the 101st record evicts the
    oldest one, and the alert log keeps only the most recent alerts.
    """

    def __init__(
        self,
        max_measurements: int = kpi_pipeline.MAX_MEASUREMENTS,
        max_alerts: int = kpi_pipeline.MAX_ALERTS,
        last_updated: datetime | None = None,
    ):
        if max_measurements < 1 or max_alerts < 1:
            raise ValueError("store caps must be positive")
        self.records: deque[MeasurementRecord] = deque(maxlen=max_measurements)
        self.alerts: deque[Alert] = deque(maxlen=max_alerts)
        self.last_updated = last_updated

    def __len__(self) -> int:
        return len(self.records)

    def append(self, record: MeasurementRecord) -> None:
        self.records.append(record)
        self.alerts.extend(record.alerts)
        self.last_updated = record.timestamp

    def measurements(self) -> list[Measurement]:
        """Measurements in insertion order (oldest first)."""
        return [record.measurement for record in self.records]

    def latest(self) -> MeasurementRecord | None:
        return self.records[-1] if self.records else None

    def recent_alerts(self, limit: int | None = None) -> list[Alert]:
        alerts = list(self.alerts)
        return alerts[-limit:] if limit else alerts

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        max_measurements: int = kpi_pipeline.MAX_MEASUREMENTS,
        max_alerts: int = kpi_pipeline.MAX_ALERTS,
    ) -> "MeasurementStore":
        """
        Rebuild a store from ``kpi-data.json`` content.

        Entries that cannot be parsed are logged and skipped.
        """
        store = cls(max_measurements=max_measurements, max_alerts=max_alerts)

        for index, entry in enumerate(data.get("measurements") or []):
            try:
                store.records.append(MeasurementRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                log_and_continue(logger, e, {"index": index}, "Loading stored measurement")

        for index, entry in enumerate(data.get("alerts") or []):
            try:
                store.alerts.append(Alert.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                log_and_continue(logger, e, {"index": index}, "Loading stored alert")

        if store.records:
            store.last_updated = store.records[-1].timestamp
        return store

    def to_dict(self) -> dict[str, Any]:
        return {
            "measurements": [record.to_dict() for record in self.records],
            "alerts": [alert.to_dict() for alert in self.alerts],
            "lastUpdated": to_iso(self.last_updated) if self.last_updated else None,
        }


def _empty_store_data() -> dict[str, Any]:
    return {"measurements": [], "alerts": [], "lastUpdated": None}


def _is_store_shape(data: dict[str, Any]) -> bool:
    return isinstance(data.get("measurements", []), list) and isinstance(data.get("alerts", []), list)


class KPIDataRepository:
    """Persists the MeasurementStore as ``kpi-data.json``."""

    def __init__(
        self,
        data_file: str | Path,
        max_measurements: int = kpi_pipeline.MAX_MEASUREMENTS,
        max_alerts: int = kpi_pipeline.MAX_ALERTS,
    ):
        self.data_file = Path(data_file)
        self.max_measurements = max_measurements
        self.max_alerts = max_alerts

    def load(self) -> MeasurementStore:
        data = load_json_with_recovery(self.data_file, _empty_store_data, _is_store_shape)
        return MeasurementStore.from_dict(data, self.max_measurements, self.max_alerts)

    def save(self, store: MeasurementStore) -> None:
        atomic_json_save(store.to_dict(), self.data_file)

    def append(self, records: Iterable[MeasurementRecord]) -> MeasurementStore:
        """
        Append records in one locked read-modify-write cycle.

        Returns:
            The updated store
        """
        with file_lock(self.data_file):
            store = self.load()
            for record in records:
                store.append(record)
            self.save(store)

        logger.info(
            "KPI data updated",
            extra={"path": str(self.data_file), "measurement_count": len(store), "alert_count": len(store.alerts)},
        )
        return store
