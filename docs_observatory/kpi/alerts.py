"""
Alert generation for KPI evaluations.

Turns an Evaluation into Alert records for every metric whose status is in
the configured alerting set (``warning`` and ``critical`` by default).

Usage::

    from docs_observatory.kpi.alerts import AlertGenerator

    generator = AlertGenerator(catalog.alerting)
    alerts = generator.generate(evaluation, catalog, now)
"""

from datetime import datetime

from docs_observatory.core.logging_config import get_logger
from docs_observatory.domain.metrics import Alert, Evaluation
from docs_observatory.kpi.catalog import AlertingConfig, KPICatalog

logger = get_logger(__name__)


class AlertGenerator:
    """Filters evaluations through the alerting configuration."""

    def __init__(self, config: AlertingConfig):
        self.config = config

    def generate(self, evaluation: Evaluation, catalog: KPICatalog, now: datetime) -> list[Alert]:
        """
        Build alerts for one evaluation.

        Args:
            evaluation: Per-metric entries from the Threshold Evaluator
            catalog: Source of metric names and categories
            now: Timestamp stamped on every alert

        Returns:
            Alerts in catalog order; empty when alerting is disabled
        """
        if not self.config.enabled:
            return []

        alerts = []
        for metric_id, entry in evaluation.items():
            if entry.status not in self.config.statuses or metric_id not in catalog:
                continue
            metric = catalog[metric_id]
            alerts.append(
                Alert(
                    timestamp=now,
                    metric_id=metric_id,
                    name=metric.name,
                    status=entry.status,
                    value=entry.value,
                    target=entry.target,
                    message=entry.message,
                    category=metric.category,
                )
            )

        if alerts and "console" in self.config.channels:
            for alert in alerts:
                logger.warning(
                    f"KPI alert: {alert.name} - {alert.message}",
                    extra={"metric_id": alert.metric_id, "status": alert.status.value},
                )
        return alerts
