#!/usr/bin/env python3
"""
Documentation KPI Dashboard

Collects one KPI measurement from the documentation-metrics report and the
onboarding tracker, evaluates it against the catalog, raises alerts, appends
the cycle to the bounded history and renders Markdown and HTML dashboards.

Usage:
    docs-kpi collect      # print the current measurement as JSON
    docs-kpi dashboard    # full cycle: evaluate, store, render (default)

Exit codes:
    0 = success, 1 = runtime error, 2 = invalid configuration
"""

import argparse
import json
import sys
from collections.abc import Callable
from datetime import datetime
from typing import Any

from docs_observatory.collectors.documentation import DocumentationMetricsSource, DocumentationSnapshot
from docs_observatory.core.logging_config import get_logger, setup_logging
from docs_observatory.domain.metrics import Measurement
from docs_observatory.exceptions import ConfigurationError, ObservatoryError
from docs_observatory.kpi.alerts import AlertGenerator
from docs_observatory.kpi.catalog import KPICatalog, load_kpi_catalog
from docs_observatory.kpi.evaluator import evaluate_measurement, summarize
from docs_observatory.kpi.store import KPIDataRepository, MeasurementRecord, MeasurementStore
from docs_observatory.kpi.trends import calculate_kpi_trends, trends_to_dict
from docs_observatory.onboarding.analytics import generate_analytics
from docs_observatory.onboarding.config import load_onboarding_config
from docs_observatory.onboarding.tracker import OnboardingRepository
from docs_observatory.recommendations import documentation_recommendations
from docs_observatory.reports.markdown import kpi_dashboard_markdown
from docs_observatory.reports.renderer import render_template
from docs_observatory.secure_config import PathsConfig, get_config
from docs_observatory.utils.datetime_utils import to_iso, utc_now
from docs_observatory.utils.formatting import to_number

logger = get_logger(__name__)


class KPIDashboard:
    """
    One KPI collection cycle over explicit collaborators.

    Args:
        paths: Store and report locations
        catalog: Metric catalog (loaded from ``kpi-config.json`` when omitted)
        documentation_source: Documentation-metrics report reader
        clock: Returns the current time (injectable for tests)
    """

    def __init__(
        self,
        paths: PathsConfig,
        catalog: KPICatalog | None = None,
        documentation_source: DocumentationMetricsSource | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.paths = paths
        self.catalog = catalog or load_kpi_catalog(paths.kpi_config_file)
        self.documentation_source = documentation_source or DocumentationMetricsSource(
            paths.documentation_metrics_file
        )
        self.repository = KPIDataRepository(paths.kpi_data_file)
        self.clock = clock

    def _onboarding_analytics(self) -> dict[str, Any]:
        config = load_onboarding_config(self.paths.onboarding_config_file)
        state = OnboardingRepository(self.paths.onboarding_data_file).load()
        return generate_analytics(state, config)

    def collect_measurements(self, snapshot: DocumentationSnapshot | None = None) -> Measurement:
        """
        Build the current measurement. Values the collaborators cannot
        provide are left as None and evaluate to ``no_data``.
        """
        snapshot = snapshot or self.documentation_source.load()
        analytics = self._onboarding_analytics()
        summary = analytics.get("summary") or {}

        feedback = analytics.get("feedback") or {}
        satisfaction = feedback.get("overall_satisfaction") or {}

        values = {
            "documentation_coverage": snapshot.coverage_percentage,
            "documentation_quality_score": snapshot.quality_score,
            "onboarding_completion_rate": to_number(summary.get("completionRate")),
            "average_onboarding_time": to_number(str(summary.get("averageOnboardingTime", "")).split(" ")[0]),
            "stale_documentation_percentage": (
                snapshot.stale_percentage if snapshot.total_doc_files is not None else None
            ),
            "broken_links_count": snapshot.broken_links,
            "documentation_feedback_score": to_number(satisfaction.get("averageScore")),
            "weekly_documentation_updates": float(len(snapshot.recent_updates)) if not snapshot.is_empty else None,
        }
        # Only report metrics the catalog tracks
        measurement = Measurement(
            timestamp=self.clock(),
            values={metric_id: value for metric_id, value in values.items() if metric_id in self.catalog},
        )
        measurement.validate_against(self.catalog.ids)
        return measurement

    def calculate_trends(self, store: MeasurementStore) -> dict[str, Any]:
        return trends_to_dict(calculate_kpi_trends(store.measurements(), self.catalog))

    def generate_dashboard(self) -> dict[str, Any]:
        """
        Run a full cycle and write ``kpi-dashboard.md`` / ``kpi-dashboard.html``.

        Returns:
            {generatedAt, measurements, evaluation, alerts, trends, summary, recommendations}
        """
        snapshot = self.documentation_source.load()
        measurement = self.collect_measurements(snapshot)
        evaluation = evaluate_measurement(self.catalog, measurement)
        alerts = AlertGenerator(self.catalog.alerting).generate(evaluation, self.catalog, measurement.timestamp)

        store = self.repository.append([MeasurementRecord(measurement, evaluation, alerts)])

        dashboard = {
            "generatedAt": to_iso(self.clock()),
            "measurements": measurement.to_dict(),
            "evaluation": {metric_id: entry.to_dict() for metric_id, entry in evaluation.items()},
            "alerts": [alert.to_dict() for alert in alerts],
            "trends": self.calculate_trends(store),
            "summary": summarize(evaluation),
            "recommendations": [rec.to_dict() for rec in documentation_recommendations(snapshot)],
        }

        self._write_reports(dashboard)
        return dashboard

    def _write_reports(self, dashboard: dict[str, Any]) -> None:
        self.paths.metrics_dir.mkdir(parents=True, exist_ok=True)

        markdown = kpi_dashboard_markdown(dashboard, self.catalog)
        self.paths.kpi_dashboard_markdown.write_text(markdown, encoding="utf-8")

        html = render_template("kpi_dashboard.html", self._html_context(dashboard))
        self.paths.kpi_dashboard_html.write_text(html, encoding="utf-8")

        logger.info(
            "KPI dashboard written",
            extra={
                "markdown_path": str(self.paths.kpi_dashboard_markdown),
                "html_path": str(self.paths.kpi_dashboard_html),
            },
        )

    def _html_context(self, dashboard: dict[str, Any]) -> dict[str, Any]:
        trends = dashboard["trends"]
        cards = []
        for metric_id, entry in dashboard["evaluation"].items():
            metric = self.catalog[metric_id]
            trend = trends.get(metric_id) if "message" not in trends else None
            cards.append(
                {
                    "name": metric.name,
                    "status": entry["status"],
                    "value": entry["value"],
                    "target": metric.target,
                    "unit": metric.unit,
                    "message": entry["message"],
                    "trend": trend if trend and "direction" in trend else None,
                }
            )
        return {
            "title": "Documentation KPI Dashboard",
            "generated_at": dashboard["generatedAt"],
            "summary": dashboard["summary"],
            "alerts": dashboard["alerts"],
            "cards": cards,
        }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docs-kpi", description="Documentation KPI dashboard")
    parser.add_argument("command", nargs="?", choices=["collect", "dashboard"], default="dashboard")
    parser.add_argument("--metrics-dir", help="Directory of the KPI stores (default: OBSERVATORY_METRICS_DIR)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the KPI dashboard CLI.

    Returns:
        Exit code (0 = success, 1 = runtime error, 2 = invalid configuration)
    """
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        logging_config = config.get_logging_config()
        setup_logging(level=logging_config.level, log_file=logging_config.log_file, json_output=logging_config.json_output)

        dashboard = KPIDashboard(config.get_paths_config(args.metrics_dir))

        if args.command == "collect":
            print(json.dumps(dashboard.collect_measurements().to_dict(), indent=2, ensure_ascii=False))
            return 0

        data = dashboard.generate_dashboard()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except (ObservatoryError, OSError) as e:
        logger.error("KPI dashboard run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summary = data["summary"]
    print("✅ KPI dashboard generated successfully!")
    print(f"📊 Health Score: {summary['healthScore']}")
    print(f"🚨 Critical Issues: {summary['criticalIssues']}")
    print(f"⚠️  Warnings: {summary['needsAttention']}")
    return 0


if __name__ == "__main__":
    exit(main())
