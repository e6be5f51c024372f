"""
KPI pipeline: catalog, threshold evaluation, trends, alerts and the bounded store.
"""

from docs_observatory.kpi.alerts import AlertGenerator
from docs_observatory.kpi.catalog import AlertingConfig, KPICatalog, ReportingConfig, load_kpi_catalog
from docs_observatory.kpi.evaluator import evaluate, evaluate_measurement, summarize
from docs_observatory.kpi.store import KPIDataRepository, MeasurementRecord, MeasurementStore
from docs_observatory.kpi.trends import (
    MovingAveragePoint,
    SessionImprovement,
    SessionTrend,
    calculate_kpi_trend,
    calculate_kpi_trends,
    calculate_session_trend,
    moving_averages,
    session_trend_direction,
)

__all__ = [
    "AlertGenerator",
    "AlertingConfig",
    "KPICatalog",
    "KPIDataRepository",
    "MeasurementRecord",
    "MeasurementStore",
    "MovingAveragePoint",
    "ReportingConfig",
    "SessionImprovement",
    "SessionTrend",
    "calculate_kpi_trend",
    "calculate_kpi_trends",
    "calculate_session_trend",
    "evaluate",
    "evaluate_measurement",
    "load_kpi_catalog",
    "moving_averages",
    "session_trend_direction",
    "summarize",
]
