"""
Threshold Evaluator

Classifies a metric value into a four-tier status relative to its target
and thresholds, honoring the metric's polarity. Evaluation is total: a
missing value yields the ``no_data`` entry, and a failure on one metric
never prevents the others from being evaluated.
"""

from collections import Counter
from typing import Any

from docs_observatory.core.logging_config import get_logger
from docs_observatory.domain.metrics import (
    Evaluation,
    EvaluationEntry,
    EvaluationStatus,
    Measurement,
    MetricDefinition,
)
from docs_observatory.kpi.catalog import KPICatalog
from docs_observatory.utils.error_handling import log_and_continue
from docs_observatory.utils.formatting import fixed, format_value

logger = get_logger(__name__)


def classify(metric: MetricDefinition, value: float) -> EvaluationStatus:
    """Four-tier status of a non-null value."""
    thresholds = metric.thresholds
    if metric.lower_is_better:
        if value <= thresholds.excellent:
            return EvaluationStatus.EXCELLENT
        if value <= thresholds.good:
            return EvaluationStatus.GOOD
        if value <= thresholds.warning:
            return EvaluationStatus.WARNING
        return EvaluationStatus.CRITICAL

    if value >= thresholds.excellent:
        return EvaluationStatus.EXCELLENT
    if value >= thresholds.good:
        return EvaluationStatus.GOOD
    if value >= thresholds.warning:
        return EvaluationStatus.WARNING
    return EvaluationStatus.CRITICAL


def evaluate(metric: MetricDefinition, value: float | None) -> EvaluationEntry:
    """
    Evaluate one metric value.

    Args:
        metric: Catalog definition
        value: Measured value, or None when there is no data

    Returns:
        EvaluationEntry with status and human-readable message

    Example:
        >>> entry = evaluate(coverage, 72)
        >>> entry.message
        '🟠 Needs attention - 72% (target: below 85%)'
    """
    if value is None:
        return EvaluationEntry.no_data()

    status = classify(metric, value)

    if metric.lower_is_better:
        comparison = "below" if value <= metric.target else "above"
    else:
        comparison = "above" if value >= metric.target else "below"

    message = (
        f"{status.glyph} {status.label} - {format_value(value)}{metric.unit} "
        f"(target: {comparison} {format_value(metric.target)}{metric.unit})"
    )
    return EvaluationEntry(status=status, value=value, target=metric.target, message=message)


def evaluate_measurement(catalog: KPICatalog, measurement: Measurement) -> Evaluation:
    """
    Evaluate every catalog metric against one measurement.

    Metrics absent from the measurement are ``no_data``; an error while
    evaluating one metric is logged and that metric alone becomes ``no_data``.
    """
    evaluation: Evaluation = {}
    for metric in catalog:
        try:
            evaluation[metric.id] = evaluate(metric, measurement.value(metric.id))
        except (TypeError, ValueError, ArithmeticError) as e:
            log_and_continue(logger, e, {"metric_id": metric.id}, "KPI evaluation")
            evaluation[metric.id] = EvaluationEntry.no_data()
    return evaluation


def summarize(evaluation: Evaluation) -> dict[str, Any]:
    """
    Health summary of an evaluation.

    Returns:
        {totalKPIs, healthScore "NN.NN%", statusCounts, criticalIssues, needsAttention}
        where healthScore is the share of excellent or good metrics.
    """
    counts = Counter(entry.status.value for entry in evaluation.values())
    total = len(evaluation)
    healthy = counts[EvaluationStatus.EXCELLENT.value] + counts[EvaluationStatus.GOOD.value]
    health_score = healthy / total * 100 if total else 0.0

    return {
        "totalKPIs": total,
        "healthScore": f"{fixed(health_score)}%",
        "statusCounts": {status.value: counts[status.value] for status in EvaluationStatus},
        "criticalIssues": counts[EvaluationStatus.CRITICAL.value],
        "needsAttention": counts[EvaluationStatus.WARNING.value],
    }
