"""
Tests for the Threshold Evaluator

Run with:
    pytest tests/kpi/test_evaluator.py -v
"""

from datetime import UTC, datetime

import pytest

from docs_observatory.domain.metrics import (
    EvaluationEntry,
    EvaluationStatus,
    Measurement,
    MetricDefinition,
    MetricThresholds,
)
from docs_observatory.kpi.evaluator import classify, evaluate, evaluate_measurement, summarize

NOW = datetime(2026, 2, 10, 10, 0, tzinfo=UTC)


# ============================================================================
# Classification
# ============================================================================


class TestClassify:
    """Tests for four-tier classification honoring polarity"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (95, EvaluationStatus.EXCELLENT),
            (90, EvaluationStatus.EXCELLENT),
            (85, EvaluationStatus.GOOD),
            (80, EvaluationStatus.GOOD),
            (72, EvaluationStatus.WARNING),
            (65, EvaluationStatus.CRITICAL),
            (0, EvaluationStatus.CRITICAL),
        ],
    )
    def test_higher_is_better(self, coverage_metric, value, expected):
        assert classify(coverage_metric, value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            (120, EvaluationStatus.EXCELLENT),
            (150, EvaluationStatus.EXCELLENT),
            (170, EvaluationStatus.GOOD),
            (240, EvaluationStatus.WARNING),
            (301, EvaluationStatus.CRITICAL),
        ],
    )
    def test_lower_is_better(self, onboarding_time_metric, value, expected):
        assert classify(onboarding_time_metric, value) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            (4, EvaluationStatus.EXCELLENT),
            # Mirrored with <=: 25 is past the warning bound of 20, so it is critical
            (25, EvaluationStatus.CRITICAL),
            (35, EvaluationStatus.CRITICAL),
        ],
    )
    def test_lower_is_better_mirrors_thresholds(self, value, expected):
        stale_docs = MetricDefinition(
            id="stale_documentation_percentage",
            name="Stale Documentation Percentage",
            target=10,
            thresholds=MetricThresholds(excellent=5, good=10, warning=20, critical=30),
            unit="%",
            category="maintenance",
            lower_is_better=True,
        )
        assert classify(stale_docs, value) is expected

    def test_lower_is_better_between_warning_and_critical(self, onboarding_time_metric):
        # 270 minutes is above warning (240) and below critical (300)
        entry = evaluate(onboarding_time_metric, 270)
        assert entry.status is EvaluationStatus.CRITICAL
        assert entry.message.endswith("270minutes (target: above 180minutes)")

    def test_zero_target_lower_is_better(self, kpi_catalog):
        broken_links = kpi_catalog["broken_links_count"]
        assert classify(broken_links, 0) is EvaluationStatus.EXCELLENT
        assert classify(broken_links, 3) is EvaluationStatus.WARNING
        assert classify(broken_links, 11) is EvaluationStatus.CRITICAL


# ============================================================================
# Single-metric evaluation
# ============================================================================


class TestEvaluate:
    """Tests for evaluation entries and messages"""

    def test_warning_value_below_target(self, coverage_metric):
        entry = evaluate(coverage_metric, 72)

        assert entry.status is EvaluationStatus.WARNING
        assert "below 85" in entry.message
        assert entry.message == "🟠 Needs attention - 72% (target: below 85%)"
        assert entry.value == 72
        assert entry.target == 85

    def test_value_above_target(self, coverage_metric):
        entry = evaluate(coverage_metric, 92.5)
        assert entry.status is EvaluationStatus.EXCELLENT
        assert entry.message == "🟢 Excellent performance - 92.5% (target: above 85%)"

    def test_lower_is_better_comparison_wording(self, onboarding_time_metric):
        assert "below 180" in evaluate(onboarding_time_metric, 170).message
        assert "above 180" in evaluate(onboarding_time_metric, 200).message

    def test_missing_value_is_no_data(self, coverage_metric):
        entry = evaluate(coverage_metric, None)
        assert entry == EvaluationEntry.no_data()
        assert entry.target is None


# ============================================================================
# Whole-measurement evaluation
# ============================================================================


class TestEvaluateMeasurement:
    """Tests for evaluating every catalog metric"""

    def test_absent_metrics_are_no_data(self, kpi_catalog):
        evaluation = evaluate_measurement(kpi_catalog, Measurement(timestamp=NOW, values={}))

        assert list(evaluation) == kpi_catalog.ids
        assert all(entry.status is EvaluationStatus.NO_DATA for entry in evaluation.values())

    def test_failure_on_one_metric_does_not_stop_others(self, kpi_catalog):
        measurement = Measurement(
            timestamp=NOW,
            values={"documentation_coverage": "not-a-number", "documentation_quality_score": 92},
        )

        evaluation = evaluate_measurement(kpi_catalog, measurement)

        assert evaluation["documentation_coverage"].status is EvaluationStatus.NO_DATA
        assert evaluation["documentation_quality_score"].status is EvaluationStatus.EXCELLENT


# ============================================================================
# Summary
# ============================================================================


class TestSummarize:
    """Tests for the health summary"""

    def test_health_score_counts_excellent_and_good(self, coverage_metric):
        evaluation = {
            "a": evaluate(coverage_metric, 95),
            "b": evaluate(coverage_metric, 82),
            "c": evaluate(coverage_metric, 72),
            "d": evaluate(coverage_metric, 10),
        }

        summary = summarize(evaluation)

        assert summary["totalKPIs"] == 4
        assert summary["healthScore"] == "50.00%"
        assert summary["criticalIssues"] == 1
        assert summary["needsAttention"] == 1

    def test_status_counts_include_every_status(self, coverage_metric):
        summary = summarize({"a": evaluate(coverage_metric, 95), "b": EvaluationEntry.no_data()})
        assert summary["statusCounts"] == {"excellent": 1, "good": 0, "warning": 0, "critical": 0, "no_data": 1}

    def test_empty_evaluation(self):
        summary = summarize({})
        assert summary["totalKPIs"] == 0
        assert summary["healthScore"] == "0.00%"
