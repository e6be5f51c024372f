"""
Domain Models - Type-safe data structures for the analytics pipeline

This package contains dataclasses representing business domain concepts:
    - metrics: MetricDefinition, Measurement, EvaluationEntry, Alert, KPITrend
    - onboarding: OnboardingSession, MilestoneCompletion, Feedback
    - debt: DebtItem, DebtSummary

Usage:
    from docs_observatory.domain import EvaluationEntry, EvaluationStatus

    entry = EvaluationEntry.no_data()
    if not entry.has_data:
        print(entry.message)
"""

from .debt import DebtItem, DebtSummary
from .metrics import (
    Alert,
    Evaluation,
    EvaluationEntry,
    EvaluationStatus,
    InsufficientData,
    KPITrend,
    Measurement,
    MetricDefinition,
    MetricThresholds,
)
from .onboarding import (
    Feedback,
    FeedbackQuestion,
    MilestoneCompletion,
    OnboardingMilestoneDefinition,
    OnboardingSession,
)

__all__ = [
    # KPI domain
    "Alert",
    "Evaluation",
    "EvaluationEntry",
    "EvaluationStatus",
    "InsufficientData",
    "KPITrend",
    "Measurement",
    "MetricDefinition",
    "MetricThresholds",
    # Onboarding domain
    "Feedback",
    "FeedbackQuestion",
    "MilestoneCompletion",
    "OnboardingMilestoneDefinition",
    "OnboardingSession",
    # Debt domain
    "DebtItem",
    "DebtSummary",
]
