#!/usr/bin/env python3
"""
Application Constants

Default catalogs and pipeline constants. The defaults are written to the
JSON config files on first run; after that the files are the source of truth.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KPIPipelineConfig:
    """
    KPI pipeline window and retention constants.

    Attributes:
        TREND_WINDOW: Most recent snapshots considered for KPI trends
        MOVING_AVERAGE_WINDOW: Sliding window for smoothed onboarding trends
        MAX_MEASUREMENTS: Snapshots retained in the measurement store
        MAX_ALERTS: Alerts retained in the measurement store
        IMPROVING_FACTOR: Smoothed last < first * factor means improving
        DECLINING_FACTOR: Smoothed last > first * factor means declining
    """

    TREND_WINDOW: int = 10
    MOVING_AVERAGE_WINDOW: int = 3
    MAX_MEASUREMENTS: int = 100
    MAX_ALERTS: int = 50
    IMPROVING_FACTOR: float = 0.9
    DECLINING_FACTOR: float = 1.1


kpi_pipeline = KPIPipelineConfig()

DEFAULT_ALERTING_STATUSES = ("critical", "warning")


def default_kpi_config() -> dict[str, Any]:
    """Default ``kpi-config.json`` content."""
    return {
        "kpis": {
            "documentation_coverage": {
                "name": "Documentation Coverage",
                "description": "Percentage of source files with corresponding documentation",
                "target": 85,
                "thresholds": {"excellent": 90, "good": 80, "warning": 70, "critical": 60},
                "unit": "%",
                "category": "coverage",
            },
            "documentation_quality_score": {
                "name": "Documentation Quality Score",
                "description": "Overall quality score based on broken links, examples, and freshness",
                "target": 85,
                "thresholds": {"excellent": 90, "good": 80, "warning": 70, "critical": 60},
                "unit": "%",
                "category": "quality",
            },
            "onboarding_completion_rate": {
                "name": "Onboarding Completion Rate",
                "description": "Percentage of developers who complete the full onboarding process",
                "target": 90,
                "thresholds": {"excellent": 95, "good": 85, "warning": 75, "critical": 65},
                "unit": "%",
                "category": "onboarding",
            },
            "average_onboarding_time": {
                "name": "Average Onboarding Time",
                "description": "Average time for new developers to complete onboarding",
                "target": 180,
                "thresholds": {"excellent": 150, "good": 180, "warning": 240, "critical": 300},
                "unit": "minutes",
                "category": "onboarding",
                "lowerIsBetter": True,
            },
            "stale_documentation_percentage": {
                "name": "Stale Documentation Percentage",
                "description": "Percentage of documentation not updated in 90+ days",
                "target": 10,
                "thresholds": {"excellent": 5, "good": 10, "warning": 20, "critical": 30},
                "unit": "%",
                "category": "maintenance",
                "lowerIsBetter": True,
            },
            "broken_links_count": {
                "name": "Broken Links Count",
                "description": "Number of broken internal links in documentation",
                "target": 0,
                "thresholds": {"excellent": 0, "good": 2, "warning": 5, "critical": 10},
                "unit": "count",
                "category": "quality",
                "lowerIsBetter": True,
            },
            "documentation_feedback_score": {
                "name": "Documentation Feedback Score",
                "description": "Average satisfaction score from developer feedback",
                "target": 4.0,
                "thresholds": {"excellent": 4.5, "good": 4.0, "warning": 3.5, "critical": 3.0},
                "unit": "/5",
                "category": "satisfaction",
            },
            "weekly_documentation_updates": {
                "name": "Weekly Documentation Updates",
                "description": "Number of documentation files updated in the last 7 days",
                "target": 5,
                "thresholds": {"excellent": 8, "good": 5, "warning": 3, "critical": 1},
                "unit": "count",
                "category": "maintenance",
            },
        },
        "alerting": {
            "enabled": True,
            "channels": ["console", "file"],
            "thresholds": list(DEFAULT_ALERTING_STATUSES),
        },
        "reporting": {"frequency": "weekly", "includeGraphs": True, "includeTrends": True},
    }


def default_onboarding_config() -> dict[str, Any]:
    """Default ``onboarding-config.json`` content."""
    return {
        "milestones": [
            {
                "id": "environment_setup",
                "name": "Environment Setup",
                "description": "Complete local development environment setup",
                "estimatedTime": 30,
                "required": True,
            },
            {
                "id": "project_clone",
                "name": "Project Clone & Install",
                "description": "Clone repository and install dependencies",
                "estimatedTime": 15,
                "required": True,
            },
            {
                "id": "database_setup",
                "name": "Database Setup",
                "description": "Configure the database and run migrations",
                "estimatedTime": 20,
                "required": True,
            },
            {
                "id": "first_run",
                "name": "First Application Run",
                "description": "Successfully start the development server",
                "estimatedTime": 10,
                "required": True,
            },
            {
                "id": "documentation_review",
                "name": "Documentation Review",
                "description": "Read through getting started and architecture docs",
                "estimatedTime": 45,
                "required": True,
            },
            {
                "id": "first_feature",
                "name": "First Feature Implementation",
                "description": "Complete first assigned task or feature",
                "estimatedTime": 120,
                "required": False,
            },
            {
                "id": "code_review",
                "name": "First Code Review",
                "description": "Submit and complete first code review",
                "estimatedTime": 30,
                "required": False,
            },
        ],
        "feedbackQuestions": [
            {
                "id": "setup_difficulty",
                "question": "How difficult was the initial setup process?",
                "type": "scale",
                "scale": {
                    "min": 1,
                    "max": 5,
                    "labels": ["Very Easy", "Easy", "Moderate", "Difficult", "Very Difficult"],
                },
            },
            {
                "id": "documentation_clarity",
                "question": "How clear and helpful was the documentation?",
                "type": "scale",
                "scale": {"min": 1, "max": 5, "labels": ["Very Poor", "Poor", "Fair", "Good", "Excellent"]},
            },
            {"id": "missing_information", "question": "What information was missing or unclear?", "type": "text"},
            {
                "id": "improvement_suggestions",
                "question": "What would improve the onboarding experience?",
                "type": "text",
            },
            {
                "id": "overall_satisfaction",
                "question": "Overall satisfaction with onboarding process",
                "type": "scale",
                "scale": {
                    "min": 1,
                    "max": 5,
                    "labels": ["Very Unsatisfied", "Unsatisfied", "Neutral", "Satisfied", "Very Satisfied"],
                },
            },
        ],
    }
