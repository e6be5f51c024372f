"""
Rule-based recommendations

Fixed thresholds turn analytics into prioritized, human-actionable advice.
Three rule sets share the Recommendation record:
    - onboarding: milestone completion, time overrun, feedback score
    - technical debt: critical errors, suppressions, legacy and duplicate files
    - documentation: coverage, broken links, freshness, quality score
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from docs_observatory.domain.debt import DUPLICATE_FILE, LEGACY_FILE, TYPESCRIPT_SUPPRESSION, DebtItem
from docs_observatory.utils.formatting import format_value

if TYPE_CHECKING:
    from docs_observatory.collectors.documentation import DocumentationSnapshot

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

MIN_MILESTONE_COMPLETION_RATE = 80.0
MAX_TIME_OVERRUN_FACTOR = 1.5
MIN_FEEDBACK_SCORE = 3.0
MIN_DOCUMENTATION_COVERAGE = 70.0
MIN_DOCUMENTATION_QUALITY = 80.0


@dataclass(frozen=True)
class Recommendation:
    """A prioritized piece of advice."""

    type: str
    priority: str
    message: str

    def __post_init__(self) -> None:
        if self.priority not in PRIORITY_ORDER:
            raise ValueError(f"Unknown priority: {self.priority}")

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "priority": self.priority, "message": self.message}


def sort_recommendations(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    """Stable sort: high before medium before low, original order within a priority."""
    return sorted(recommendations, key=lambda rec: PRIORITY_ORDER[rec.priority])


def onboarding_recommendations(
    milestones: Iterable[dict[str, Any]],
    scale_feedback: Iterable[dict[str, Any]],
) -> list[Recommendation]:
    """
    Recommendations from milestone and feedback analytics.

    Args:
        milestones: Dicts with name, completionRate, averageTime, estimatedTime
        scale_feedback: Dicts with question and averageScore for scale questions
    """
    recommendations = []

    for milestone in milestones:
        completion_rate = float(milestone["completionRate"])
        average_time = float(milestone["averageTime"])
        estimated_time = float(milestone["estimatedTime"])

        if completion_rate < MIN_MILESTONE_COMPLETION_RATE:
            recommendations.append(
                Recommendation(
                    type="milestone_completion",
                    priority="high",
                    message=(
                        f"Milestone '{milestone['name']}' has low completion rate ({milestone['completionRate']}%). "
                        "Consider reviewing requirements or documentation."
                    ),
                )
            )

        if average_time > estimated_time * MAX_TIME_OVERRUN_FACTOR:
            recommendations.append(
                Recommendation(
                    type="milestone_time",
                    priority="medium",
                    message=(
                        f"Milestone '{milestone['name']}' takes {milestone['averageTime']} minutes on average, "
                        f"significantly longer than estimated {format_value(estimated_time)} minutes."
                    ),
                )
            )

    for feedback in scale_feedback:
        if float(feedback["averageScore"]) < MIN_FEEDBACK_SCORE:
            recommendations.append(
                Recommendation(
                    type="feedback_score",
                    priority="high",
                    message=(
                        f"Low satisfaction score for \"{feedback['question']}\" ({feedback['averageScore']}/5). "
                        "Review and improve this aspect."
                    ),
                )
            )

    return sort_recommendations(recommendations)


def debt_recommendations(items: Iterable[DebtItem]) -> list[Recommendation]:
    """Recommendations from the items of one technical debt scan."""
    items = list(items)
    recommendations = []

    critical = [item for item in items if item.severity == "critical"]
    if critical:
        recommendations.append(
            Recommendation(
                type="critical_errors",
                priority="high",
                message=f"Fix {len(critical)} critical issues that break functionality before new feature work.",
            )
        )

    legacy_high = [item for item in items if item.type == LEGACY_FILE and item.severity == "high"]
    if legacy_high:
        recommendations.append(
            Recommendation(
                type="legacy_cleanup",
                priority="high",
                message=(
                    f"Review {len(legacy_high)} debug, test or temporary files left in the tree; "
                    "convert them to proper tests or remove them."
                ),
            )
        )

    suppressions = [item for item in items if item.type == TYPESCRIPT_SUPPRESSION]
    if suppressions:
        recommendations.append(
            Recommendation(
                type="suppressions",
                priority="medium",
                message=(
                    f"Remove {len(suppressions)} type-check suppressions by fixing the underlying issues."
                ),
            )
        )

    duplicates = [item for item in items if item.type == DUPLICATE_FILE]
    if duplicates:
        recommendations.append(
            Recommendation(
                type="duplicate_cleanup",
                priority="low",
                message=f"Remove or archive {len(duplicates)} duplicate and backup files.",
            )
        )

    return sort_recommendations(recommendations)


def documentation_recommendations(snapshot: "DocumentationSnapshot") -> list[Recommendation]:
    """Recommendations from the documentation-metrics collaborator's output."""
    recommendations = []

    if snapshot.coverage_percentage is not None and snapshot.coverage_percentage < MIN_DOCUMENTATION_COVERAGE:
        recommendations.append(
            Recommendation(
                type="coverage",
                priority="high",
                message=(
                    f"Documentation coverage is {format_value(snapshot.coverage_percentage)}%. "
                    "Consider documenting the undocumented source files."
                ),
            )
        )

    if snapshot.broken_links:
        recommendations.append(
            Recommendation(
                type="broken_links",
                priority="high",
                message=(
                    f"Found {format_value(snapshot.broken_links)} broken links. "
                    "Run link checker to identify and fix them."
                ),
            )
        )

    if snapshot.stale_docs:
        recommendations.append(
            Recommendation(
                type="freshness",
                priority="medium",
                message=(
                    f"{len(snapshot.stale_docs)} documents haven't been updated in 90+ days. "
                    "Consider reviewing for accuracy."
                ),
            )
        )

    if snapshot.quality_score is not None and snapshot.quality_score < MIN_DOCUMENTATION_QUALITY:
        recommendations.append(
            Recommendation(
                type="quality",
                priority="medium",
                message=(
                    f"Documentation quality score is {format_value(snapshot.quality_score)}%. "
                    "Focus on fixing broken links, adding examples, and updating stale content."
                ),
            )
        )

    return sort_recommendations(recommendations)
