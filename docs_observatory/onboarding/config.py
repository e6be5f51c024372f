"""
Onboarding catalog loading

Parses ``onboarding-config.json`` (milestones and feedback questions) into
frozen dataclasses. Milestone catalog order is display order only; lookups
are by id.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from docs_observatory.domain.constants import default_onboarding_config
from docs_observatory.domain.onboarding import FeedbackQuestion, OnboardingMilestoneDefinition
from docs_observatory.exceptions import ConfigurationError, MilestoneNotFoundError
from docs_observatory.utils_atomic_json import load_json_with_recovery


@dataclass(frozen=True)
class OnboardingConfig:
    milestones: tuple[OnboardingMilestoneDefinition, ...]
    feedback_questions: tuple[FeedbackQuestion, ...] = ()

    def milestone(self, milestone_id: str) -> OnboardingMilestoneDefinition:
        """
        Raises:
            MilestoneNotFoundError: If the id is not in the catalog
        """
        for milestone in self.milestones:
            if milestone.id == milestone_id:
                return milestone
        raise MilestoneNotFoundError(milestone_id)

    @property
    def scale_questions(self) -> list[FeedbackQuestion]:
        return [q for q in self.feedback_questions if q.is_scale]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OnboardingConfig":
        try:
            milestones = tuple(OnboardingMilestoneDefinition.from_dict(m) for m in data.get("milestones") or [])
            questions = tuple(FeedbackQuestion.from_dict(q) for q in data.get("feedbackQuestions") or [])
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid onboarding configuration: {e}") from e

        if not milestones:
            raise ConfigurationError("Onboarding configuration must define at least one milestone")

        ids = [m.id for m in milestones]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate milestone ids: {', '.join(duplicates)}")

        return cls(milestones=milestones, feedback_questions=questions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestones": [m.to_dict() for m in self.milestones],
            "feedbackQuestions": [q.to_dict() for q in self.feedback_questions],
        }


def load_onboarding_config(config_file: str | Path) -> OnboardingConfig:
    """Load the onboarding catalog, writing defaults when the file is missing."""
    return OnboardingConfig.from_dict(load_json_with_recovery(config_file, default_onboarding_config))
