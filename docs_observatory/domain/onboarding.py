"""
Onboarding domain models

Represents developer onboarding attempts:
    - OnboardingMilestoneDefinition / FeedbackQuestion: static catalog
    - MilestoneCompletion: one appended completion record
    - Feedback: a submitted questionnaire
    - OnboardingSession: one developer's attempt (in_progress -> completed)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docs_observatory.utils.datetime_utils import parse_iso, to_iso
from docs_observatory.utils.formatting import to_number

IN_PROGRESS = "in_progress"
COMPLETED = "completed"
SESSION_STATUSES = (IN_PROGRESS, COMPLETED)


@dataclass(frozen=True)
class OnboardingMilestoneDefinition:
    """
    A milestone from the onboarding catalog.

    Attributes:
        id: Lookup key (catalog order is for display only)
        name: Display name
        estimated_time: Expected duration in minutes
        required: Whether the milestone is part of the required path
        description: Optional human description
    """

    id: str
    name: str
    estimated_time: float
    required: bool = True
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OnboardingMilestoneDefinition":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            estimated_time=to_number(data.get("estimatedTime")) or 0.0,
            required=bool(data.get("required", True)),
            description=str(data.get("description", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "estimatedTime": self.estimated_time,
            "required": self.required,
        }


@dataclass(frozen=True)
class FeedbackQuestion:
    """A feedback questionnaire entry; ``scale`` questions are scored 1-5 by default."""

    id: str
    question: str
    type: str = "scale"
    scale_min: int = 1
    scale_max: int = 5
    labels: tuple[str, ...] = ()

    @property
    def is_scale(self) -> bool:
        return self.type == "scale"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeedbackQuestion":
        scale = data.get("scale") or {}
        return cls(
            id=str(data["id"]),
            question=str(data.get("question", data["id"])),
            type=str(data.get("type", "scale")),
            scale_min=int(scale.get("min", 1)),
            scale_max=int(scale.get("max", 5)),
            labels=tuple(scale.get("labels", ())),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "question": self.question, "type": self.type}
        if self.is_scale:
            data["scale"] = {"min": self.scale_min, "max": self.scale_max, "labels": list(self.labels)}
        return data


@dataclass(frozen=True)
class MilestoneCompletion:
    """One completion record; appended to a session and never edited."""

    milestone_id: str
    name: str
    completed_at: datetime
    time_spent: float
    estimated_time: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MilestoneCompletion":
        completed_at = parse_iso(data.get("completedAt"))
        if completed_at is None:
            raise ValueError("milestone completion is missing completedAt")
        return cls(
            milestone_id=str(data["milestoneId"]),
            name=str(data.get("name", data["milestoneId"])),
            completed_at=completed_at,
            time_spent=to_number(data.get("timeSpent")) or 0.0,
            estimated_time=to_number(data.get("estimatedTime")) or 0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestoneId": self.milestone_id,
            "name": self.name,
            "completedAt": to_iso(self.completed_at),
            "timeSpent": self.time_spent,
            "estimatedTime": self.estimated_time,
        }


@dataclass(frozen=True)
class Feedback:
    """A submitted onboarding questionnaire."""

    session_id: str
    developer_id: str
    submitted_at: datetime
    responses: Mapping[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Feedback":
        submitted_at = parse_iso(data.get("submittedAt"))
        if submitted_at is None:
            raise ValueError("feedback is missing submittedAt")
        return cls(
            session_id=str(data.get("sessionId", "")),
            developer_id=str(data.get("developerId", "")),
            submitted_at=submitted_at,
            responses=dict(data.get("responses") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "developerId": self.developer_id,
            "submittedAt": to_iso(self.submitted_at),
            "responses": dict(self.responses),
        }


@dataclass
class OnboardingSession:
    """
    One developer's onboarding attempt.

    Lifecycle is one-way: ``in_progress`` -> ``completed``. ``total_time`` is
    frozen at completion as the sum of milestone ``time_spent`` and is not
    recomputed afterwards.

    Example:
        session = OnboardingSession(
            session_id="session_1760000000000_dev-1",
            developer_id="dev-1",
            developer_name="Ada",
            start_time=datetime(2026, 2, 1, tzinfo=UTC),
        )
        if session.is_completed:
            print(session.total_time)
    """

    session_id: str
    developer_id: str
    developer_name: str
    start_time: datetime
    end_time: datetime | None = None
    status: str = IN_PROGRESS
    milestones: list[MilestoneCompletion] = field(default_factory=list)
    total_time: float = 0.0
    feedback: Feedback | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    def completed_milestone(self, milestone_id: str) -> MilestoneCompletion | None:
        """First completion record for ``milestone_id``, if any."""
        return next((m for m in self.milestones if m.milestone_id == milestone_id), None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OnboardingSession":
        start_time = parse_iso(data.get("startTime"))
        if start_time is None:
            raise ValueError(f"session {data.get('sessionId')} is missing startTime")
        status = str(data.get("status", IN_PROGRESS))
        if status not in SESSION_STATUSES:
            raise ValueError(f"session {data.get('sessionId')} has unknown status {status!r}")

        feedback_data = data.get("feedback")
        return cls(
            session_id=str(data["sessionId"]),
            developer_id=str(data.get("developerId", "")),
            developer_name=str(data.get("developerName", "")),
            start_time=start_time,
            end_time=parse_iso(data.get("endTime")),
            status=status,
            milestones=[MilestoneCompletion.from_dict(m) for m in data.get("milestones") or []],
            total_time=to_number(data.get("totalTime")) or 0.0,
            feedback=_session_feedback_from_dict(data, feedback_data) if feedback_data else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "developerId": self.developer_id,
            "developerName": self.developer_name,
            "startTime": to_iso(self.start_time),
            "endTime": to_iso(self.end_time) if self.end_time else None,
            "status": self.status,
            "milestones": [m.to_dict() for m in self.milestones],
            "totalTime": self.total_time,
            "feedback": self.feedback.to_dict() if self.feedback else None,
        }


def _session_feedback_from_dict(session: Mapping[str, Any], data: Mapping[str, Any]) -> Feedback:
    # Feedback attached at completion time carries only submittedAt/responses
    return Feedback.from_dict(
        {
            "sessionId": data.get("sessionId", session.get("sessionId")),
            "developerId": data.get("developerId", session.get("developerId")),
            "submittedAt": data.get("submittedAt"),
            "responses": data.get("responses"),
        }
    )
