"""
Onboarding Session Tracker

Per-developer state machine: a session is started, milestones are appended
to it, and it is completed exactly once. Every operation is one locked
read-modify-write cycle over ``onboarding-data.json``.

Usage:
    tracker = OnboardingTracker(config, OnboardingRepository(paths.onboarding_data_file))
    session_id = tracker.start("dev-1", "Ada")
    tracker.complete_milestone(session_id, "environment_setup", 40)
    tracker.complete_session(session_id)
"""

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from docs_observatory.core.logging_config import get_logger
from docs_observatory.domain.onboarding import (
    COMPLETED,
    IN_PROGRESS,
    Feedback,
    MilestoneCompletion,
    OnboardingSession,
)
from docs_observatory.exceptions import SessionNotFoundError, SessionStateError
from docs_observatory.onboarding.config import OnboardingConfig
from docs_observatory.utils.datetime_utils import epoch_millis, to_iso, utc_now
from docs_observatory.utils.error_handling import log_and_continue
from docs_observatory.utils_atomic_json import atomic_json_save, file_lock, load_json_with_recovery

logger = get_logger(__name__)


@dataclass
class OnboardingState:
    """All sessions plus the standalone feedback list."""

    sessions: list[OnboardingSession] = field(default_factory=list)
    feedback: list[Feedback] = field(default_factory=list)
    last_updated: datetime | None = None

    def find_session(self, session_id: str) -> OnboardingSession:
        """
        Raises:
            SessionNotFoundError: If no session has this id
        """
        for session in self.sessions:
            if session.session_id == session_id:
                return session
        raise SessionNotFoundError(session_id)

    def has_session(self, session_id: str) -> bool:
        return any(s.session_id == session_id for s in self.sessions)

    @property
    def completed_sessions(self) -> list[OnboardingSession]:
        return [s for s in self.sessions if s.is_completed]

    @property
    def in_progress_sessions(self) -> list[OnboardingSession]:
        return [s for s in self.sessions if s.status == IN_PROGRESS]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OnboardingState":
        """Rebuild state from ``onboarding-data.json``; unparsable entries are logged and skipped."""
        state = cls()
        for index, entry in enumerate(data.get("sessions") or []):
            try:
                state.sessions.append(OnboardingSession.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                log_and_continue(logger, e, {"index": index}, "Loading onboarding session")
        for index, entry in enumerate(data.get("feedback") or []):
            try:
                state.feedback.append(Feedback.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                log_and_continue(logger, e, {"index": index}, "Loading onboarding feedback")
        return state

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions": [s.to_dict() for s in self.sessions],
            "feedback": [f.to_dict() for f in self.feedback],
            "lastUpdated": to_iso(self.last_updated) if self.last_updated else None,
        }


def _empty_state_data() -> dict[str, Any]:
    return {"sessions": [], "feedback": [], "lastUpdated": None}


def _is_state_shape(data: dict[str, Any]) -> bool:
    return isinstance(data.get("sessions", []), list) and isinstance(data.get("feedback", []), list)


class OnboardingRepository:
    """Persists OnboardingState as ``onboarding-data.json``."""

    def __init__(self, data_file: str | Path):
        self.data_file = Path(data_file)

    def load(self) -> OnboardingState:
        return OnboardingState.from_dict(load_json_with_recovery(self.data_file, _empty_state_data, _is_state_shape))

    def save(self, state: OnboardingState) -> None:
        atomic_json_save(state.to_dict(), self.data_file)

    @contextmanager
    def transaction(self, now: datetime) -> Iterator[OnboardingState]:
        """
        Locked load / mutate / save cycle. Nothing is written when the block raises.
        """
        with file_lock(self.data_file):
            state = self.load()
            yield state
            state.last_updated = now
            self.save(state)


class OnboardingTracker:
    """
    Tracks onboarding sessions against the milestone catalog.

    Args:
        config: Milestone and feedback catalog
        repository: Persistence for sessions and feedback
        clock: Returns the current time (injectable for tests)
    """

    def __init__(
        self,
        config: OnboardingConfig,
        repository: OnboardingRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.repository = repository
        self.clock = clock

    def start(self, developer_id: str, developer_name: str) -> str:
        """
        Start a new in-progress session.

        Returns:
            Session id ``session_<epoch ms>_<developer id>``; a numeric suffix
            keeps ids unique when two sessions start in the same millisecond
        """
        now = self.clock()
        with self.repository.transaction(now) as state:
            base_id = f"session_{epoch_millis(now)}_{developer_id}"
            session_id = base_id
            suffix = 1
            while state.has_session(session_id):
                session_id = f"{base_id}_{suffix}"
                suffix += 1

            state.sessions.append(
                OnboardingSession(
                    session_id=session_id,
                    developer_id=developer_id,
                    developer_name=developer_name,
                    start_time=now,
                )
            )

        logger.info(
            f"Started onboarding session for {developer_name}",
            extra={"session_id": session_id, "developer_id": developer_id},
        )
        return session_id

    def complete_milestone(
        self,
        session_id: str,
        milestone_id: str,
        time_spent: float | None = None,
    ) -> MilestoneCompletion:
        """
        Append a completion record to a session.

        Args:
            session_id: Target session
            milestone_id: Catalog milestone id
            time_spent: Minutes spent; None uses the catalog estimate

        Raises:
            SessionNotFoundError: Unknown session
            MilestoneNotFoundError: Unknown milestone
        """
        now = self.clock()
        with self.repository.transaction(now) as state:
            session = state.find_session(session_id)
            milestone = self.config.milestone(milestone_id)

            completion = MilestoneCompletion(
                milestone_id=milestone.id,
                name=milestone.name,
                completed_at=now,
                time_spent=milestone.estimated_time if time_spent is None else float(time_spent),
                estimated_time=milestone.estimated_time,
            )
            session.milestones.append(completion)

        logger.info(
            f"Milestone '{milestone.name}' completed",
            extra={"session_id": session_id, "milestone_id": milestone_id, "time_spent": completion.time_spent},
        )
        return completion

    def complete_session(self, session_id: str, feedback: Mapping[str, Any] | None = None) -> OnboardingSession:
        """
        Complete a session and freeze its total time.

        Raises:
            SessionNotFoundError: Unknown session
            SessionStateError: Session is already completed
        """
        now = self.clock()
        with self.repository.transaction(now) as state:
            session = state.find_session(session_id)
            if session.is_completed:
                raise SessionStateError(f"Session {session_id} is already completed")

            session.end_time = now
            session.status = COMPLETED
            session.total_time = sum(m.time_spent for m in session.milestones)

            if feedback:
                self._attach_feedback(state, session, feedback, now)

        logger.info(
            f"Onboarding session completed - total time {session.total_time:g} minutes",
            extra={"session_id": session_id, "total_time": session.total_time},
        )
        return session

    def submit_feedback(self, session_id: str, responses: Mapping[str, Any]) -> Feedback:
        """
        Record questionnaire responses for a session in any state.

        Raises:
            SessionNotFoundError: Unknown session
        """
        now = self.clock()
        with self.repository.transaction(now) as state:
            session = state.find_session(session_id)
            submitted = self._attach_feedback(state, session, responses, now)

        logger.info("Feedback submitted", extra={"session_id": session_id})
        return submitted

    def _attach_feedback(
        self,
        state: OnboardingState,
        session: OnboardingSession,
        responses: Mapping[str, Any],
        now: datetime,
    ) -> Feedback:
        feedback = Feedback(
            session_id=session.session_id,
            developer_id=session.developer_id,
            submitted_at=now,
            responses=dict(responses),
        )
        session.feedback = feedback
        state.feedback.append(feedback)
        return feedback

    def load_state(self) -> OnboardingState:
        return self.repository.load()
