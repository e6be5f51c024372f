"""
Tests for the Onboarding Session Tracker

Run with:
    pytest tests/onboarding/test_tracker.py -v
"""

import json

import pytest

from docs_observatory.domain.onboarding import COMPLETED, IN_PROGRESS
from docs_observatory.exceptions import MilestoneNotFoundError, SessionNotFoundError, SessionStateError
from docs_observatory.onboarding.tracker import OnboardingRepository, OnboardingState, OnboardingTracker
from docs_observatory.utils.datetime_utils import epoch_millis


@pytest.fixture
def repository(tmp_path):
    return OnboardingRepository(tmp_path / "onboarding-data.json")


@pytest.fixture
def tracker(onboarding_config, repository, clock):
    return OnboardingTracker(onboarding_config, repository, clock=clock)


# ============================================================================
# Session lifecycle
# ============================================================================


class TestStart:
    """Tests for starting sessions"""

    def test_session_id_format(self, tracker, clock):
        session_id = tracker.start("dev-1", "Ada")
        assert session_id == f"session_{epoch_millis(clock.now)}_dev-1"

    def test_new_session_is_in_progress(self, tracker, clock):
        session_id = tracker.start("dev-1", "Ada")

        session = tracker.load_state().find_session(session_id)
        assert session.status == IN_PROGRESS
        assert session.developer_name == "Ada"
        assert session.start_time == clock.now
        assert session.milestones == []

    def test_same_millisecond_start_gets_unique_id(self, tracker):
        first = tracker.start("dev-1", "Ada")
        second = tracker.start("dev-1", "Ada")
        third = tracker.start("dev-1", "Ada")

        assert second == f"{first}_1"
        assert third == f"{first}_2"
        assert len(tracker.load_state().sessions) == 3


class TestCompleteMilestone:
    """Tests for appending milestone completions"""

    def test_explicit_time_spent(self, tracker, clock):
        session_id = tracker.start("dev-1", "Ada")
        clock.advance(minutes=40)

        completion = tracker.complete_milestone(session_id, "environment_setup", 40)

        assert completion.time_spent == 40
        assert completion.estimated_time == 30
        assert completion.name == "Environment Setup"
        assert completion.completed_at == clock.now

    def test_missing_time_uses_estimate(self, tracker):
        session_id = tracker.start("dev-1", "Ada")
        assert tracker.complete_milestone(session_id, "project_clone").time_spent == 15

    def test_zero_time_is_kept(self, tracker):
        session_id = tracker.start("dev-1", "Ada")
        assert tracker.complete_milestone(session_id, "project_clone", 0).time_spent == 0

    def test_repeated_completion_appends_again(self, tracker):
        session_id = tracker.start("dev-1", "Ada")
        tracker.complete_milestone(session_id, "first_run", 5)
        tracker.complete_milestone(session_id, "first_run", 12)

        milestones = tracker.load_state().find_session(session_id).milestones
        assert [m.time_spent for m in milestones] == [5, 12]

    def test_unknown_session(self, tracker):
        with pytest.raises(SessionNotFoundError, match="Session missing not found"):
            tracker.complete_milestone("missing", "first_run")

    def test_unknown_milestone_leaves_store_unchanged(self, tracker, repository):
        session_id = tracker.start("dev-1", "Ada")
        before = repository.data_file.read_text(encoding="utf-8")

        with pytest.raises(MilestoneNotFoundError):
            tracker.complete_milestone(session_id, "launch_rocket")

        assert repository.data_file.read_text(encoding="utf-8") == before


class TestCompleteSession:
    """Tests for completing sessions"""

    def test_total_time_is_sum_of_milestones(self, tracker, clock):
        session_id = tracker.start("dev-1", "Ada")
        tracker.complete_milestone(session_id, "environment_setup", 30)
        tracker.complete_milestone(session_id, "project_clone", 20)
        clock.advance(hours=1)

        session = tracker.complete_session(session_id)

        assert session.status == COMPLETED
        assert session.total_time == 50
        assert session.end_time == clock.now

    def test_completed_is_terminal(self, tracker):
        session_id = tracker.start("dev-1", "Ada")
        tracker.complete_session(session_id)

        with pytest.raises(SessionStateError, match="already completed"):
            tracker.complete_session(session_id)

    def test_total_time_frozen_after_completion(self, tracker):
        session_id = tracker.start("dev-1", "Ada")
        tracker.complete_milestone(session_id, "environment_setup", 30)
        tracker.complete_session(session_id)

        tracker.complete_milestone(session_id, "first_feature", 100)

        session = tracker.load_state().find_session(session_id)
        assert session.total_time == 30
        assert len(session.milestones) == 2

    def test_feedback_at_completion_is_stored_twice(self, tracker):
        session_id = tracker.start("dev-1", "Ada")

        tracker.complete_session(session_id, {"overall_satisfaction": 4})

        state = tracker.load_state()
        assert state.find_session(session_id).feedback.responses == {"overall_satisfaction": 4}
        assert len(state.feedback) == 1
        assert state.feedback[0].session_id == session_id

    def test_unknown_session(self, tracker):
        with pytest.raises(SessionNotFoundError):
            tracker.complete_session("missing")


class TestSubmitFeedback:
    """Tests for standalone feedback"""

    def test_feedback_for_in_progress_session(self, tracker):
        session_id = tracker.start("dev-1", "Ada")

        feedback = tracker.submit_feedback(session_id, {"setup_difficulty": 2, "missing_information": "DB docs"})

        assert feedback.developer_id == "dev-1"
        state = tracker.load_state()
        assert state.feedback[0].responses["missing_information"] == "DB docs"
        assert state.find_session(session_id).status == IN_PROGRESS

    def test_unknown_session(self, tracker):
        with pytest.raises(SessionNotFoundError):
            tracker.submit_feedback("missing", {"setup_difficulty": 2})


# ============================================================================
# Persistence
# ============================================================================


class TestOnboardingRepository:
    """Tests for onboarding-data.json persistence"""

    def test_every_operation_updates_last_updated(self, tracker, repository, clock):
        tracker.start("dev-1", "Ada")

        data = json.loads(repository.data_file.read_text(encoding="utf-8"))
        assert data["lastUpdated"] == "2026-02-10T10:00:00.000Z"
        assert data["sessions"][0]["status"] == "in_progress"

    def test_failed_transaction_writes_nothing(self, repository, clock):
        repository.save(OnboardingState())
        before = repository.data_file.read_text(encoding="utf-8")

        with pytest.raises(RuntimeError):
            with repository.transaction(clock()) as state:
                state.feedback.clear()
                raise RuntimeError("boom")

        assert repository.data_file.read_text(encoding="utf-8") == before

    def test_unparsable_sessions_are_skipped(self, repository):
        repository.data_file.write_text(
            json.dumps(
                {
                    "sessions": [
                        {"sessionId": "ok", "startTime": "2026-02-10T09:00:00.000Z", "status": "in_progress"},
                        {"sessionId": "broken"},
                    ],
                    "feedback": [],
                }
            ),
            encoding="utf-8",
        )

        state = repository.load()

        assert [s.session_id for s in state.sessions] == ["ok"]

    def test_corrupt_store_is_reinitialized(self, repository, tmp_path):
        repository.data_file.write_text("not json", encoding="utf-8")

        state = repository.load()

        assert state.sessions == []
        assert list(tmp_path.glob("onboarding-data.json.corrupt-*"))
