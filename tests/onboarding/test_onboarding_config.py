"""
Tests for the onboarding catalog
"""

import pytest

from docs_observatory.exceptions import ConfigurationError, MilestoneNotFoundError
from docs_observatory.onboarding.config import OnboardingConfig, load_onboarding_config


class TestOnboardingConfig:
    """Tests for milestone and question parsing"""

    def test_default_catalog(self, onboarding_config):
        assert len(onboarding_config.milestones) == 7
        assert len(onboarding_config.feedback_questions) == 5
        assert [q.id for q in onboarding_config.scale_questions] == [
            "setup_difficulty",
            "documentation_clarity",
            "overall_satisfaction",
        ]

    def test_milestone_lookup_by_id(self, onboarding_config):
        milestone = onboarding_config.milestone("project_clone")
        assert milestone.name == "Project Clone & Install"
        assert milestone.estimated_time == 15

    def test_unknown_milestone(self, onboarding_config):
        with pytest.raises(MilestoneNotFoundError, match="Milestone nope not found"):
            onboarding_config.milestone("nope")

    def test_empty_milestones_rejected(self):
        with pytest.raises(ConfigurationError, match="at least one milestone"):
            OnboardingConfig.from_dict({"milestones": []})

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate milestone ids: a"):
            OnboardingConfig.from_dict({"milestones": [{"id": "a"}, {"id": "a"}]})

    def test_milestone_without_id_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid onboarding configuration"):
            OnboardingConfig.from_dict({"milestones": [{"name": "No id"}]})


class TestLoadOnboardingConfig:
    """Tests for the file-backed loader"""

    def test_missing_file_written_with_defaults(self, tmp_path, onboarding_config):
        config_file = tmp_path / "onboarding-config.json"

        loaded = load_onboarding_config(config_file)

        assert config_file.exists()
        assert loaded == onboarding_config
