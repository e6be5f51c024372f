"""
Developer onboarding: session tracking, catalog and analytics.
"""

from docs_observatory.onboarding.analytics import analyze_feedback, generate_analytics, milestone_analytics
from docs_observatory.onboarding.config import OnboardingConfig, load_onboarding_config
from docs_observatory.onboarding.tracker import OnboardingRepository, OnboardingState, OnboardingTracker

__all__ = [
    "OnboardingConfig",
    "OnboardingRepository",
    "OnboardingState",
    "OnboardingTracker",
    "analyze_feedback",
    "generate_analytics",
    "load_onboarding_config",
    "milestone_analytics",
]
