"""
Onboarding analytics

Pure functions of (state, config): completion and timing summary,
per-milestone performance, feedback distribution, the smoothed session
trend and rule-based recommendations.
"""

from collections.abc import Sequence
from typing import Any

from docs_observatory.domain.onboarding import Feedback, FeedbackQuestion, OnboardingSession
from docs_observatory.kpi.trends import calculate_session_trend
from docs_observatory.onboarding.config import OnboardingConfig
from docs_observatory.onboarding.tracker import OnboardingState
from docs_observatory.recommendations import onboarding_recommendations
from docs_observatory.utils.formatting import fixed, to_number

NO_COMPLETED_SESSIONS = "No completed onboarding sessions found"
NO_FEEDBACK = "No feedback data available"


def milestone_analytics(config: OnboardingConfig, completed: Sequence[OnboardingSession]) -> list[dict[str, Any]]:
    """
    Per-milestone completion rate, average time and time range.

    Only the first completion of a milestone in each session is counted;
    ``timeVariance`` is the range (max - min) of time spent.
    """
    results = []
    for milestone in config.milestones:
        times = []
        for session in completed:
            completion = session.completed_milestone(milestone.id)
            if completion is not None:
                times.append(completion.time_spent)

        rate = len(times) / len(completed) * 100 if completed else 0.0
        results.append(
            {
                "milestoneId": milestone.id,
                "name": milestone.name,
                "estimatedTime": milestone.estimated_time,
                "completionRate": fixed(rate),
                "averageTime": fixed(sum(times) / len(times)) if times else fixed(0),
                "timeVariance": fixed(max(times) - min(times)) if times else fixed(0),
            }
        )
    return results


def _distribution(scores: list[float], question: FeedbackQuestion) -> dict[str, int]:
    return {str(i): sum(1 for s in scores if s == i) for i in range(question.scale_min, question.scale_max + 1)}


def analyze_feedback(feedback: Sequence[Feedback], questions: Sequence[FeedbackQuestion]) -> dict[str, Any]:
    """
    Aggregate questionnaire responses per question.

    Scale questions get an average, a response count and a distribution over
    the scale; text questions get the raw responses.
    """
    if not feedback:
        return {"message": NO_FEEDBACK}

    analytics: dict[str, Any] = {}
    for question in questions:
        responses = [f.responses.get(question.id) for f in feedback]
        responses = [r for r in responses if r is not None and r != ""]

        if question.is_scale:
            scores = [score for score in (to_number(r) for r in responses) if score is not None]
            analytics[question.id] = {
                "question": question.question,
                "type": "scale",
                "averageScore": fixed(sum(scores) / len(scores)) if scores else None,
                "responseCount": len(scores),
                "distribution": _distribution(scores, question),
            }
        else:
            analytics[question.id] = {
                "question": question.question,
                "type": question.type,
                "responseCount": len(responses),
                "responses": [str(r) for r in responses],
            }
    return analytics


def generate_analytics(state: OnboardingState, config: OnboardingConfig) -> dict[str, Any]:
    """
    Full onboarding analytics snapshot.

    Returns:
        {summary, milestones, feedback, trends, recommendations}, or
        {message, totalSessions, inProgress} when nothing is completed yet
    """
    completed = state.completed_sessions
    if not completed:
        return {
            "message": NO_COMPLETED_SESSIONS,
            "totalSessions": len(state.sessions),
            "inProgress": len(state.in_progress_sessions),
        }

    average_time = sum(s.total_time for s in completed) / len(completed)
    completion_rate = len(completed) / len(state.sessions) * 100

    milestones = milestone_analytics(config, completed)
    feedback = analyze_feedback(state.feedback, config.feedback_questions)
    scale_feedback = [
        entry
        for entry in feedback.values()
        if isinstance(entry, dict) and entry.get("type") == "scale" and entry.get("averageScore") is not None
    ]
    recommendations = onboarding_recommendations(milestones, scale_feedback)

    return {
        "summary": {
            "totalSessions": len(state.sessions),
            "completedSessions": len(completed),
            "completionRate": f"{fixed(completion_rate)}%",
            "averageOnboardingTime": f"{fixed(average_time)} minutes",
            "averageOnboardingTimeHours": f"{fixed(average_time / 60)} hours",
        },
        "milestones": milestones,
        "feedback": feedback,
        "trends": calculate_session_trend(completed).to_dict(),
        "recommendations": [rec.to_dict() for rec in recommendations],
    }
