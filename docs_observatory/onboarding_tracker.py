#!/usr/bin/env python3
"""
Developer Onboarding Tracker CLI

Usage:
    docs-onboarding start <developer_id> <developer_name>
    docs-onboarding milestone <session_id> <milestone_id> [minutes]
    docs-onboarding complete <session_id>
    docs-onboarding feedback <session_id> key=value [key=value ...]
    docs-onboarding analytics
    docs-onboarding report        # default

Exit codes:
    0 = success, 1 = unknown session/milestone or runtime error,
    2 = invalid configuration or usage
"""

import argparse
import json
import sys
from typing import Any

from docs_observatory.core.logging_config import get_logger, setup_logging
from docs_observatory.exceptions import ConfigurationError, NotFoundError, ObservatoryError
from docs_observatory.onboarding.analytics import generate_analytics
from docs_observatory.onboarding.config import load_onboarding_config
from docs_observatory.onboarding.tracker import OnboardingRepository, OnboardingTracker
from docs_observatory.reports.markdown import onboarding_report_markdown
from docs_observatory.secure_config import PathsConfig, get_config
from docs_observatory.utils.datetime_utils import to_iso
from docs_observatory.utils_atomic_json import atomic_json_save

logger = get_logger(__name__)


def parse_feedback_pairs(pairs: list[str]) -> dict[str, Any]:
    """
    Parse ``key=value`` arguments; numeric values become numbers.

    Raises:
        ValueError: If an argument has no ``=``
    """
    responses: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Feedback must be given as key=value, got {pair!r}")
        try:
            number = float(value)
        except ValueError:
            responses[key] = value
        else:
            responses[key] = int(number) if number.is_integer() else number
    return responses


def generate_report(tracker: OnboardingTracker, paths: PathsConfig) -> dict[str, Any]:
    """
    Write ``onboarding-report.json`` (analytics + raw data) and ``onboarding-report.md``.
    """
    state = tracker.load_state()
    report = {
        "generatedAt": to_iso(tracker.clock()),
        "analytics": generate_analytics(state, tracker.config),
        "rawData": state.to_dict(),
    }

    atomic_json_save(report, paths.onboarding_report_json)
    paths.onboarding_report_markdown.write_text(onboarding_report_markdown(report), encoding="utf-8")
    logger.info(
        "Onboarding report written",
        extra={
            "json_path": str(paths.onboarding_report_json),
            "markdown_path": str(paths.onboarding_report_markdown),
        },
    )
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docs-onboarding", description="Developer onboarding tracker")
    parser.add_argument("--metrics-dir", help="Directory of the onboarding stores (default: OBSERVATORY_METRICS_DIR)")
    subparsers = parser.add_subparsers(dest="command")

    start = subparsers.add_parser("start", help="Start an onboarding session")
    start.add_argument("developer_id")
    start.add_argument("developer_name")

    milestone = subparsers.add_parser("milestone", help="Complete a milestone")
    milestone.add_argument("session_id")
    milestone.add_argument("milestone_id")
    milestone.add_argument("minutes", nargs="?", type=float, default=None)

    complete = subparsers.add_parser("complete", help="Complete a session")
    complete.add_argument("session_id")

    feedback = subparsers.add_parser("feedback", help="Submit feedback for a session")
    feedback.add_argument("session_id")
    feedback.add_argument("responses", nargs="+", metavar="key=value")

    subparsers.add_parser("analytics", help="Print analytics as JSON")
    subparsers.add_parser("report", help="Write JSON and Markdown reports")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the onboarding tracker CLI.

    Returns:
        Exit code (0 = success, 1 = not found or runtime error, 2 = configuration or usage error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "report"

    try:
        config = get_config()
        logging_config = config.get_logging_config()
        setup_logging(level=logging_config.level, log_file=logging_config.log_file, json_output=logging_config.json_output)

        paths = config.get_paths_config(args.metrics_dir)
        tracker = OnboardingTracker(
            load_onboarding_config(paths.onboarding_config_file),
            OnboardingRepository(paths.onboarding_data_file),
        )

        if command == "start":
            session_id = tracker.start(args.developer_id, args.developer_name)
            print(f"🚀 Started onboarding session for {args.developer_name} (ID: {session_id})")
        elif command == "milestone":
            completion = tracker.complete_milestone(args.session_id, args.milestone_id, args.minutes)
            print(f"✅ Milestone '{completion.name}' completed for session {args.session_id}")
        elif command == "complete":
            session = tracker.complete_session(args.session_id)
            print(f"🎉 Onboarding session {args.session_id} completed! Total time: {session.total_time:g} minutes")
        elif command == "feedback":
            try:
                responses = parse_feedback_pairs(args.responses)
            except ValueError as e:
                parser.print_usage(sys.stderr)
                print(f"Error: {e}", file=sys.stderr)
                return 2
            tracker.submit_feedback(args.session_id, responses)
            print(f"📝 Feedback submitted for session {args.session_id}")
        elif command == "analytics":
            print(json.dumps(generate_analytics(tracker.load_state(), tracker.config), indent=2, ensure_ascii=False))
        else:
            report = generate_report(tracker, paths)
            print("✅ Onboarding report generated successfully!")
            summary = report["analytics"].get("summary")
            if summary:
                print(f"📊 Total Sessions: {summary['totalSessions']}")
                print(f"✅ Completion Rate: {summary['completionRate']}")
                print(f"⏱️  Average Time: {summary['averageOnboardingTime']}")
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ObservatoryError, OSError) as e:
        logger.error("Onboarding command failed", exc_info=True, extra={"command": command})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
