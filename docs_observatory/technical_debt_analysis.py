#!/usr/bin/env python3
"""
Technical Debt Analysis CLI

Scans a project tree for type-check errors, suppressions, duplicate and
legacy files, and writes ``technical-debt-report.json`` and
``technical-debt-report.md``.

Usage:
    docs-debt [--root PATH] [--source-dir src] [--status-file FILE]
              [--type-check-cmd CMD] [--max-files N] [--timeout SECONDS]
              [--output-dir DIR]

Exit codes:
    0 = success, 1 = scan failed or was cancelled, 2 = invalid configuration
"""

import argparse
import sys
from pathlib import Path

from docs_observatory.core.logging_config import get_logger, setup_logging
from docs_observatory.debt.classifier import DebtReport, TechnicalDebtClassifier
from docs_observatory.debt.scanner import CancellationToken
from docs_observatory.exceptions import ConfigurationError, ObservatoryError
from docs_observatory.reports.markdown import debt_report_markdown
from docs_observatory.secure_config import get_config
from docs_observatory.utils.formatting import format_value
from docs_observatory.utils_atomic_json import atomic_json_save

logger = get_logger(__name__)

JSON_REPORT = "technical-debt-report.json"
MARKDOWN_REPORT = "technical-debt-report.md"


def save_report(report: DebtReport, output_dir: Path) -> tuple[Path, Path]:
    """Write the JSON and Markdown reports; returns their paths."""
    json_path = output_dir / JSON_REPORT
    markdown_path = output_dir / MARKDOWN_REPORT
    output_dir.mkdir(parents=True, exist_ok=True)
    atomic_json_save(report.to_dict(), json_path)
    markdown_path.write_text(debt_report_markdown(report), encoding="utf-8")
    return json_path, markdown_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docs-debt", description="Technical debt analysis")
    parser.add_argument("--root", help="Project root to scan (default: OBSERVATORY_PROJECT_ROOT or .)")
    parser.add_argument("--source-dir", help="Source directory for the suppression scan (default: src)")
    parser.add_argument("--status-file", help="Type-check status document with an aggregate error count")
    parser.add_argument("--type-check-cmd", help="Type-check command whose output is parsed")
    parser.add_argument("--max-files", type=int, help="Abort when the tree holds more files than this")
    parser.add_argument("--timeout", type=float, help="Cancel the directory walk after this many seconds")
    parser.add_argument("--output-dir", help="Where to write the reports (default: project root)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the technical debt analysis.

    Returns:
        Exit code (0 = success, 1 = scan failed, 2 = invalid configuration)
    """
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        logging_config = config.get_logging_config()
        setup_logging(level=logging_config.level, log_file=logging_config.log_file, json_output=logging_config.json_output)

        scan_config = config.get_debt_scan_config(
            project_root=args.root,
            source_dir=args.source_dir,
            status_file=args.status_file,
            type_check_command=args.type_check_cmd,
            max_files=args.max_files,
            output_dir=args.output_dir,
        )
        cancel = CancellationToken(timeout=args.timeout) if args.timeout is not None else None

        logger.info("Starting technical debt analysis", extra={"project_root": str(scan_config.project_root)})
        report = TechnicalDebtClassifier(scan_config, cancel=cancel).classify()
        json_path, markdown_path = save_report(report, scan_config.report_dir)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except (ObservatoryError, OSError) as e:
        logger.error("Technical debt analysis failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summary = report.summary
    print("✅ Technical debt analysis complete!")
    print(f"📊 Total items: {summary.total_items}")
    print(f"🔴 Critical: {summary.critical_items}")
    print(f"🟡 High: {summary.high_priority_items}")
    print(f"🟠 Medium: {summary.medium_priority_items}")
    print(f"🟢 Low: {summary.low_priority_items}")
    print(f"⏱️ Estimated effort: {format_value(report.total_effort)} hours")
    print(f"📄 Reports: {markdown_path} and {json_path}")
    return 0


if __name__ == "__main__":
    exit(main())
