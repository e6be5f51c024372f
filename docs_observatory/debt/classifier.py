"""
Technical Debt Classifier

Runs every debt scan over one project tree and aggregates the result:

    1. Type-check errors (documented count, or parsed checker output)
    2. Suppression markers in source files
    3. Duplicate / backup files
    4. Legacy / temporary files

The item set is rebuilt from scratch on every run. A failure on one file is
logged and skipped; it never aborts the batch.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from docs_observatory.core.logging_config import get_logger
from docs_observatory.debt.diagnostics import (
    estimate_error_distribution,
    parse_diagnostics,
    read_error_count,
    run_type_check,
)
from docs_observatory.debt.patterns import (
    DUPLICATE_EFFORT,
    DUPLICATE_REMEDIATION,
    DUPLICATE_RULES,
    DUPLICATE_SEVERITY,
    LEGACY_RULES,
    SUPPRESSION_EFFORT,
    SUPPRESSION_EXTENSIONS,
    SUPPRESSION_MARKERS,
    SUPPRESSION_SEVERITY,
    first_match,
    legacy_effort,
    legacy_remediation,
    legacy_severity,
)
from docs_observatory.debt.scanner import CancellationToken, walk_files
from docs_observatory.domain.debt import (
    DUPLICATE_FILE,
    LEGACY_FILE,
    TYPESCRIPT_SUPPRESSION,
    DebtItem,
    DebtSummary,
)
from docs_observatory.recommendations import Recommendation, debt_recommendations
from docs_observatory.secure_config import DebtScanConfig
from docs_observatory.utils.datetime_utils import to_iso, utc_now
from docs_observatory.utils.error_handling import log_and_continue

logger = get_logger(__name__)


def prioritize(items: Iterable[DebtItem]) -> list[DebtItem]:
    """Stable sort by severity (critical first), then ascending effort."""
    return sorted(items, key=lambda item: (item.severity_rank, item.estimated_effort))


def classify_duplicates(paths: Iterable[str]) -> list[DebtItem]:
    items = []
    for path in paths:
        rule = first_match(DUPLICATE_RULES, path)
        if rule is None:
            continue
        items.append(
            DebtItem(
                id=f"duplicate-{len(items) + 1}",
                type=DUPLICATE_FILE,
                severity=DUPLICATE_SEVERITY,
                file=path,
                category=rule.category,
                estimated_effort=DUPLICATE_EFFORT,
                remediation_plan=DUPLICATE_REMEDIATION,
            )
        )
    return items


def classify_legacy(paths: Iterable[str]) -> list[DebtItem]:
    items = []
    for path in paths:
        rule = first_match(LEGACY_RULES, path)
        if rule is None:
            continue
        items.append(
            DebtItem(
                id=f"legacy-{len(items) + 1}",
                type=LEGACY_FILE,
                severity=legacy_severity(rule.category),
                file=path,
                category=rule.category,
                estimated_effort=legacy_effort(rule.category),
                remediation_plan=legacy_remediation(rule.category),
            )
        )
    return items


def find_suppressions(
    project_root: Path,
    source_dir: str,
    cancel: CancellationToken | None = None,
    extensions: Sequence[str] = SUPPRESSION_EXTENSIONS,
    markers: Sequence[str] = SUPPRESSION_MARKERS,
) -> list[DebtItem]:
    """
    One item per (line, marker) occurrence in source files under ``source_dir``.

    Paths in the items are relative to ``project_root``.
    """
    source_root = project_root / source_dir
    if not source_root.is_dir():
        logger.info("Source directory not found - skipping suppression scan", extra={"path": str(source_root)})
        return []

    items: list[DebtItem] = []
    for rel_path in walk_files(source_root, cancel=cancel):
        if not rel_path.endswith(tuple(extensions)):
            continue
        display_path = (Path(source_dir) / rel_path).as_posix()
        try:
            content = (source_root / rel_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log_and_continue(logger, e, {"path": display_path}, "Suppression scan")
            continue

        for line_number, line in enumerate(content.split("\n"), start=1):
            for marker in markers:
                if marker in line:
                    items.append(
                        DebtItem(
                            id=f"suppression-{len(items) + 1}",
                            type=TYPESCRIPT_SUPPRESSION,
                            severity=SUPPRESSION_SEVERITY,
                            file=display_path,
                            line=line_number,
                            category="suppression",
                            suppression=marker,
                            content=line.strip(),
                            estimated_effort=SUPPRESSION_EFFORT,
                        )
                    )
    return items


@dataclass
class DebtReport:
    """
    Aggregate result of one technical debt scan.

    Attributes:
        errors: Type-check error items (possibly estimated)
        total_errors: Number of type-check errors reported or parsed
        errors_estimated: True when errors were synthesized from a count
        suppressions / duplicates / legacy: Items of each kind
        summary: Counts per severity over all items
        prioritized: All items, critical first, cheapest first within a severity
        total_effort: Sum of estimated effort in hours
        recommendations: Rule-based advice, high priority first
    """

    generated_at: datetime
    errors: list[DebtItem] = field(default_factory=list)
    total_errors: int = 0
    errors_estimated: bool = False
    suppressions: list[DebtItem] = field(default_factory=list)
    duplicates: list[DebtItem] = field(default_factory=list)
    legacy: list[DebtItem] = field(default_factory=list)
    summary: DebtSummary = field(default_factory=DebtSummary)
    prioritized: list[DebtItem] = field(default_factory=list)
    total_effort: float = 0.0
    recommendations: list[Recommendation] = field(default_factory=list)

    @property
    def items(self) -> list[DebtItem]:
        return [*self.errors, *self.suppressions, *self.duplicates, *self.legacy]

    @classmethod
    def build(
        cls,
        generated_at: datetime,
        errors: list[DebtItem],
        total_errors: int,
        errors_estimated: bool,
        suppressions: list[DebtItem],
        duplicates: list[DebtItem],
        legacy: list[DebtItem],
    ) -> "DebtReport":
        report = cls(
            generated_at=generated_at,
            errors=errors,
            total_errors=total_errors,
            errors_estimated=errors_estimated,
            suppressions=suppressions,
            duplicates=duplicates,
            legacy=legacy,
        )
        items = report.items
        report.summary = DebtSummary.from_items(items)
        report.prioritized = prioritize(items)
        report.total_effort = sum(item.estimated_effort for item in items)
        report.recommendations = debt_recommendations(items)
        return report

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": to_iso(self.generated_at),
            "summary": self.summary.to_dict(),
            "categories": {
                "typescript": {
                    "totalErrors": self.total_errors,
                    "estimated": self.errors_estimated,
                    "errors": [item.to_dict() for item in self.errors],
                    "suppressions": [item.to_dict() for item in self.suppressions],
                },
                "duplicateFiles": [item.to_dict() for item in self.duplicates],
                "legacyFiles": [item.to_dict() for item in self.legacy],
            },
            "prioritizedTasks": [item.to_dict() for item in self.prioritized],
            "estimatedEffort": self.total_effort,
            "recommendations": [rec.to_dict() for rec in self.recommendations],
        }


class TechnicalDebtClassifier:
    """
    Classifies the debt of one project tree.

    Args:
        config: Validated scan settings
        cancel: Optional token to stop long directory walks
        clock: Returns the current time (injectable for tests)
        type_check_runner: Runs the checker command; defaults to a subprocess
    """

    def __init__(
        self,
        config: DebtScanConfig,
        cancel: CancellationToken | None = None,
        clock: Callable[[], datetime] = utc_now,
        type_check_runner: Callable[[Sequence[str], Path], str] = run_type_check,
    ):
        self.config = config
        self.cancel = cancel
        self.clock = clock
        self.type_check_runner = type_check_runner

    def analyze_type_errors(self) -> tuple[list[DebtItem], int, bool]:
        """
        Returns:
            (error items, total error count, whether the items are estimated)
        """
        status_file = self.config.status_file
        if status_file is not None and status_file.is_file():
            try:
                status_text = status_file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                log_and_continue(logger, e, {"path": str(status_file)}, "Reading type-check status")
            else:
                count = read_error_count(status_text)
                if count is not None:
                    logger.info(
                        f"Found {count} type-check errors documented in {status_file.name}",
                        extra={"error_count": count},
                    )
                    return estimate_error_distribution(count, status_text), count, True

        if self.config.type_check_command:
            output = self.type_check_runner(self.config.type_check_command, self.config.project_root)
            errors = parse_diagnostics(output)
            logger.info(f"Parsed {len(errors)} type-check errors", extra={"error_count": len(errors)})
            return errors, len(errors), False

        logger.info("No type-check status file or command configured - skipping error analysis")
        return [], 0, False

    def classify(self) -> DebtReport:
        """
        Run every scan and aggregate the result.

        Raises:
            ScanCancelled: If the cancellation token fires
            ScanLimitExceeded: If the tree has more files than allowed
        """
        root = self.config.project_root
        errors, total_errors, estimated = self.analyze_type_errors()
        suppressions = find_suppressions(root, self.config.source_dir, self.cancel)

        paths = list(walk_files(root, cancel=self.cancel, max_files=self.config.max_files))
        duplicates = classify_duplicates(paths)
        legacy = classify_legacy(paths)

        report = DebtReport.build(
            generated_at=self.clock(),
            errors=errors,
            total_errors=total_errors,
            errors_estimated=estimated,
            suppressions=suppressions,
            duplicates=duplicates,
            legacy=legacy,
        )
        logger.info(
            "Technical debt analysis complete",
            extra={
                "total_items": report.summary.total_items,
                "critical_items": report.summary.critical_items,
                "files_scanned": len(paths),
                "estimated_effort_hours": report.total_effort,
            },
        )
        return report
