"""
Technical debt classification: ordered pattern tables, directory walk,
compiler diagnostics and the aggregate report.
"""

from docs_observatory.debt.classifier import (
    DebtReport,
    TechnicalDebtClassifier,
    classify_duplicates,
    classify_legacy,
    find_suppressions,
    prioritize,
)
from docs_observatory.debt.diagnostics import (
    categorize_error,
    classify_severity,
    estimate_error_distribution,
    parse_diagnostics,
    read_error_count,
)
from docs_observatory.debt.patterns import DUPLICATE_RULES, LEGACY_RULES, PatternRule, first_match
from docs_observatory.debt.scanner import CancellationToken, walk_files

__all__ = [
    "CancellationToken",
    "DUPLICATE_RULES",
    "DebtReport",
    "LEGACY_RULES",
    "PatternRule",
    "TechnicalDebtClassifier",
    "categorize_error",
    "classify_duplicates",
    "classify_legacy",
    "classify_severity",
    "estimate_error_distribution",
    "find_suppressions",
    "first_match",
    "parse_diagnostics",
    "prioritize",
    "read_error_count",
    "walk_files",
]
