"""
Ordered classification tables for file-tree debt.

Each table is a list of (pattern, category) rules evaluated top to bottom;
the first matching rule classifies the path and later rules are never
consulted. Paths are matched relative to the scan root with ``/``
separators.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class PatternRule:
    pattern: re.Pattern[str]
    category: str

    @classmethod
    def compile(cls, pattern: str, category: str) -> "PatternRule":
        return cls(pattern=re.compile(pattern), category=category)

    def matches(self, path: str) -> bool:
        return self.pattern.search(path) is not None


def first_match(rules: Sequence[PatternRule], path: str) -> PatternRule | None:
    """Return the first rule whose pattern matches ``path``, or None."""
    for rule in rules:
        if rule.matches(path):
            return rule
    return None


# ---------------------------------------------------------------------------
# Duplicate / backup files
# ---------------------------------------------------------------------------

DUPLICATE_RULES: list[PatternRule] = [
    PatternRule.compile(r"\.backup$", "backup-extension"),
    PatternRule.compile(r"_backup$", "backup-suffix"),
    PatternRule.compile(r"backup", "backup-name"),
    PatternRule.compile(r"\.bak$", "bak-extension"),
    PatternRule.compile(r"_old", "old-suffix"),
    PatternRule.compile(r"_copy", "copy-suffix"),
    PatternRule.compile(r" - copia", "spanish-copy"),
    PatternRule.compile(r" - copy", "copy-name"),
    PatternRule.compile(r"2\.", "version-number"),
]

DUPLICATE_SEVERITY = "low"
DUPLICATE_EFFORT = 0.5
DUPLICATE_REMEDIATION = "Review and remove or move to archive"


# ---------------------------------------------------------------------------
# Legacy / temporary files
# ---------------------------------------------------------------------------

LEGACY_RULES: list[PatternRule] = [
    PatternRule.compile(r"tododoc", "legacy-docs"),
    PatternRule.compile(r"migrations_backup", "migration-backup"),
    PatternRule.compile(r"migrations_disabled", "disabled-migration"),
    PatternRule.compile(r"\.temp", "temp-directory"),
    PatternRule.compile(r"debug-", "debug-file"),
    PatternRule.compile(r"test-", "test-file"),
    PatternRule.compile(r"verify-", "verification-file"),
    PatternRule.compile(r"fix-", "fix-script"),
    PatternRule.compile(r"reset-", "reset-script"),
    PatternRule.compile(r"force-", "force-script"),
]

LEGACY_SEVERITY = {
    "debug-file": "high",
    "test-file": "high",
    "temp-directory": "high",
    "legacy-docs": "medium",
    "migration-backup": "medium",
}

LEGACY_EFFORT = {
    "legacy-docs": 4.0,
    "migration-backup": 2.0,
    "disabled-migration": 1.0,
    "temp-directory": 0.5,
    "debug-file": 1.0,
    "test-file": 2.0,
    "verification-file": 1.0,
    "fix-script": 2.0,
    "reset-script": 1.0,
    "force-script": 1.0,
}

LEGACY_REMEDIATION = {
    "legacy-docs": "Review content, consolidate useful information, archive rest",
    "migration-backup": "Verify current migrations work, then archive backups",
    "disabled-migration": "Review if needed, remove if obsolete",
    "temp-directory": "Clean up temporary files",
    "debug-file": "Review if still needed for debugging, remove if obsolete",
    "test-file": "Convert to proper tests or remove",
    "verification-file": "Review if verification is still needed",
    "fix-script": "Review if fix is still needed, integrate or remove",
    "reset-script": "Review if reset functionality is needed",
    "force-script": "Review necessity, document or remove",
}

DEFAULT_LEGACY_SEVERITY = "low"
DEFAULT_LEGACY_EFFORT = 1.0
DEFAULT_LEGACY_REMEDIATION = "Review and determine if file is still needed"


def legacy_severity(category: str) -> str:
    return LEGACY_SEVERITY.get(category, DEFAULT_LEGACY_SEVERITY)


def legacy_effort(category: str) -> float:
    return LEGACY_EFFORT.get(category, DEFAULT_LEGACY_EFFORT)


def legacy_remediation(category: str) -> str:
    return LEGACY_REMEDIATION.get(category, DEFAULT_LEGACY_REMEDIATION)


# ---------------------------------------------------------------------------
# Type-check suppressions
# ---------------------------------------------------------------------------

SUPPRESSION_MARKERS = ("// @ts-nocheck", "// @ts-ignore", "// @ts-expect-error")
SUPPRESSION_EXTENSIONS = (".ts", ".tsx")
SUPPRESSION_SEVERITY = "medium"
SUPPRESSION_EFFORT = 2.0
