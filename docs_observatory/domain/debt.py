"""
Technical debt domain models

Represents identified debt items and the aggregate report of one scan.
The set of items is rebuilt from scratch on every run.
"""

from dataclasses import dataclass, field
from typing import Any

# Item types
TYPESCRIPT_ERROR = "typescript-error"
TYPESCRIPT_SUPPRESSION = "typescript-suppression"
DUPLICATE_FILE = "duplicate-file"
LEGACY_FILE = "legacy-file"

DEBT_TYPES = (TYPESCRIPT_ERROR, TYPESCRIPT_SUPPRESSION, DUPLICATE_FILE, LEGACY_FILE)

# Severity rank: lower sorts first
SEVERITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}
SEVERITIES = tuple(SEVERITY_ORDER)

# Effort in hours by severity for compiler diagnostics
EFFORT_BY_SEVERITY = {"critical": 8.0, "high": 4.0, "medium": 2.0, "low": 1.0}


@dataclass
class DebtItem:
    """
    A single identified unit of technical debt.

    Attributes:
        id: Per-run identifier ("ts-3", "suppression-1", "duplicate-2", ...)
        type: One of DEBT_TYPES
        severity: critical | high | medium | low
        file: Path relative to the scanned root
        category: Pattern or keyword category that classified the item
        estimated_effort: Remediation estimate in hours
        line / column: 1-based location when known
        remediation_plan: Suggested action
        estimated: True for items synthesized from an aggregate count
    """

    id: str
    type: str
    severity: str
    file: str
    category: str
    estimated_effort: float
    line: int | None = None
    column: int | None = None
    remediation_plan: str | None = None
    status: str = "identified"
    error_code: str | None = None
    message: str | None = None
    suppression: str | None = None
    content: str | None = None
    context: list[str] = field(default_factory=list)
    estimated: bool = False

    def __post_init__(self) -> None:
        if self.severity not in SEVERITY_ORDER:
            raise ValueError(f"Unknown severity: {self.severity}")
        if self.type not in DEBT_TYPES:
            raise ValueError(f"Unknown debt item type: {self.type}")

    @property
    def severity_rank(self) -> int:
        return SEVERITY_ORDER[self.severity]

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}" if self.line else self.file

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "severity": self.severity,
            "file": self.file,
            "category": self.category,
            "estimatedEffort": self.estimated_effort,
            "status": self.status,
        }
        optional = {
            "line": self.line,
            "column": self.column,
            "remediationPlan": self.remediation_plan,
            "errorCode": self.error_code,
            "message": self.message,
            "suppression": self.suppression,
            "content": self.content,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        if self.context:
            data["context"] = list(self.context)
        if self.estimated:
            data["estimated"] = True
        return data


@dataclass
class DebtSummary:
    """Counts per severity for one scan."""

    total_items: int = 0
    critical_items: int = 0
    high_priority_items: int = 0
    medium_priority_items: int = 0
    low_priority_items: int = 0

    @classmethod
    def from_items(cls, items: list[DebtItem]) -> "DebtSummary":
        counts = {severity: 0 for severity in SEVERITIES}
        for item in items:
            counts[item.severity] += 1
        return cls(
            total_items=len(items),
            critical_items=counts["critical"],
            high_priority_items=counts["high"],
            medium_priority_items=counts["medium"],
            low_priority_items=counts["low"],
        )

    def percentage(self, count: int) -> float:
        return (count / self.total_items * 100) if self.total_items else 0.0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalItems": self.total_items,
            "criticalItems": self.critical_items,
            "highPriorityItems": self.high_priority_items,
            "mediumPriorityItems": self.medium_priority_items,
            "lowPriorityItems": self.low_priority_items,
        }
