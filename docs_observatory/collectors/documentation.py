"""
Documentation metrics collaborator adapter

The documentation scanner (coverage, link checking, freshness) is a separate
tool; this module only reads the report it leaves behind and turns it into a
DocumentationSnapshot. Missing or unreadable reports yield an empty snapshot
so the KPI pipeline records ``no_data`` instead of failing.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docs_observatory.core.logging_config import get_logger
from docs_observatory.utils.formatting import to_number

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentationSnapshot:
    """
    The subset of the documentation-metrics report the pipeline consumes.

    Attributes:
        total_doc_files: Number of documentation files scanned
        coverage_percentage: Share of source files with documentation
        quality_score: Aggregate quality score (0-100)
        broken_links: Number of broken internal links
        stale_docs: Paths of documents not updated in 90+ days
        recent_updates: Paths of documents updated in the last 7 days

    A field is None when the report did not provide it.
    """

    total_doc_files: float | None = None
    coverage_percentage: float | None = None
    quality_score: float | None = None
    broken_links: float | None = None
    stale_docs: tuple[str, ...] = field(default_factory=tuple)
    recent_updates: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return self.total_doc_files is None and self.coverage_percentage is None and self.quality_score is None

    @property
    def stale_percentage(self) -> float:
        """Stale documents as a percentage of all documents, rounded to 2 places (0 without docs)."""
        if not self.total_doc_files:
            return 0.0
        return round(len(self.stale_docs) / self.total_doc_files * 100, 2)

    @classmethod
    def from_report(cls, report: Mapping[str, Any]) -> "DocumentationSnapshot":
        summary = report.get("summary") or {}
        detailed = report.get("detailed") or {}
        coverage = detailed.get("coverage") or {}
        quality = detailed.get("quality") or {}
        maintenance = detailed.get("maintenance") or {}

        return cls(
            total_doc_files=to_number(summary.get("totalDocFiles")),
            coverage_percentage=to_number(coverage.get("coveragePercentage", summary.get("coveragePercentage"))),
            quality_score=to_number(quality.get("qualityScore", summary.get("qualityScore"))),
            broken_links=to_number(quality.get("brokenLinks")),
            stale_docs=_paths(maintenance.get("staleDocs")),
            recent_updates=_paths(maintenance.get("recentUpdates")),
        )


def _paths(entries: Any) -> tuple[str, ...]:
    # Entries are either plain paths or {"file": ..., ...} records
    if not isinstance(entries, list):
        return ()
    paths = []
    for entry in entries:
        if isinstance(entry, Mapping):
            paths.append(str(entry.get("file") or entry.get("path") or ""))
        else:
            paths.append(str(entry))
    return tuple(paths)


class DocumentationMetricsSource:
    """Reads the documentation-metrics report JSON."""

    def __init__(self, report_file: str | Path):
        """
        Args:
            report_file: Path of the documentation-metrics report
        """
        self.report_file = Path(report_file)

    def load(self) -> DocumentationSnapshot:
        """
        Load the latest report.

        Returns:
            DocumentationSnapshot; empty when the report is missing or invalid
        """
        if not self.report_file.exists():
            logger.warning(
                "Documentation metrics report not found - documentation KPIs will have no data",
                extra={"path": str(self.report_file)},
            )
            return DocumentationSnapshot()

        try:
            with open(self.report_file, encoding="utf-8") as f:
                report = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(
                f"Documentation metrics report is unreadable: {e}",
                extra={"path": str(self.report_file)},
            )
            return DocumentationSnapshot()

        if not isinstance(report, dict):
            logger.warning("Documentation metrics report is not a JSON object", extra={"path": str(self.report_file)})
            return DocumentationSnapshot()

        snapshot = DocumentationSnapshot.from_report(report)
        logger.info(
            "Loaded documentation metrics",
            extra={"path": str(self.report_file), "total_doc_files": snapshot.total_doc_files},
        )
        return snapshot
