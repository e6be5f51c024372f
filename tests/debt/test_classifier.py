"""
Tests for the Technical Debt Classifier

Run with:
    pytest tests/debt/test_classifier.py -v
"""

from unittest.mock import MagicMock

import pytest

from docs_observatory.debt.classifier import (
    DebtReport,
    TechnicalDebtClassifier,
    classify_duplicates,
    classify_legacy,
    find_suppressions,
    prioritize,
)
from docs_observatory.debt.scanner import CancellationToken
from docs_observatory.domain.debt import DUPLICATE_FILE, LEGACY_FILE, TYPESCRIPT_SUPPRESSION, DebtItem
from docs_observatory.exceptions import ScanCancelled, ScanLimitExceeded
from docs_observatory.secure_config import DebtScanConfig

DIAGNOSTICS = "src/app.ts:1:1 - error TS2307: Cannot find module 'x'.\n"


def _touch(root, relative: str, content: str = "") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _item(item_id: str, severity: str, effort: float) -> DebtItem:
    return DebtItem(
        id=item_id,
        type=LEGACY_FILE,
        severity=severity,
        file=f"{item_id}.js",
        category="debug-file",
        estimated_effort=effort,
    )


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    _touch(root, "report_backup.md")
    _touch(root, "report.bak")
    _touch(root, "src/app.ts", "// @ts-nocheck\nconst a = 1;\n")
    _touch(root, "src/components/Card.tsx", "// @ts-ignore\nfoo();\n  // @ts-expect-error legacy\nbar();\n")
    _touch(root, "src/lib/util.js", "// @ts-ignore\n")
    _touch(root, "scripts/debug-auth.js")
    _touch(root, "node_modules/pkg/report_backup.md")
    return root


# ============================================================================
# File-tree classification
# ============================================================================


class TestClassifyDuplicates:
    """Tests for duplicate/backup detection"""

    def test_backup_name_and_bak_extension(self):
        items = classify_duplicates(["report_backup.md", "report.bak", "src/app.ts"])

        assert [(item.file, item.category) for item in items] == [
            ("report_backup.md", "backup-name"),
            ("report.bak", "bak-extension"),
        ]
        assert {item.severity for item in items} == {"low"}
        assert {item.type for item in items} == {DUPLICATE_FILE}
        assert [item.id for item in items] == ["duplicate-1", "duplicate-2"]


class TestClassifyLegacy:
    """Tests for legacy/temporary detection"""

    def test_category_drives_severity_and_effort(self):
        items = classify_legacy(["scripts/test-login.js", "tododoc/plan.md", "src/app.ts"])

        assert [(item.category, item.severity, item.estimated_effort) for item in items] == [
            ("test-file", "high", 2.0),
            ("legacy-docs", "medium", 4.0),
        ]
        assert items[0].remediation_plan == "Convert to proper tests or remove"


class TestFindSuppressions:
    """Tests for suppression marker scanning"""

    def test_one_item_per_marker_occurrence(self, project):
        items = find_suppressions(project, "src")

        assert [(item.location, item.suppression) for item in items] == [
            ("src/app.ts:1", "// @ts-nocheck"),
            ("src/components/Card.tsx:1", "// @ts-ignore"),
            ("src/components/Card.tsx:3", "// @ts-expect-error"),
        ]
        assert items[2].content == "// @ts-expect-error legacy"
        assert {item.type for item in items} == {TYPESCRIPT_SUPPRESSION}
        assert {item.severity for item in items} == {"medium"}

    def test_missing_source_dir(self, project):
        assert find_suppressions(project, "app") == []

    def test_unreadable_file_is_skipped(self, project):
        (project / "src" / "binary.ts").write_bytes(b"\xff\xfe\x00// @ts-ignore")

        items = find_suppressions(project, "src")

        assert len(items) == 3


class TestPrioritize:
    """Tests for severity-then-effort ordering"""

    def test_critical_first_then_cheapest(self):
        items = [_item("a", "low", 0.5), _item("b", "high", 4), _item("c", "critical", 8), _item("d", "high", 1)]
        assert [item.id for item in prioritize(items)] == ["c", "d", "b", "a"]

    def test_stable_for_equal_keys(self):
        items = [_item("first", "medium", 2), _item("second", "medium", 2)]
        assert [item.id for item in prioritize(items)] == ["first", "second"]


# ============================================================================
# Full classification
# ============================================================================


class TestTechnicalDebtClassifier:
    """Tests for the aggregate scan"""

    def test_file_tree_scan(self, project, clock):
        config = DebtScanConfig(project_root=project)

        report = TechnicalDebtClassifier(config, clock=clock).classify()

        assert [(d.file, d.category) for d in report.duplicates] == [
            ("report.bak", "bak-extension"),
            ("report_backup.md", "backup-name"),
        ]
        assert [item.file for item in report.legacy] == ["scripts/debug-auth.js"]
        assert len(report.suppressions) == 3
        assert report.errors == []
        assert report.generated_at == clock.now

    def test_summary_and_effort(self, project, clock):
        report = TechnicalDebtClassifier(DebtScanConfig(project_root=project), clock=clock).classify()

        # 2 duplicates (low, 0.5h), 1 debug file (high, 1h), 3 suppressions (medium, 2h)
        assert report.summary.total_items == 6
        assert report.summary.high_priority_items == 1
        assert report.summary.medium_priority_items == 3
        assert report.summary.low_priority_items == 2
        assert report.total_effort == 8.0
        assert report.prioritized[0].file == "scripts/debug-auth.js"

    def test_status_file_count_produces_estimated_errors(self, project, clock):
        status_file = project / "TYPE_CHECK_STATUS.md"
        status_file.write_text("Total de errores: 10 (supabase)\n", encoding="utf-8")
        runner = MagicMock()

        report = TechnicalDebtClassifier(
            DebtScanConfig(project_root=project, status_file=status_file, type_check_command=("tsc",)),
            clock=clock,
            type_check_runner=runner,
        ).classify()

        runner.assert_not_called()
        assert report.total_errors == 10
        assert report.errors_estimated is True
        assert len(report.errors) == 10

    def test_checker_output_is_parsed_without_status_count(self, project, clock):
        runner = MagicMock(return_value=DIAGNOSTICS)

        report = TechnicalDebtClassifier(
            DebtScanConfig(project_root=project, type_check_command=("npx", "tsc", "--noEmit")),
            clock=clock,
            type_check_runner=runner,
        ).classify()

        runner.assert_called_once_with(("npx", "tsc", "--noEmit"), project)
        assert report.total_errors == 1
        assert report.errors_estimated is False
        assert report.prioritized[0].severity == "critical"
        assert report.recommendations[0].type == "critical_errors"

    def test_cancelled_scan(self, project):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(ScanCancelled):
            TechnicalDebtClassifier(DebtScanConfig(project_root=project), cancel=token).classify()

    def test_file_limit(self, project):
        with pytest.raises(ScanLimitExceeded):
            TechnicalDebtClassifier(DebtScanConfig(project_root=project, max_files=2)).classify()


class TestDebtReport:
    """Tests for the persisted report shape"""

    def test_to_dict_shape(self, project, clock):
        report = TechnicalDebtClassifier(DebtScanConfig(project_root=project), clock=clock).classify()

        data = report.to_dict()

        assert data["generatedAt"] == "2026-02-10T10:00:00.000Z"
        assert data["summary"]["totalItems"] == 6
        assert data["categories"]["typescript"]["totalErrors"] == 0
        assert len(data["categories"]["typescript"]["suppressions"]) == 3
        assert len(data["categories"]["duplicateFiles"]) == 2
        assert len(data["categories"]["legacyFiles"]) == 1
        assert len(data["prioritizedTasks"]) == 6
        assert data["estimatedEffort"] == 8.0
        assert [r["type"] for r in data["recommendations"]] == [
            "legacy_cleanup",
            "suppressions",
            "duplicate_cleanup",
        ]

    def test_empty_report(self, clock):
        report = DebtReport.build(clock(), [], 0, False, [], [], [])
        assert report.summary.total_items == 0
        assert report.recommendations == []
