"""
Tests for the docs-debt CLI
"""

import json

import pytest

from docs_observatory.technical_debt_analysis import JSON_REPORT, MARKDOWN_REPORT, main


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.ts").write_text("// @ts-ignore\nconst a = 1;\n", encoding="utf-8")
    (root / "report_backup.md").write_text("", encoding="utf-8")
    (root / "report.bak").write_text("", encoding="utf-8")
    return root


def _report(directory):
    return json.loads((directory / JSON_REPORT).read_text(encoding="utf-8"))


class TestMain:
    """Tests for the docs-debt entry point"""

    def test_writes_reports_to_project_root(self, project, capsys):
        assert main(["--root", str(project)]) == 0

        report = _report(project)
        assert [item["category"] for item in report["categories"]["duplicateFiles"]] == [
            "bak-extension",
            "backup-name",
        ]
        assert len(report["categories"]["typescript"]["suppressions"]) == 1
        assert report["summary"]["totalItems"] == 3
        assert (project / MARKDOWN_REPORT).exists()

        out = capsys.readouterr().out
        assert "Total items: 3" in out
        assert "Technical debt analysis complete" in out

    def test_status_file_count_is_estimated(self, project):
        (project / "TYPE_CHECK_STATUS.md").write_text("# Status\n\nTotal errors: 3\n", encoding="utf-8")

        assert main(["--root", str(project)]) == 0

        typescript = _report(project)["categories"]["typescript"]
        assert typescript["totalErrors"] == 3
        assert typescript["estimated"] is True
        assert {error["category"] for error in typescript["errors"]} == {"general"}

    def test_output_dir_is_created(self, project, tmp_path):
        output_dir = tmp_path / "reports" / "debt"

        assert main(["--root", str(project), "--output-dir", str(output_dir)]) == 0

        assert (output_dir / JSON_REPORT).exists()
        assert (output_dir / MARKDOWN_REPORT).exists()
        assert not (project / JSON_REPORT).exists()

    def test_missing_root_is_configuration_error(self, tmp_path, capsys):
        assert main(["--root", str(tmp_path / "missing")]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_file_limit_fails_scan(self, project, capsys):
        assert main(["--root", str(project), "--max-files", "1"]) == 1

        assert "Error:" in capsys.readouterr().err
        assert not (project / JSON_REPORT).exists()

    def test_invalid_max_files(self, project):
        assert main(["--root", str(project), "--max-files", "0"]) == 2

    def test_zero_timeout_cancels_scan(self, project, capsys):
        assert main(["--root", str(project), "--timeout", "0"]) == 1

        assert "cancelled" in capsys.readouterr().err
        assert not (project / JSON_REPORT).exists()

    def test_empty_type_check_command_from_environment(self, project, monkeypatch):
        monkeypatch.setenv("OBSERVATORY_TYPE_CHECK_CMD", "")

        assert main(["--root", str(project)]) == 0
        assert _report(project)["categories"]["typescript"]["totalErrors"] == 0
