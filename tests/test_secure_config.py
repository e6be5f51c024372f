"""
Tests for environment-driven configuration
"""

from pathlib import Path

import pytest

from docs_observatory.exceptions import ConfigurationError
from docs_observatory.secure_config import DebtScanConfig, LoggingConfig, PathsConfig, get_config, reset_config


class TestPathsConfig:
    """Tests for store and report locations"""

    def test_default_metrics_dir(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        paths = get_config().get_paths_config()
        assert paths.metrics_dir == Path("docs/metrics")
        assert paths.kpi_data_file == Path("docs/metrics/kpi-data.json")
        assert paths.documentation_metrics_file == Path("docs/metrics/documentation-metrics.json")

    def test_environment_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OBSERVATORY_METRICS_DIR", str(tmp_path))
        monkeypatch.setenv("OBSERVATORY_DOC_METRICS_FILE", str(tmp_path / "doc.json"))

        paths = get_config().get_paths_config()

        assert paths.onboarding_data_file == tmp_path / "onboarding-data.json"
        assert paths.documentation_metrics_file == tmp_path / "doc.json"

    def test_argument_beats_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OBSERVATORY_METRICS_DIR", "/elsewhere")
        assert get_config().get_paths_config(tmp_path).metrics_dir == tmp_path

    def test_metrics_dir_must_be_directory(self, tmp_path):
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="not a directory"):
            PathsConfig(metrics_dir=not_a_dir, documentation_metrics_file=tmp_path / "doc.json")


class TestDebtScanConfig:
    """Tests for scan settings"""

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OBSERVATORY_PROJECT_ROOT", str(tmp_path))
        monkeypatch.setenv("OBSERVATORY_TYPE_CHECK_CMD", "npx tsc --noEmit")
        monkeypatch.setenv("OBSERVATORY_SCAN_MAX_FILES", "5000")

        config = get_config().get_debt_scan_config()

        assert config.project_root == tmp_path
        assert config.type_check_command == ("npx", "tsc", "--noEmit")
        assert config.max_files == 5000
        assert config.status_file == tmp_path / "TYPE_CHECK_STATUS.md"
        assert config.source_dir == "src"
        assert config.report_dir == tmp_path

    def test_empty_type_check_command_is_unset(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OBSERVATORY_TYPE_CHECK_CMD", "")

        config = get_config().get_debt_scan_config(project_root=tmp_path)

        assert config.type_check_command is None

    def test_output_dir(self, tmp_path):
        config = get_config().get_debt_scan_config(project_root=tmp_path, output_dir=tmp_path / "reports")
        assert config.report_dir == tmp_path / "reports"

    def test_missing_root(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not a directory"):
            DebtScanConfig(project_root=tmp_path / "missing")

    def test_invalid_max_files(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OBSERVATORY_SCAN_MAX_FILES", "lots")
        with pytest.raises(ConfigurationError, match="integer"):
            get_config().get_debt_scan_config(project_root=tmp_path)

    def test_non_positive_max_files(self, tmp_path):
        with pytest.raises(ConfigurationError, match="positive"):
            DebtScanConfig(project_root=tmp_path, max_files=0)


class TestLoggingConfig:
    """Tests for logging settings"""

    def test_defaults(self):
        config = get_config().get_logging_config()
        assert config == LoggingConfig(level="INFO", json_output=False, log_file=None)

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_JSON", "yes")
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "run.log"))

        config = get_config().get_logging_config()

        assert config.level == "debug"
        assert config.json_output is True
        assert config.log_file == tmp_path / "run.log"

    def test_invalid_level(self):
        with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
            LoggingConfig(level="LOUD")

    def test_invalid_boolean(self, monkeypatch):
        monkeypatch.setenv("LOG_JSON", "maybe")
        with pytest.raises(ConfigurationError, match="LOG_JSON"):
            get_config().get_logging_config()


class TestSingleton:
    def test_get_config_is_cached_until_reset(self):
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first
