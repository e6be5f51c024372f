"""
Secure Configuration Management

Provides centralized, validated configuration for the observatory.
Environment variables (optionally from a ``.env`` file) are read once at the
process boundary and turned into explicit config objects that are passed to
each component's constructor. Algorithmic modules never read files or
environment variables themselves.

Usage:
    from docs_observatory.secure_config import get_config

    config = get_config()
    paths = config.get_paths_config()
    print(paths.kpi_config_file)

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from docs_observatory.exceptions import ConfigurationError

__all__ = [
    "ConfigurationError",
    "DebtScanConfig",
    "LoggingConfig",
    "PathsConfig",
    "SecureConfig",
    "get_config",
    "reset_config",
]


@dataclass(frozen=True)
class PathsConfig:
    """
    Validated locations of the persisted stores and generated reports.
    """

    metrics_dir: Path
    documentation_metrics_file: Path

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        if not str(self.metrics_dir).strip():
            raise ConfigurationError("OBSERVATORY_METRICS_DIR must not be empty")
        if self.metrics_dir.exists() and not self.metrics_dir.is_dir():
            raise ConfigurationError(f"OBSERVATORY_METRICS_DIR is not a directory: {self.metrics_dir}")

    @property
    def kpi_config_file(self) -> Path:
        return self.metrics_dir / "kpi-config.json"

    @property
    def kpi_data_file(self) -> Path:
        return self.metrics_dir / "kpi-data.json"

    @property
    def kpi_dashboard_html(self) -> Path:
        return self.metrics_dir / "kpi-dashboard.html"

    @property
    def kpi_dashboard_markdown(self) -> Path:
        return self.metrics_dir / "kpi-dashboard.md"

    @property
    def onboarding_config_file(self) -> Path:
        return self.metrics_dir / "onboarding-config.json"

    @property
    def onboarding_data_file(self) -> Path:
        return self.metrics_dir / "onboarding-data.json"

    @property
    def onboarding_report_json(self) -> Path:
        return self.metrics_dir / "onboarding-report.json"

    @property
    def onboarding_report_markdown(self) -> Path:
        return self.metrics_dir / "onboarding-report.md"


@dataclass(frozen=True)
class DebtScanConfig:
    """
    Validated technical debt scan settings.
    """

    project_root: Path
    source_dir: str = "src"
    status_file: Path | None = None
    type_check_command: tuple[str, ...] | None = None
    max_files: int | None = None
    output_dir: Path | None = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        if not self.project_root.is_dir():
            raise ConfigurationError(f"OBSERVATORY_PROJECT_ROOT is not a directory: {self.project_root}")

        if self.max_files is not None and self.max_files < 1:
            raise ConfigurationError(f"OBSERVATORY_SCAN_MAX_FILES must be positive: {self.max_files}")

        if self.type_check_command is not None and not self.type_check_command:
            raise ConfigurationError("OBSERVATORY_TYPE_CHECK_CMD must not be empty when set")

    @property
    def report_dir(self) -> Path:
        return self.output_dir or self.project_root


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging settings for the CLIs.
    """

    level: str = "INFO"
    json_output: bool = False
    log_file: Path | None = None

    def __post_init__(self):
        if self.level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(f"LOG_LEVEL is invalid: {self.level}")


def _parse_bool(name: str, raw: str | None, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


class SecureConfig:
    """
    Centralized configuration manager.

    Loads and validates configuration from environment variables.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_paths_config(self, metrics_dir: str | Path | None = None) -> PathsConfig:
        """
        Get validated store/report locations.

        Args:
            metrics_dir: Optional override for OBSERVATORY_METRICS_DIR
        """
        directory = Path(metrics_dir or os.getenv("OBSERVATORY_METRICS_DIR", "docs/metrics"))
        doc_metrics = os.getenv("OBSERVATORY_DOC_METRICS_FILE")

        return PathsConfig(
            metrics_dir=directory,
            documentation_metrics_file=Path(doc_metrics) if doc_metrics else directory / "documentation-metrics.json",
        )

    def get_debt_scan_config(
        self,
        project_root: str | Path | None = None,
        source_dir: str | None = None,
        status_file: str | Path | None = None,
        type_check_command: str | None = None,
        max_files: int | None = None,
        output_dir: str | Path | None = None,
    ) -> DebtScanConfig:
        """
        Get validated debt scan settings; explicit arguments override the environment.
        """
        root = Path(project_root or os.getenv("OBSERVATORY_PROJECT_ROOT", "."))
        status = status_file or os.getenv("OBSERVATORY_TYPE_CHECK_STATUS_FILE", "TYPE_CHECK_STATUS.md")
        status_path = Path(status)
        if not status_path.is_absolute():
            status_path = root / status_path

        command = type_check_command or os.getenv("OBSERVATORY_TYPE_CHECK_CMD") or None
        limit = max_files if max_files is not None else _parse_int(
            "OBSERVATORY_SCAN_MAX_FILES", os.getenv("OBSERVATORY_SCAN_MAX_FILES")
        )

        return DebtScanConfig(
            project_root=root,
            source_dir=source_dir or os.getenv("OBSERVATORY_SOURCE_DIR", "src"),
            status_file=status_path,
            type_check_command=tuple(shlex.split(command)) if command is not None else None,
            max_files=limit,
            output_dir=Path(output_dir) if output_dir else None,
        )

    def get_logging_config(self) -> LoggingConfig:
        """
        Get validated logging settings (LOG_LEVEL, LOG_JSON, LOG_FILE).
        """
        log_file = os.getenv("LOG_FILE")
        return LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            json_output=_parse_bool("LOG_JSON", os.getenv("LOG_JSON"), False),
            log_file=Path(log_file) if log_file else None,
        )


_config_instance: SecureConfig | None = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration (used by tests after changing the environment)."""
    global _config_instance
    _config_instance = None
