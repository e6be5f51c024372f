"""
Shared fixtures for the observatory test suite.
"""

import logging
from datetime import UTC, datetime, timedelta

import pytest

from docs_observatory.core.logging_config import ContextFormatter, JSONFormatter
from docs_observatory.domain.constants import default_kpi_config, default_onboarding_config
from docs_observatory.domain.metrics import MetricDefinition, MetricThresholds
from docs_observatory.kpi.catalog import KPICatalog
from docs_observatory.onboarding.config import OnboardingConfig
from docs_observatory.secure_config import PathsConfig, reset_config

OBSERVATORY_ENV_VARS = (
    "OBSERVATORY_METRICS_DIR",
    "OBSERVATORY_DOC_METRICS_FILE",
    "OBSERVATORY_PROJECT_ROOT",
    "OBSERVATORY_SOURCE_DIR",
    "OBSERVATORY_TYPE_CHECK_STATUS_FILE",
    "OBSERVATORY_TYPE_CHECK_CMD",
    "OBSERVATORY_SCAN_MAX_FILES",
    "LOG_LEVEL",
    "LOG_JSON",
    "LOG_FILE",
)

START = datetime(2026, 2, 10, 10, 0, tzinfo=UTC)


class FakeClock:
    """Returns a fixed time until ``advance`` moves it forward."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Clear observatory env vars and drop handlers installed by setup_logging()."""
    for name in OBSERVATORY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, (JSONFormatter, ContextFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    reset_config()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kpi_catalog():
    return KPICatalog.from_dict(default_kpi_config())


@pytest.fixture
def onboarding_config():
    return OnboardingConfig.from_dict(default_onboarding_config())


@pytest.fixture
def coverage_metric():
    """Higher-is-better metric from the default catalog."""
    return MetricDefinition(
        id="documentation_coverage",
        name="Documentation Coverage",
        target=85,
        thresholds=MetricThresholds(excellent=90, good=80, warning=70, critical=60),
        unit="%",
        category="coverage",
    )


@pytest.fixture
def onboarding_time_metric():
    """Lower-is-better metric from the default catalog."""
    return MetricDefinition(
        id="average_onboarding_time",
        name="Average Onboarding Time",
        target=180,
        thresholds=MetricThresholds(excellent=150, good=180, warning=240, critical=300),
        unit="minutes",
        category="onboarding",
        lower_is_better=True,
    )


@pytest.fixture
def metrics_dir(tmp_path):
    directory = tmp_path / "metrics"
    directory.mkdir()
    return directory


@pytest.fixture
def paths_config(metrics_dir):
    return PathsConfig(
        metrics_dir=metrics_dir,
        documentation_metrics_file=metrics_dir / "documentation-metrics.json",
    )
