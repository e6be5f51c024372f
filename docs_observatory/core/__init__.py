"""
Core Infrastructure - Logging and Configuration

Usage:
    from docs_observatory.core import get_config, get_logger, setup_logging

    logger = get_logger(__name__)
    paths = get_config().get_paths_config()
"""

from docs_observatory.core.logging_config import get_logger, setup_logging
from docs_observatory.secure_config import ConfigurationError, SecureConfig, get_config

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Configuration
    "get_config",
    "SecureConfig",
    "ConfigurationError",
]
