"""
Per-item failure logging for batch runs.

The observatory processes batches (catalog metrics, stored snapshots, source
files). One bad entry is logged with structured context and skipped; the
batch carries on. Structural failures are not handled here: they propagate
to the CLI, which maps them to an exit code.
"""

import logging
from typing import Any


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Record a skipped batch item as a warning.

    Args:
        logger: Module logger from get_logger(__name__)
        error: The exception that made the item unusable
        context: What was being processed (metric_id, index, path, ...)
        error_type: Short label for the step, e.g. ``"Loading stored alert"``

    Example:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            log_and_continue(logger, e, {"path": str(path)}, "Suppression scan")
            continue
    """
    logger.warning(
        f"{error_type} skipped an item: {error}",
        extra={
            "error_type": error_type,
            "exception_class": type(error).__name__,
            "context": context,
        },
    )
