"""
Bounded directory walk

Yields file paths relative to the scan root, pruning excluded and hidden
directories. Long walks can be cancelled from another thread or bounded by
a deadline and a file-count limit.
"""

import os
import threading
import time
from collections.abc import Collection, Iterator
from pathlib import Path

from docs_observatory.core.logging_config import get_logger
from docs_observatory.exceptions import ScanCancelled, ScanLimitExceeded

logger = get_logger(__name__)

DEFAULT_EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        ".next",
        "dist",
        "build",
        ".vscode",
        ".husky",
        "__pycache__",
        ".venv",
    }
)

# Hidden directories that are still scanned
DEFAULT_ALLOWED_HIDDEN_DIRS = frozenset({".kiro"})


class CancellationToken:
    """
    Cooperative cancellation for a directory walk.

    Args:
        timeout: Optional seconds after which the token counts as cancelled
    """

    def __init__(self, timeout: float | None = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ScanCancelled("Directory scan was cancelled")


def _keep_dir(name: str, excluded_dirs: Collection[str], allowed_hidden: Collection[str]) -> bool:
    if name in excluded_dirs:
        return False
    return not name.startswith(".") or name in allowed_hidden


def walk_files(
    root: str | Path,
    excluded_dirs: Collection[str] = DEFAULT_EXCLUDED_DIRS,
    cancel: CancellationToken | None = None,
    max_files: int | None = None,
    allowed_hidden: Collection[str] = DEFAULT_ALLOWED_HIDDEN_DIRS,
) -> Iterator[str]:
    """
    Walk ``root`` depth-first, yielding ``/``-separated paths relative to it.

    Entries are visited in sorted order. Unreadable directories are logged
    and skipped.

    Raises:
        ScanCancelled: If ``cancel`` fires during the walk
        ScanLimitExceeded: If more than ``max_files`` files are found
    """
    root_path = Path(root)
    count = 0

    def on_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable directory: {error}", extra={"path": str(error.filename)})

    for current, dirs, files in os.walk(root_path, onerror=on_error):
        if cancel is not None:
            cancel.raise_if_cancelled()

        dirs[:] = sorted(d for d in dirs if _keep_dir(d, excluded_dirs, allowed_hidden))
        rel_dir = Path(current).relative_to(root_path)

        for name in sorted(files):
            count += 1
            if max_files is not None and count > max_files:
                raise ScanLimitExceeded(f"Scan of {root_path} exceeded {max_files} files")
            yield (rel_dir / name).as_posix()
