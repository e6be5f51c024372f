#!/usr/bin/env python3
"""
Utility functions for atomic JSON file operations.

Prevents corruption by ensuring store files are never left in a half-written
state, serializes overlapping runs with an advisory lock file, and recovers
from corrupt files by backing them up and re-initializing with defaults.
"""

import json
import os
import platform
import tempfile
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

from docs_observatory.core.logging_config import get_logger
from docs_observatory.exceptions import LockAcquisitionError, StoreError

logger = get_logger(__name__)


def atomic_json_save(data: dict, output_file: str | Path) -> bool:
    """
    Save JSON data to file using atomic write operations.

    1. Write to a temporary file in the same directory
    2. Validate the JSON is readable
    3. Atomically replace the target file

    Args:
        data: Dictionary to save as JSON
        output_file: Target file path

    Returns:
        True if save succeeded

    Raises:
        OSError, TypeError: If the data cannot be written or serialized
    """
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=output_path.parent, text=True)

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        with open(temp_path, encoding="utf-8") as f:
            json.load(f)

        os.replace(temp_path, output_path)
        return True

    except Exception:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def backup_corrupt_file(file_path: str | Path) -> Path:
    """
    Move a corrupt file aside as ``<name>.corrupt-<UTC stamp>``.

    Returns:
        Path of the backup file
    """
    path = Path(file_path)
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
    backup_path = path.with_name(f"{path.name}.corrupt-{stamp}")
    os.replace(path, backup_path)
    return backup_path


def load_json_with_recovery(
    file_path: str | Path,
    default_factory: Callable[[], dict[str, Any]],
    validator: Callable[[dict[str, Any]], bool] | None = None,
) -> dict[str, Any]:
    """
    Load a JSON store, initializing or recovering it when needed.

    - Missing file: defaults are written and returned.
    - Corrupt file (unparsable, not an object, or rejected by ``validator``):
      the file is backed up next to the original, defaults are written and
      returned, and a warning is logged.

    Args:
        file_path: Path to JSON file
        default_factory: Builds the default content
        validator: Optional shape check for the loaded object

    Returns:
        Loaded JSON data or freshly written defaults

    Raises:
        StoreError: If defaults cannot be written
    """
    path = Path(file_path)

    if not path.exists():
        data = default_factory()
        _write_defaults(data, path)
        logger.info("Initialized store with defaults", extra={"path": str(path)})
        return data

    try:
        with open(path, encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"expected a JSON object, got {type(loaded).__name__}")
        if validator is not None and not validator(loaded):
            raise ValueError("store content failed validation")
        return loaded

    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        backup_path = backup_corrupt_file(path)
        logger.warning(
            f"Store file is corrupted ({e}) - backed up and re-initialized",
            extra={"path": str(path), "backup_path": str(backup_path)},
        )
        data = default_factory()
        _write_defaults(data, path)
        return data


def _write_defaults(data: dict[str, Any], path: Path) -> None:
    try:
        atomic_json_save(data, path)
    except (OSError, TypeError) as e:
        raise StoreError(f"Cannot initialize store {path}: {e}") from e


@contextmanager
def file_lock(target: str | Path, timeout: float = 10.0, poll_interval: float = 0.1) -> Iterator[None]:
    """
    Hold an exclusive advisory lock on ``<target>.lock`` for the block.

    Serializes read-modify-write cycles of overlapping scheduled runs.

    Args:
        target: Store file the lock protects
        timeout: Seconds to wait for the lock
        poll_interval: Seconds between attempts

    Raises:
        LockAcquisitionError: If the lock is still held after ``timeout``
    """
    lock_path = Path(f"{target}.lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)

    with open(lock_path, "a+", encoding="utf-8") as handle:
        deadline = time.monotonic() + timeout
        while True:
            try:
                _try_lock(handle)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise LockAcquisitionError(f"Lock is held by another process: {lock_path}") from None
                time.sleep(poll_interval)

        logger.debug("Acquired store lock", extra={"lock_path": str(lock_path)})
        try:
            yield
        finally:
            _unlock(handle)
            logger.debug("Released store lock", extra={"lock_path": str(lock_path)})


def _try_lock(handle: TextIO) -> None:
    """Non-blocking exclusive lock; raises BlockingIOError when held elsewhere."""
    if platform.system() == "Windows":
        import msvcrt

        try:
            handle.seek(0)
            msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
        except OSError as e:
            if e.errno in (13, 36):
                raise BlockingIOError(str(e)) from e
            raise
    else:
        import fcntl

        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock(handle: TextIO) -> None:
    if platform.system() == "Windows":
        import msvcrt

        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl

        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
