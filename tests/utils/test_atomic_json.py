"""
Tests for atomic JSON persistence and the store lock
"""

import json
import threading
import time

import pytest

from docs_observatory.exceptions import LockAcquisitionError
from docs_observatory.utils_atomic_json import (
    atomic_json_save,
    backup_corrupt_file,
    file_lock,
    load_json_with_recovery,
)


def _defaults():
    return {"items": []}


class TestAtomicJsonSave:
    """Tests for atomic writes"""

    def test_writes_readable_json(self, tmp_path):
        target = tmp_path / "nested" / "store.json"

        assert atomic_json_save({"name": "Documentación"}, target) is True
        assert json.loads(target.read_text(encoding="utf-8")) == {"name": "Documentación"}

    def test_replaces_existing_file(self, tmp_path):
        target = tmp_path / "store.json"
        atomic_json_save({"version": 1}, target)
        atomic_json_save({"version": 2}, target)

        assert json.loads(target.read_text(encoding="utf-8")) == {"version": 2}

    def test_unserializable_data_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "store.json"
        atomic_json_save({"version": 1}, target)

        with pytest.raises(TypeError):
            atomic_json_save({"bad": object()}, target)

        assert json.loads(target.read_text(encoding="utf-8")) == {"version": 1}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["store.json"]


class TestLoadJsonWithRecovery:
    """Tests for initialization and corruption recovery"""

    def test_missing_file_initialized(self, tmp_path):
        target = tmp_path / "store.json"

        assert load_json_with_recovery(target, _defaults) == {"items": []}
        assert target.exists()

    def test_valid_file_returned(self, tmp_path):
        target = tmp_path / "store.json"
        target.write_text('{"items": [1]}', encoding="utf-8")

        assert load_json_with_recovery(target, _defaults) == {"items": [1]}

    def test_corrupt_file_backed_up(self, tmp_path):
        target = tmp_path / "store.json"
        target.write_text("{oops", encoding="utf-8")

        assert load_json_with_recovery(target, _defaults) == {"items": []}

        backups = list(tmp_path.glob("store.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == "{oops"
        assert json.loads(target.read_text(encoding="utf-8")) == {"items": []}

    def test_validator_rejection_counts_as_corrupt(self, tmp_path):
        target = tmp_path / "store.json"
        target.write_text('{"items": "nope"}', encoding="utf-8")

        data = load_json_with_recovery(target, _defaults, lambda d: isinstance(d.get("items"), list))

        assert data == {"items": []}
        assert list(tmp_path.glob("store.json.corrupt-*"))

    def test_backup_name(self, tmp_path):
        target = tmp_path / "store.json"
        target.write_text("x", encoding="utf-8")

        backup = backup_corrupt_file(target)

        assert backup.name.startswith("store.json.corrupt-")
        assert not target.exists()


class TestFileLock:
    """Tests for the advisory store lock"""

    def test_lock_file_created_next_to_target(self, tmp_path):
        target = tmp_path / "store.json"
        with file_lock(target):
            assert (tmp_path / "store.json.lock").exists()

    def test_lock_is_reacquirable_after_release(self, tmp_path):
        target = tmp_path / "store.json"
        with file_lock(target):
            pass
        with file_lock(target, timeout=0.5):
            pass

    def test_held_lock_times_out(self, tmp_path):
        target = tmp_path / "store.json"
        with file_lock(target):
            with pytest.raises(LockAcquisitionError):
                with file_lock(target, timeout=0.2, poll_interval=0.05):
                    pass

    def test_waiter_acquires_after_release(self, tmp_path):
        target = tmp_path / "store.json"
        acquired = threading.Event()

        def waiter():
            with file_lock(target, timeout=5, poll_interval=0.01):
                acquired.set()

        with file_lock(target):
            thread = threading.Thread(target=waiter)
            thread.start()
            time.sleep(0.1)
            assert not acquired.is_set()

        thread.join(timeout=5)
        assert acquired.is_set()
