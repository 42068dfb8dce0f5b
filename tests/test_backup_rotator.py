import json
import os
import time
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

from filedesk.core.backup_rotator import BackupRotator, format_timestamp
from filedesk.db.database import Database, init_or_upgrade_db
from filedesk.models.store import ExecuteResult

class FakeStore:
    def __init__(self, rows=None, fail=False):
        self.rows = rows or {}
        self.fail = fail
        self.statements = []

    def query(self, statement, params=()):
        self.statements.append(statement)
        if self.fail:
            raise RuntimeError("store offline")
        table = statement.rsplit(" ", 1)[-1]
        return self.rows.get(table, [])

    def execute(self, statement, params=()):
        return ExecuteResult(inserted_id=None, affected_count=0)

class StepClock:
    def __init__(self, start=datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc), step=timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self):
        value = self.current
        self.current += self.step
        return value

@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "autosave"

@pytest.fixture
def rotator(backup_dir):
    return BackupRotator(FakeStore(), str(backup_dir), retention=10, now=StepClock())

def _backup_names(backup_dir: Path):
    return sorted(p.name for p in backup_dir.glob("backup_*.json"))

def test_format_timestamp():
    moment = datetime(2026, 3, 4, 5, 6, 7, 891000, tzinfo=timezone.utc)
    assert format_timestamp(moment) == "2026-03-04T05:06:07.891Z"

def test_perform_backup_writes_snapshot(backup_dir):
    store = FakeStore(rows={"projects": [{"id": 1, "project_name": "Alpha"}]})
    rotator = BackupRotator(store, str(backup_dir), now=StepClock())

    info = rotator.perform_backup()

    assert info is not None
    assert info.name == "backup_2026-01-01T12-00-00-000Z.json"
    data = json.loads(Path(info.path).read_text(encoding="utf-8"))
    assert set(data) == {"projects", "files", "schedule", "settings", "timestamp"}
    assert data["projects"] == [{"id": 1, "project_name": "Alpha"}]
    assert data["files"] == []
    assert data["timestamp"] == "2026-01-01T12:00:00.000Z"
    assert store.statements == [
        "SELECT * FROM projects",
        "SELECT * FROM process_files",
        "SELECT * FROM schedule_nodes",
        "SELECT * FROM user_settings",
    ]

def test_eleven_ticks_keep_ten_most_recent(rotator, backup_dir):
    created = []
    for _ in range(11):
        created.append(rotator.perform_backup().name)

    remaining = _backup_names(backup_dir)
    assert len(remaining) == 10
    assert remaining == sorted(created[1:])
    assert created[0] not in remaining

def test_retention_ignores_other_files(rotator, backup_dir):
    backup_dir.mkdir(parents=True)
    (backup_dir / "notes.txt").write_text("keep me")
    (backup_dir / "backup_manual.bak").write_text("keep me too")

    for _ in range(12):
        rotator.perform_backup()

    assert len(_backup_names(backup_dir)) == 10
    assert (backup_dir / "notes.txt").exists()
    assert (backup_dir / "backup_manual.bak").exists()

def test_same_timestamp_gets_unique_names(backup_dir):
    fixed = datetime(2026, 1, 1, tzinfo=timezone.utc)
    rotator = BackupRotator(FakeStore(), str(backup_dir), now=lambda: fixed)

    first = rotator.perform_backup()
    second = rotator.perform_backup()

    assert first.name != second.name
    assert len(_backup_names(backup_dir)) == 2

def test_failed_snapshot_is_skipped(backup_dir):
    rotator = BackupRotator(FakeStore(fail=True), str(backup_dir), now=StepClock())

    assert rotator.perform_backup() is None
    assert not backup_dir.exists() or _backup_names(backup_dir) == []

def test_serialization_error_leaves_no_file(backup_dir):
    store = FakeStore(rows={"projects": [{"id": 1, "blob": b"\x00\x01"}]})
    rotator = BackupRotator(store, str(backup_dir), now=StepClock())

    assert rotator.perform_backup() is None
    assert not backup_dir.exists() or _backup_names(backup_dir) == []

def test_failed_snapshot_does_not_prune(backup_dir):
    good = BackupRotator(FakeStore(), str(backup_dir), retention=3, now=StepClock())
    for _ in range(3):
        good.perform_backup()

    bad = BackupRotator(FakeStore(fail=True), str(backup_dir), retention=1, now=StepClock())
    assert bad.perform_backup() is None
    assert len(_backup_names(backup_dir)) == 3

def test_cleanup_continues_after_delete_error(backup_dir):
    backup_dir.mkdir(parents=True)
    base = time.time() - 1000
    for i in range(5):
        p = backup_dir / f"backup_{i}.json"
        p.write_text("{}")
        os.utime(p, (base + i, base + i))

    rotator = BackupRotator(FakeStore(), str(backup_dir), retention=2)
    real_unlink = os.unlink

    def flaky_unlink(path):
        if os.path.basename(path) == "backup_2.json":
            raise PermissionError("locked")
        real_unlink(path)

    with patch("filedesk.core.backup_rotator.os.unlink", side_effect=flaky_unlink):
        deleted = rotator.cleanup_old_backups()

    assert deleted == 2
    assert _backup_names(backup_dir) == ["backup_2.json", "backup_3.json", "backup_4.json"]

def test_latest_backup_none_when_empty(backup_dir):
    rotator = BackupRotator(FakeStore(), str(backup_dir))
    assert rotator.get_latest_backup() is None
    backup_dir.mkdir(parents=True)
    assert rotator.get_latest_backup() is None

def test_latest_backup_after_tick(rotator):
    info = rotator.perform_backup()
    assert rotator.get_latest_backup() == info

    newer = rotator.perform_backup()
    assert rotator.get_latest_backup().name == newer.name
    assert [b.name for b in rotator.list_backups()] == [newer.name, info.name]

def test_backup_from_sqlite_store(tmp_path):
    db_path = init_or_upgrade_db(tmp_path / "state.db")
    db = Database(str(db_path))
    db.execute("INSERT INTO projects (project_code, project_name) VALUES (?, ?)", ("P-001", "Alpha"))
    db.execute("INSERT INTO user_settings (user_name) VALUES (?)", ("alice",))

    rotator = BackupRotator(db, str(tmp_path / "autosave"))
    info = rotator.perform_backup()
    data = rotator.load_backup(info)

    assert data["projects"][0]["project_code"] == "P-001"
    assert data["settings"][0]["user_name"] == "alice"
    assert data["files"] == []
    assert data["timestamp"].endswith("Z")

def test_start_stop_lifecycle(rotator):
    assert not rotator.is_running
    rotator.start()
    first_timer = rotator._timer
    assert rotator.is_running

    rotator.start()
    assert rotator.is_running
    assert rotator._timer is not first_timer
    assert not first_timer.is_alive()

    rotator.stop()
    assert not rotator.is_running
    rotator.stop()

def test_timer_ticks(backup_dir):
    rotator = BackupRotator(FakeStore(), str(backup_dir), interval=0.02, now=StepClock())
    rotator.start()
    try:
        deadline = time.time() + 5
        while rotator.get_latest_backup() is None and time.time() < deadline:
            time.sleep(0.01)
    finally:
        rotator.stop()

    assert rotator.get_latest_backup() is not None

def test_timer_survives_failed_tick(backup_dir):
    store = FakeStore(fail=True)
    rotator = BackupRotator(store, str(backup_dir), interval=0.01, now=StepClock())
    rotator.start()
    try:
        deadline = time.time() + 5
        while len(store.statements) < 2 and time.time() < deadline:
            time.sleep(0.01)
        assert rotator.is_running
        assert rotator._timer.is_alive()
    finally:
        rotator.stop()

    assert len(store.statements) >= 2

def test_collision_suffix_orders_numerically(backup_dir):
    backup_dir.mkdir(parents=True)
    stamp = time.time() - 100
    for name in ["backup_T_9.json", "backup_T_10.json"]:
        p = backup_dir / name
        p.write_text("{}")
        os.utime(p, (stamp, stamp))

    rotator = BackupRotator(FakeStore(), str(backup_dir), retention=1)

    assert rotator.get_latest_backup().name == "backup_T_10.json"
    assert rotator.cleanup_old_backups() == 1
    assert _backup_names(backup_dir) == ["backup_T_10.json"]

def test_many_same_timestamp_backups_keep_newest(backup_dir):
    fixed = datetime(2026, 1, 1, tzinfo=timezone.utc)
    rotator = BackupRotator(FakeStore(), str(backup_dir), retention=10, now=lambda: fixed)

    created = [rotator.perform_backup().name for _ in range(12)]

    remaining = set(_backup_names(backup_dir))
    assert remaining == set(created[2:])
    assert rotator.get_latest_backup().name == created[-1]
