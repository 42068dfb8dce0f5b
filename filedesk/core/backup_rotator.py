import os
import re
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from filedesk.models.previews import BackupInfo
from filedesk.models.store import StateStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300  # 5 minutes
DEFAULT_RETENTION = 10
BACKUP_PREFIX = "backup_"
BACKUP_SUFFIX = ".json"
_COLLISION_SUFFIX = re.compile(r"^(.*?)(?:_(\d+))?$")

# Snapshot key -> table
BACKUP_TABLES = {
    "projects": "projects",
    "files": "process_files",
    "schedule": "schedule_nodes",
    "settings": "user_settings",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _name_order(name: str):
    """(stem, collision number) so backup_T_10 sorts after backup_T_9."""
    stem = name[len(BACKUP_PREFIX):-len(BACKUP_SUFFIX)]
    base, n = _COLLISION_SUFFIX.match(stem).groups()
    return (base, int(n or 0))


class BackupRotator:
    """
    Periodically snapshots the state store to JSON files and keeps only
    the `retention` most recent ones.
    """

    def __init__(
        self,
        store: StateStore,
        backup_dir: str,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        retention: int = DEFAULT_RETENTION,
        now: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.backup_dir = Path(backup_dir)
        self.interval = interval
        self.retention = retention
        self._now = now

        self._timer: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    # --- Lifecycle ---

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    def start(self):
        # Restarting replaces the current timer instead of stacking a second one
        if self._timer is not None:
            self.stop()

        stop_event = threading.Event()
        self._stop_event = stop_event
        self._timer = threading.Thread(
            target=self._run, args=(stop_event,), name="backup-rotator", daemon=True
        )
        self._timer.start()
        logger.info(f"Backup rotator started (interval={self.interval}s, retention={self.retention})")

    def stop(self):
        if self._timer is None:
            return
        self._stop_event.set()
        if self._timer is not threading.current_thread():
            self._timer.join()
        self._timer = None
        self._stop_event = None
        logger.info("Backup rotator stopped")

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(self.interval):
            self.perform_backup()

    # --- Snapshot ---

    def snapshot(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, table in BACKUP_TABLES.items():
            data[key] = [dict(row) for row in self.store.query(f"SELECT * FROM {table}", ())]
        data["timestamp"] = format_timestamp(self._now())
        return data

    def perform_backup(self) -> Optional[BackupInfo]:
        """
        Writes one snapshot and prunes old ones.
        Failures are logged and skipped; returns None in that case.
        """
        try:
            data = self.snapshot()
            # Serialize first: a failed dump must not leave a partial file
            payload = json.dumps(data, indent=2, ensure_ascii=False)

            self.backup_dir.mkdir(parents=True, exist_ok=True)
            target = self._unique_path(data["timestamp"])
            target.write_text(payload, encoding="utf-8")
            info = BackupInfo(name=target.name, path=str(target), modified_at=target.stat().st_mtime)
        except Exception as e:
            logger.error(f"Backup failed: {e}", exc_info=True)
            return None

        logger.info(f"Backup written: {target}")
        self.cleanup_old_backups()
        return info

    def _unique_path(self, timestamp: str) -> Path:
        stem = BACKUP_PREFIX + timestamp.replace(":", "-").replace(".", "-")
        candidate = self.backup_dir / f"{stem}{BACKUP_SUFFIX}"
        taken = [_name_order(p.name)[1] for p in self.backup_dir.glob(f"{stem}_*{BACKUP_SUFFIX}")]
        if candidate.exists():
            taken.append(0)
        if not taken:
            return candidate
        # Always above every existing suffix, so a pruned name is never reused
        return self.backup_dir / f"{stem}_{max(taken) + 1}{BACKUP_SUFFIX}"

    # --- Retention ---

    def _scan(self) -> List[os.DirEntry]:
        """Backup files, newest first (mtime, then name)."""
        entries = []
        with os.scandir(self.backup_dir) as it:
            for entry in it:
                if entry.is_file() and entry.name.startswith(BACKUP_PREFIX) and entry.name.endswith(BACKUP_SUFFIX):
                    entries.append((entry.stat().st_mtime_ns, _name_order(entry.name), entry))
        entries.sort(key=lambda x: (x[0], x[1]), reverse=True)
        return [e for _, _, e in entries]

    def cleanup_old_backups(self) -> int:
        try:
            entries = self._scan()
        except OSError as e:
            logger.error(f"Listing backups failed: {e}")
            return 0

        deleted = 0
        for entry in entries[self.retention:]:
            try:
                os.unlink(entry.path)
                deleted += 1
            except OSError as e:
                logger.error(f"Failed to delete old backup {entry.name}: {e}")

        if deleted:
            logger.debug(f"Pruned {deleted} old backups")
        return deleted

    def list_backups(self) -> List[BackupInfo]:
        if not self.backup_dir.exists():
            return []
        try:
            return [
                BackupInfo(name=e.name, path=e.path, modified_at=e.stat().st_mtime)
                for e in self._scan()
            ]
        except OSError as e:
            logger.error(f"Listing backups failed: {e}")
            return []

    def get_latest_backup(self) -> Optional[BackupInfo]:
        backups = self.list_backups()
        return backups[0] if backups else None

    def load_backup(self, info: BackupInfo) -> Dict[str, Any]:
        with open(info.path, "r", encoding="utf-8") as f:
            return json.load(f)
