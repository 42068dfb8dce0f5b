import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from filedesk.core.backup_rotator import BackupRotator
from filedesk.core.config_validator import backup_settings, preview_settings
from filedesk.core.preview_cache import PreviewCache
from filedesk.core.preview_generator import PreviewGenerator
from filedesk.db.database import Database, init_or_upgrade_db

logger = logging.getLogger(__name__)

@dataclass
class AppServices:
    """
    Everything the application needs for previews and backups, constructed
    once by the composition root and passed around explicitly.
    """
    config: Dict[str, Any]
    database: Database
    preview_cache: PreviewCache
    backup_rotator: BackupRotator

    def start(self):
        self.preview_cache.start()
        if backup_settings(self.config.get("data", {}))["enabled"]:
            self.backup_rotator.start()

    def shutdown(self):
        self.backup_rotator.stop()
        self.preview_cache.stop()


def build_services(config_status: Dict[str, Any]) -> AppServices:
    """
    Builds services from a load_config() result. Raises ValueError if the
    config did not load.
    """
    if config_status.get("status") != "OK":
        raise ValueError(f"Cannot build services from invalid config: {config_status.get('error')}")

    data = config_status.get("data", {})
    preview_cfg = preview_settings(data)
    backup_cfg = backup_settings(data)

    db_path = Path(config_status["db_path"])
    init_or_upgrade_db(db_path)
    database = Database(str(db_path))

    generator = PreviewGenerator(preview_cfg)
    preview_cache = PreviewCache(
        generator=generator,
        ttl=preview_cfg["ttl_seconds"],
        sweep_interval=preview_cfg["sweep_interval_seconds"],
    )

    backup_rotator = BackupRotator(
        store=database,
        backup_dir=config_status["backup_dir"],
        interval=backup_cfg["interval_seconds"],
        retention=backup_cfg["retention"],
    )

    logger.info(f"Services ready: db={db_path}, backups={config_status['backup_dir']}")
    return AppServices(
        config=config_status,
        database=database,
        preview_cache=preview_cache,
        backup_rotator=backup_rotator,
    )
