from pathlib import Path
from typing import Dict, Any, List
import logging

from filedesk.core.backup_rotator import DEFAULT_INTERVAL_SECONDS, DEFAULT_RETENTION
from filedesk.core.preview_cache import DEFAULT_SWEEP_INTERVAL_SECONDS, DEFAULT_TTL_SECONDS
from filedesk.core.previewers.text import DEFAULT_TEXT_LIMIT

logger = logging.getLogger(__name__)

PREVIEW_DEFAULTS = {
    "ttl_seconds": DEFAULT_TTL_SECONDS,
    "sweep_interval_seconds": DEFAULT_SWEEP_INTERVAL_SECONDS,
    "text_limit": DEFAULT_TEXT_LIMIT,
    "documents": {"pdf": True, "docx": True},
}

BACKUP_DEFAULTS = {
    "enabled": True,
    "interval_seconds": DEFAULT_INTERVAL_SECONDS,
    "retention": DEFAULT_RETENTION,
}

class ConfigValidator:
    """
    Validates configuration structure and types.
    """

    @staticmethod
    def validate(config: Dict[str, Any]) -> List[str]:
        errors = []

        # 1. Top-Level Sections
        if "paths" not in config:
            errors.append("Missing required section: 'paths'")

        # 2. Preview section (optional)
        preview = config.get("preview", {})
        if not isinstance(preview, dict):
            errors.append("'preview' must be a dictionary")
        else:
            for key in ("ttl_seconds", "sweep_interval_seconds", "text_limit"):
                ConfigValidator._check_positive_int(preview, key, "preview", errors)
            documents = preview.get("documents", {})
            if not isinstance(documents, dict):
                errors.append("'preview.documents' must be a dictionary")
            else:
                ConfigValidator._check_bool(documents, "pdf", errors)
                ConfigValidator._check_bool(documents, "docx", errors)

        # 3. Backup section (optional)
        backup = config.get("backup", {})
        if not isinstance(backup, dict):
            errors.append("'backup' must be a dictionary")
        else:
            ConfigValidator._check_bool(backup, "enabled", errors)
            for key in ("interval_seconds", "retention"):
                ConfigValidator._check_positive_int(backup, key, "backup", errors)

        # 4. Paths Checks (Existence & Type)
        paths = config.get("paths", {})
        if not isinstance(paths, dict):
            errors.append("'paths' must be a dictionary")
        else:
            for p in ["db_path", "backup_dir", "logs_dir"]:
                if p not in paths:
                    errors.append(f"Missing path config: 'paths.{p}'")
                    continue
                val = paths[p]
                if not isinstance(val, str):
                    errors.append(f"'paths.{p}' must be a string")
                    continue

                # Directories are created; db_path is a file and is left to the DB layer
                if p in ["backup_dir", "logs_dir"]:
                    try:
                        Path(val).mkdir(parents=True, exist_ok=True)
                    except Exception as e:
                        errors.append(f"Path 'paths.{p}' ({val}) is invalid or not creatable: {e}")

        if errors:
            logger.error(f"Config Validation Failed: {errors}")
        else:
            logger.info("Config OK: preview=%s, backup=%s", preview, backup)

        return errors

    @staticmethod
    def _check_bool(section: dict, key: str, errors: list):
        if key in section and not isinstance(section[key], bool):
            errors.append(f"Field '{key}' must be boolean, got {type(section[key]).__name__}")

    @staticmethod
    def _check_positive_int(section: dict, key: str, prefix: str, errors: list):
        if key not in section:
            return
        val = section[key]
        # bool is an int subclass
        if isinstance(val, bool) or not isinstance(val, int) or val <= 0:
            errors.append(f"Field '{prefix}.{key}' must be a positive integer, got {val!r}")


def preview_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    section = config.get("preview") or {}
    merged = dict(PREVIEW_DEFAULTS, **section)
    merged["documents"] = dict(PREVIEW_DEFAULTS["documents"], **(section.get("documents") or {}))
    return merged


def backup_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    return dict(BACKUP_DEFAULTS, **(config.get("backup") or {}))
