from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from filedesk.core.config_loader import load_config
from filedesk.core.logging_setup import configure_logging
from filedesk.models.previews import artifact_summary
from filedesk.services.app_services import build_services


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filedesk")
    parser.add_argument("--config", help="Path to config YAML (overrides FILEDESK_CONFIG_FILE).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on the console.")
    sub = parser.add_subparsers(dest="command", required=True)

    preview = sub.add_parser("preview", help="Generate a preview for a file.")
    preview.add_argument("path")
    preview.add_argument("--type", dest="file_type", help="Declared type (defaults to the file extension).")

    sub.add_parser("backup", help="Write one backup snapshot now.")
    sub.add_parser("latest-backup", help="Show the most recent backup.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    configure_logging(config.get("logs_dir"), console_level=logging.DEBUG if args.verbose else logging.WARNING)
    if config["status"] != "OK":
        print(f"Config error: {config['error']}")
        return 2

    services = build_services(config)

    if args.command == "preview":
        file_type = args.file_type or Path(args.path).suffix
        artifact = services.preview_cache.get_or_generate(args.path, file_type)
        print(json.dumps(artifact_summary(artifact), indent=2, ensure_ascii=False))
        return 1 if artifact.kind == "error" else 0

    if args.command == "backup":
        info = services.backup_rotator.perform_backup()
        if info is None:
            print("Backup failed (see log).")
            return 1
        print(json.dumps(asdict(info), indent=2))
        return 0

    if args.command == "latest-backup":
        info = services.backup_rotator.get_latest_backup()
        print(json.dumps(asdict(info) if info else None, indent=2))
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
