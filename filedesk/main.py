from __future__ import annotations

import sys
from pathlib import Path
from datetime import datetime

from filedesk.core.config_loader import load_config
from filedesk.core.logging_setup import configure_logging


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    now = datetime.now().isoformat(timespec="seconds")
    config = load_config()
    configure_logging(config.get("logs_dir"))

    print("FileDesk :: runtime check")
    print(f"timestamp:  {now}")
    print(f"repo_root:  {repo_root}")
    print(f"cwd:        {Path.cwd()}")
    print(f"python:     {sys.version.split()[0]}")
    print(f"env:        {config['env']}")
    print(f"config:     {config['status']} ({config['config_path']})")
    print(f"db_path:    {config['db_path']}")
    print(f"backup_dir: {config['backup_dir']}")
    if config["error"]:
        print(f"error:      {config['error']}")
    return 0 if config["status"] == "OK" else 1


if __name__ == "__main__":
    raise SystemExit(main())
