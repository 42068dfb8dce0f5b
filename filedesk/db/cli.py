from __future__ import annotations

import argparse
from pathlib import Path

from filedesk.core.config_loader import load_config
from filedesk.db.database import init_or_upgrade_db


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", required=True, help="Path to config YAML (dev or prod).")
    args = parser.parse_args()

    config = load_config(str(Path(args.config).resolve()))
    if config["status"] != "OK":
        print(f"ERROR: {config['error']}")
        return 1

    db_path = init_or_upgrade_db(Path(config["db_path"]))
    print(f"OK: DB ready at {db_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
