import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from filedesk.core.config_validator import ConfigValidator

logger = logging.getLogger(__name__)

PATH_KEYS = ("db_path", "backup_dir", "logs_dir")

def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from YAML files and environment variables.
    Returns a dictionary with configuration and status metadata.
    """
    config_status = {
        "status": "OK",
        "error": None,
        "env": get_env(),
        "source": None,
        "config_path": None,
        "db_path": None,
        "backup_dir": None,
        "logs_dir": None,
        "data": {}
    }

    # --- 1. Read Overrides (explicit arg > ENV file > ENV dir > repo default) ---
    env_override_file = config_file or os.environ.get("FILEDESK_CONFIG_FILE")
    env_override_dir = os.environ.get("FILEDESK_CONFIG_DIR")
    env = config_status["env"]

    # --- 2. Determine Config Directory and Files ---
    if env_override_file:
        config_path = Path(env_override_file)
        config_dir = config_path.parent
        files_to_load = [config_path]
        config_status["config_path"] = str(config_path)
        config_status["source"] = "ARG" if config_file else "ENV_FILE (FILEDESK_CONFIG_FILE)"
    elif env_override_dir:
        config_dir = Path(env_override_dir)
        files_to_load = [
            config_dir / "general.yaml",
            config_dir / f"{env.lower()}.yaml"
        ]
        config_status["source"] = "ENV_DIR (FILEDESK_CONFIG_DIR)"
    else:
        project_root = Path(__file__).parent.parent.parent
        config_dir = project_root / "config"
        files_to_load = [
            config_dir / "general.yaml",
            config_dir / f"{env.lower()}.yaml"
        ]
        config_status["source"] = "DEFAULT (repo)"

    # --- 3. Load Configs ---
    loaded_config = {}
    files_found = 0

    try:
        for file_path in files_to_load:
            if file_path.exists():
                files_found += 1
                if not env_override_file:
                    config_status["config_path"] = str(file_path)

                with open(file_path, "r", encoding="utf-8") as f:
                    _deep_update(loaded_config, yaml.safe_load(f) or {})

        if files_found == 0:
            config_status["status"] = "ERROR"
            config_status["error"] = f"No config files found in {config_dir} (tried: {[str(f) for f in files_to_load]})"
            return config_status

        # --- 4. Resolve relative paths against the config dir ---
        paths = loaded_config.get("paths")
        if isinstance(paths, dict):
            for key in PATH_KEYS:
                raw = paths.get(key)
                if isinstance(raw, str) and not Path(raw).is_absolute():
                    paths[key] = str(config_dir / raw)

        # --- 5. Validation ---
        validation_errors = ConfigValidator.validate(loaded_config)
        config_status["data"] = loaded_config
        if validation_errors:
            config_status["status"] = "ERROR"
            config_status["error"] = "Invalid Configuration:\n" + "\n".join(validation_errors)
            return config_status

        for key in PATH_KEYS:
            config_status[key] = loaded_config["paths"][key]

        logger.info(f"Config Loaded: env={env}, db_path={config_status['db_path']}, backup_dir={config_status['backup_dir']}")

    except Exception as e:
        config_status["status"] = "ERROR"
        config_status["error"] = str(e)

    return config_status

def get_env() -> str:
    """
    Detects the current environment.
    Checks FILEDESK_ENV, defaults to DEV.
    """
    return os.environ.get("FILEDESK_ENV", "DEV").upper()

def _deep_update(target: Dict[str, Any], source: Dict[str, Any]):
    # env-specific files override single keys, not whole sections
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value
