"""Runtime configuration for zerofriction - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from zerofriction.utils.constants import CONFIG_FILE_NAME, MANIFEST_FILE, MODULES_DIR, ZF_DIR
from zerofriction.utils.logging import logger

DEFAULTS = {
    "paths": {
        "manifest": MANIFEST_FILE,
        "modules_dir": MODULES_DIR,
    },
    "limits": {
        "max_history_size": 1000,
        "similarity_threshold": 0.7,
    },
    "timeouts": {
        "install": 300,
    },
}


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .zf/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (ZEROFRICTION_* prefixed)
    2. .zf/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / ZF_DIR / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and _same_kind(value, cfg[section][key]):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"ZEROFRICTION_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    default_value = cfg[section][key]
                    if isinstance(default_value, int):
                        cfg[section][key] = int(value)
                    elif isinstance(default_value, float):
                        cfg[section][key] = float(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg


def _same_kind(value: Any, default: Any) -> bool:
    """Accept ints where floats are expected (JSON has a single number type)."""
    if isinstance(value, bool) != isinstance(default, bool):
        return False
    if isinstance(default, float):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))
