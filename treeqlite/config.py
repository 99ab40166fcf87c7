"""Configuration for TreeQLite.

A TreeQLiteConfig is passed explicitly to every query call; nothing here is
global. load_runtime_config() is the helper the CLI uses to build one from
a config file and the environment.
"""

import copy
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from treeqlite.utils.constants import (
    CONFIG_DIR,
    CONFIG_FILE_NAME,
    DEFAULT_ROOT_PATH,
    ENV_PREFIX,
)
from treeqlite.utils.logging import logger


@dataclass(frozen=True)
class TreeQLiteConfig:
    """Where a tree of databases lives on disk.

    Attributes:
        root_path: Directory every ``~/`` virtual path resolves against
    """

    root_path: str


DEFAULTS = {
    "root_path": DEFAULT_ROOT_PATH,
}


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .treeqlite/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (TREEQLITE_* prefixed)
    2. .treeqlite/config.json file
    3. Built-in defaults

    Args:
        root: Directory to look for the config file in

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / CONFIG_DIR / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for key, value in user.items():
                    if key in cfg and isinstance(value, type(cfg[key])):
                        cfg[key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for key in cfg:
        env_var = f"{ENV_PREFIX}{key.upper()}"
        if env_var in os.environ:
            cfg[key] = os.environ[env_var]

    return cfg


def config_from_runtime(root: str = ".", root_path: str | None = None) -> TreeQLiteConfig:
    """Build a TreeQLiteConfig, letting an explicit root_path win over everything."""
    if root_path is not None:
        return TreeQLiteConfig(root_path=root_path)

    cfg = load_runtime_config(root)
    return TreeQLiteConfig(root_path=cfg["root_path"])


def ensure_root(config: TreeQLiteConfig) -> Path:
    """Create the configured root directory if it is missing."""
    root = Path(config.root_path)
    root.mkdir(parents=True, exist_ok=True)
    return root.resolve()
