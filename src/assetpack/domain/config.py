from __future__ import annotations

"""
Configuration Domain Management.

Defines the immutable configuration value handed to every core operation
and the dictionary-based defaults and project-file loading used by the
command line layer to build it. The core never reads configuration
sources on its own: it only receives a PackagerConfig.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from assetpack.domain.constants import (
    DEFAULT_REMOTE_FOLDER,
    DEFAULT_REMOTE_TOKEN,
    PROJECT_CONFIG_FILE,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PackagerConfig:
    """
    Read-only settings of one compilation run.

    Attributes:
        remote_base_path: Absolute directory that remote-rooted references
                          resolve against.
        remote_token: Placeholder marking a raw path as remote-rooted.
        output_dir: Optional shared directory receiving every bundle and
                    manifest instead of the root's own directory.
    """
    remote_base_path: str
    remote_token: str = DEFAULT_REMOTE_TOKEN
    output_dir: Optional[str] = None

# -----------------------------------------------------------------------------
# Defaults & Persistence
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "remote_path": os.path.join(os.getcwd(), DEFAULT_REMOTE_FOLDER),
        "remote_token": DEFAULT_REMOTE_TOKEN,
        "output_dir": None,
    }


def default_config_path() -> str:
    """Location of the optional project configuration file."""
    return os.path.join(os.getcwd(), PROJECT_CONFIG_FILE)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the project configuration file merged over the defaults.

    A missing file is not an error. A corrupted file is reported and the
    defaults are used instead.

    Args:
        path: JSON file to read. Defaults to ./assetpack.json.

    Returns:
        Dict[str, Any]: Merged configuration dictionary.
    """
    config = get_default_config()
    config_path = path or default_config_path()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load config file {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file {config_path}. Using defaults.")
        return config

    # Relative paths inside the file are anchored on the file's directory
    base_dir = os.path.dirname(os.path.abspath(config_path))
    for key in ("remote_path", "output_dir"):
        value = data.get(key)
        if isinstance(value, str) and value.strip() and not os.path.isabs(os.path.expanduser(value)):
            data[key] = os.path.join(base_dir, value)

    config.update({k: v for k, v in data.items() if k in config})
    logger.debug(f"Configuration loaded from {config_path}")
    return config
