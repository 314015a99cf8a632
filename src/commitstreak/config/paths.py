"""Where commitstreak keeps its configuration."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_path

PACKAGE_NAME = "commitstreak"
CONFIG_FILENAME = "config.toml"

# A file path wins over a directory; both win over the platform default
CONFIG_FILE_ENV = "COMMITSTREAK_CONFIG_FILE"
CONFIG_DIR_ENV = "COMMITSTREAK_CONFIG_DIR"


def config_dir() -> Path:
    """Directory holding config.toml.

    ``COMMITSTREAK_CONFIG_DIR`` overrides the platformdirs location.
    """
    if override := os.environ.get(CONFIG_DIR_ENV, "").strip():
        return Path(override).expanduser()
    return user_config_path(PACKAGE_NAME)


def config_file() -> Path:
    if override := os.environ.get(CONFIG_FILE_ENV, "").strip():
        return Path(override).expanduser()
    return config_dir() / CONFIG_FILENAME
