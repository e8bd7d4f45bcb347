from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "CHECKPOINT_HOME"
CONFIG_DIR_MODE = 0o700

DEFAULT_CONFIG_DIR = Path.home() / ".checkpoint"


def config_dir() -> Path:
    if override := os.getenv(HOME_ENV_VAR):
        return Path(override).expanduser().resolve()
    return DEFAULT_CONFIG_DIR


def ensure_config_dir() -> Path | None:
    directory = config_dir()
    try:
        directory.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
    except OSError:
        logger.debug("Cannot create config directory %s", directory, exc_info=True)
        return None
    return directory


def signature_file(product: str) -> Path:
    if (directory := ensure_config_dir()) is not None:
        return directory / f"{product}.sig"
    return Path.home() / f".{product}.sig"


def cache_file(product: str) -> Path | None:
    if (directory := ensure_config_dir()) is None:
        return None
    return directory / f"{product}.cache.json"
