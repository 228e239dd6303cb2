from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from functools import lru_cache

import yaml


DEFAULTS = {
    "level": "INFO",
    "file": None,
    "max_bytes": 1024 * 1024,
    "backup_count": 3,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


@lru_cache()
def _load_config() -> dict:
    """Load the YAML config named by ``FILESHELF_CONFIG``."""
    config_path = os.environ.get("FILESHELF_CONFIG", "config.yml")
    try:
        with open(Path(config_path), encoding="utf-8") as fh:
            return yaml.safe_load(fh) or {}
    except FileNotFoundError:
        return {}


def configure_file_logging() -> None:
    """Attach the rotating file handler from the YAML config to the root logger.

    The configured level applies to that handler only; logger levels are
    left to ``logging_config.setup_logging``. Safe to call again after
    ``setup_logging`` has replaced the root handlers.
    """
    cfg = _load_config().get("logging", {}) or {}
    log_file = cfg.get("file", DEFAULTS["file"])
    root = logging.getLogger()
    if not log_file or any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        return

    level_name = str(cfg.get("level", DEFAULTS["level"])).upper()
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=int(cfg.get("max_bytes", DEFAULTS["max_bytes"])),
        backupCount=int(cfg.get("backup_count", DEFAULTS["backup_count"])),
        encoding="utf-8",
    )
    handler.setLevel(getattr(logging, level_name, logging.INFO))
    handler.setFormatter(logging.Formatter(cfg.get("format", DEFAULTS["format"])))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger whose records also reach the YAML-configured file."""
    configure_file_logging()
    return logging.getLogger(name)
