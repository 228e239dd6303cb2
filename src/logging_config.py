from __future__ import annotations

import logging
from pathlib import Path


FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str, log_file: str | Path | None = None) -> None:
    """Configure the root logger for the upload service.

    Parameters
    ----------
    level:
        Log level name (e.g., "INFO", "DEBUG"). Unknown names fall back
        to INFO.
    log_file:
        If provided, records are also appended to this file. Missing
        parent directories are created.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=FORMAT,
        handlers=handlers,
        force=True,
    )
