from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "albiome"


def configure_logging(level: str = "INFO", log_path: Optional[Path] = None) -> logging.Logger:
    """Install one handler on the ``albiome`` logger tree.

    Calling it again only adjusts the level, so hosts and tests can call it freely.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level_value = getattr(logging, str(level).upper(), None)
    if not isinstance(level_value, int):
        level_value = logging.INFO
    logger.setLevel(level_value)
    if logger.handlers:
        return logger

    if log_path is not None:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    logger.debug("Logging initialised at level %s", logging.getLevelName(level_value))
    return logger
