# ffmedia/common/logging.py
from __future__ import annotations

import logging
from typing import Optional

from ffmedia.common.settings import get_settings


def get_logger(name: str = "ffmedia", level: Optional[int | str] = None) -> logging.Logger:
    """
    Return a package logger at `level` (defaults to settings.log_level).
    If neither the root logger nor this logger has handlers, we add a basicConfig once.
    """
    level = level or get_settings().log_level
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.setLevel(level)
    return logger
