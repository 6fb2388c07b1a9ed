# utils/logger.py

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

def setup_logger(
    log_file: Optional[str] = "logs/exam_centre.log",
    level: str = "INFO",
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
    console: bool = True,
) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    # Repeated setup (tests, reloads) must not stack handlers
    for handler in list(logger.handlers):
        if getattr(handler, "_exam_centre", False):
            logger.removeHandler(handler)
            handler.close()

    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(formatter)
        stream._exam_centre = True
        logger.addHandler(stream)

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(formatter)
        handler._exam_centre = True
        logger.addHandler(handler)

    return logger
