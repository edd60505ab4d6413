"""Logging utilities."""

import logging
import sys
from pathlib import Path
from typing import Optional

import mne

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    name: str = "neuroconn",
    mne_level: str = "WARNING",
) -> logging.Logger:
    """
    Set up logging for neuroconn.

    Calling this more than once replaces the handlers installed by the
    previous call instead of stacking them.

    Args:
        level: Logging level
        log_file: Optional file to log to
        name: Logger name
        mne_level: Log level passed to MNE-Python

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_neuroconn", False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    console_handler._neuroconn = True
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        file_handler._neuroconn = True
        logger.addHandler(file_handler)

    mne.set_log_level(mne_level)

    return logger

