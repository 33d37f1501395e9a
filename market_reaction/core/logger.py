"""Logging setup shared by every pipeline stage."""

import logging
import os
from pathlib import Path

_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s.%(funcName)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = "market_reaction",
    log_file: str = os.getenv("PIPELINE_LOG_FILE", "output/pipeline.log"),
) -> logging.Logger:
    """
    Build the pipeline logger with a file handler and a console handler.

    Calling this more than once returns the already-configured logger.

    Args:
        name (str): Logger name.
        log_file (str): Where the run log is appended.

    Returns:
        logging.Logger: The configured logger instance.
    """
    logger = logging.getLogger(name)
    if logger.hasHandlers():
        return logger

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


logger = setup_logger()
