"""
Logging setup for the Air Quality system.

Configures the ``airquality`` logger hierarchy with a console handler and a
persistent, human-readable log file inside the configured log directory.
"""

import logging
from pathlib import Path
from typing import Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME = "air_quality.log"


def configure_logging(log_dir: Union[str, Path] = "logs", level: int = logging.INFO) -> Path:
    """
    Attaches console and file handlers to the ``airquality`` logger.

    Calling it again (Streamlit reruns the script on every interaction) does
    not add duplicate handlers.

    Args:
        log_dir: Directory for the log file; created if missing
        level: Minimum level for both handlers

    Returns:
        Path of the log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    package_logger = logging.getLogger("airquality")
    package_logger.setLevel(level)

    if getattr(package_logger, "_airquality_configured", False):
        return log_file

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)

    package_logger._airquality_configured = True
    return log_file
