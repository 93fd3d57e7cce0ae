import logging
import os
from pathlib import Path
from typing import Optional

from portfolio_terminal.runtime_config import LOG_LEVEL_ENV, get_data_dir

LOG_FILE_NAME = "portfolio_terminal.log"


def setup_logging(log_dir: Optional[Path] = None) -> Path:
    """
    Send package logs to a file under the data directory.

    The terminal owns stdout, so nothing is logged to the console.
    Returns the path of the log file.
    """
    log_dir = log_dir or get_data_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    package_logger = logging.getLogger("portfolio_terminal")
    package_logger.setLevel(level)
    package_logger.propagate = False

    for handler in list(package_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            package_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)

    return log_file
