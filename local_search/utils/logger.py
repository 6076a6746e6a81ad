"""
Logging configuration
"""

import logging
import sys
from pathlib import Path


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
HANDLER_MARK = '_local_search_handler'


def setup_logging(level: str = 'WARNING', log_file: str = None, log_format: str = None):
    """
    Setup logging configuration

    Console output goes to stderr so results on stdout stay machine readable.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        log_format: Log message format (optional)
    """
    if log_format is None:
        log_format = DEFAULT_FORMAT

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    # Drop handlers from a previous call only
    for handler in list(root.handlers):
        if getattr(handler, HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(logging.Formatter(log_format))
    setattr(console_handler, HANDLER_MARK, True)
    root.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(logging.Formatter(log_format))
        setattr(file_handler, HANDLER_MARK, True)
        root.addHandler(file_handler)

    logging.debug("Logging configured successfully")


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
