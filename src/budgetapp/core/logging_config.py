"""
Root logger configuration.
"""

import logging
import sys
from pathlib import Path

from budgetapp.api.middleware.logging import JSONLogFormatter, PIIFilter

# Configure logging format
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONLogFormatter(datefmt=DATE_FORMAT)
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: str = "INFO", json_format: bool = False, log_file: str | None = None
) -> None:
    """
    Configure root logger.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        json_format: Emit one JSON object per line instead of plain text
        log_file: Optional log file path
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(_formatter(json_format))
        handler.addFilter(PIIFilter())
        root_logger.addHandler(handler)

    # SQL echo goes through its own logger; keep it at WARNING unless debugging.
    if log_level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
