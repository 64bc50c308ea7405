"""
Logging setup for applications embedding isomodel.

Library modules only call ``logging.getLogger(__name__)`` and pass run context
through ``extra`` (building name, weather file, month, end use). An
application calls ``setup_logging()`` once to route those records to the
console, and optionally to a file, with the context appended to each line.

Usage:
    from isomodel.utils.logging_config import setup_logging

    setup_logging("DEBUG", log_file="run.log")
    results = user_model.to_sim_model(library=climates).simulate()
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


CONTEXT_KEYS = ("building", "weather_file", "month", "end_use")


class IsoModelFormatter(logging.Formatter):
    """Line formatter that appends run context, coloured on a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = False):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [f"{key}={getattr(record, key)}" for key in CONTEXT_KEYS if hasattr(record, key)]
        if context:
            line = f"{line} [{', '.join(context)}]"
        if self.use_colors:
            return f"{self.COLORS.get(record.levelname, '')}{line}{self.RESET}"
        return line


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Attach isomodel handlers to the ``isomodel`` logger.

    Args:
        level: Log level name; defaults to ``Settings.log_level``
            (``ISOMODEL_LOG_LEVEL``)
        log_file: Also write every record (DEBUG and up) to this file

    Returns:
        The configured ``isomodel`` logger
    """
    from ..core.config import settings

    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.WARNING)

    logger = logging.getLogger("isomodel")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if log_file else numeric_level)
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(IsoModelFormatter(use_colors=sys.stderr.isatty()))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(IsoModelFormatter())
        logger.addHandler(file_handler)

    # eppy logs every IDD load at INFO
    logging.getLogger("eppy").setLevel(logging.WARNING)
    return logger
