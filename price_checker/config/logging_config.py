# price_checker/config/logging_config.py

"""Per-run timestamped logging configuration for price_checker.

Each launch writes a dedicated log file inside ``logs/`` named after the
launch time (e.g. ``logs/run_20260214_153045.log``).  Every
``price_checker.*`` logger propagates into it, so extractor diagnostics,
cache activity and comparison calls for one run live in one place.

The console only receives ``WARNING`` and above unless
``PRICE_CHECKER_LOG_LEVEL`` says otherwise, keeping stdout free for the
JSON the CLI prints.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from price_checker.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Resolve the configured console level, defaulting to WARNING."""
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging() -> Path:
    """Initialise the ``price_checker`` logger for the current run.

    Returns:
        The :class:`~pathlib.Path` of the log file for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("price_checker")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, re-entry from the CLI) keep one handler set
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
