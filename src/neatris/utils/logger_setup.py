"""
Logging setup for neatris runs.

Evolution runs are long: the console shows the generation reports, while the
run log on disk also keeps the per-pass evaluation detail.
"""

from datetime import datetime, timezone
import os
import sys

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"
FILE_FORMAT    = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {thread.name: <12} | {name}:{line} | {message}"


def setup_logger(log_dir: str | None = "logs",
                 level: str = "INFO",
                 file_level: str = "DEBUG",
                 rotation: str = "50 MB",
                 retention: str = "30 days") -> str | None:
    """
    Replace the loguru sinks with a console sink and, unless 'log_dir' is None, a run log.

    Args:
        log_dir:    Directory of the run log (None for console only)
        level:      Console level (DEBUG, INFO, WARNING, ERROR)
        file_level: Run log level; DEBUG keeps every evaluation pass
        rotation:   Run log rotation policy (e.g. "50 MB", "1 day")
        retention:  Run log retention policy (e.g. "30 days")

    Returns:
        Path to the run log, or None
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=sys.stderr.isatty())

    if log_dir is None:
        return None

    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file  = os.path.join(log_dir, f"neatris_{timestamp}.log")

    logger.add(log_file,
               level=file_level,
               format=FILE_FORMAT,
               rotation=rotation,
               retention=retention,
               encoding="utf-8")

    logger.debug("Run log: {}", log_file)
    return log_file
