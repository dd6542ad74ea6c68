"""
Logging setup for pyceltic.

The package logs through loguru's global ``logger``; these helpers only
configure where the records go.

Exports:
    - logger: The loguru logger.
    - setup_console: Replace the default sink with a stderr sink at a level.
    - setup_logfile: Add a rotating file sink.
"""

import sys

from loguru import logger

__all__ = [
    "logger",
    "setup_console",
    "setup_logfile",
]

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def setup_console(level: str = "INFO"):
    """
    Route log records to stderr at ``level`` and above.

    Args:
        level (str): Minimum level name (DEBUG, INFO, ...).

    Returns:
        int: The loguru handler id.
    """
    logger.remove()
    return logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)


def setup_logfile(
    log_path: str,
    rotation: str = "10 MB",
    retention: str = "10 days",
    compression: str = "zip",
    level: str = "DEBUG",
):
    """
    Add a rotating file handler to the global logger.

    Args:
        log_path (str): Path to the log file.
        rotation (str): Size or time string for log rotation.
        retention (str): How long to keep old logs.
        compression (str): Compression method for rotated logs.
        level (str): Logging level.

    Returns:
        int: The loguru handler id.
    """
    handler_id = logger.add(
        log_path,
        rotation=rotation,
        retention=retention,
        compression=compression,
        level=level.upper(),
        colorize=False,
        backtrace=True,
        diagnose=False,
    )
    logger.info(f"File logging initialized: {log_path}")
    return handler_id
