"""
Logging Configuration
Sets up the logger shared by every ``ideasphere`` module.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "ideasphere"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Frames are ~16 ms apart, so debug output needs milliseconds to be readable.
_DEBUG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s.%(funcName)s - %(levelname)s - %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'ideasphere' namespace.

    Args:
        level: Logging level, as a number or a name such as "DEBUG".
        log_file: Optional path to save logs to a file. The file always
            receives the detailed format, whatever the console level.

    Returns:
        The configured package logger.
    """
    numeric = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric)

    # Reconfiguring must not leak file handles or duplicate console output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    detailed = logging.Formatter(_DEBUG_FORMAT, datefmt='%H:%M:%S')
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric)
    if numeric <= logging.DEBUG:
        console_handler.setFormatter(detailed)
    else:
        console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(numeric)
        file_handler.setFormatter(detailed)
        logger.addHandler(file_handler)

    logger.info("Logging initialized at %s.", logging.getLevelName(numeric))
    return logger
