"""
Logging configuration for cloudfiles_storage.

Console logging with an optional file handler, each with its own level.
Request lines are logged at DEBUG by the transport; ``http_debug`` also
routes urllib3's connection logging through the same handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = 'cloudfiles_storage'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    log_file: Optional[Union[str, Path]] = None,
    console_level: Union[int, str] = logging.INFO,
    file_level: Union[int, str] = logging.DEBUG,
    format_string: Optional[str] = None,
    http_debug: bool = False,
) -> logging.Logger:
    """
    Setup logging for the adapter.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_file: Path to log file (if None, only console logging)
        console_level: Logging level for console output
        file_level: Logging level for file output
        format_string: Custom format string (if None, uses default)
        http_debug: Also attach the handlers to the ``urllib3`` logger

    Returns:
        Configured package logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    handlers = []
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    names = [PACKAGE_LOGGER, 'urllib3'] if http_debug else [PACKAGE_LOGGER]
    for name in names:
        target = logging.getLogger(name)
        target.setLevel(logging.DEBUG)  # Capture everything, handlers filter
        for handler in list(target.handlers):
            target.removeHandler(handler)
            handler.close()
        for handler in handlers:
            target.addHandler(handler)

    logger = logging.getLogger(PACKAGE_LOGGER)
    if log_file:
        logger.info(f"Logging to file: {log_file}")
    return logger
