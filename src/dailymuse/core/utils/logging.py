"""
CLI logging setup.

dailymuse logs through loguru. The Google clients and litellm log through
the standard library, so their loggers are forwarded into loguru and held
at WARNING unless the run is verbose.
"""

import logging
import sys

from loguru import logger

CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"

#: Third-party stdlib loggers forwarded into loguru.
LIBRARY_LOGGERS = ("google", "litellm", "LiteLLM", "httpx")


class _ForwardToLoguru(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, f"[{record.name}] {record.getMessage()}")


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """
    Configure console logging and an optional rotating log file.

    Args:
        verbose: Show INFO on the console (publish/reschedule/remove progress)
            and let library loggers through at INFO.
        log_file: Also log everything from DEBUG up to this file.
    """
    console_level = "INFO" if verbose else "WARNING"
    logger.remove()
    logger.add(sys.stderr, level=console_level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level="DEBUG", format=FILE_FORMAT, rotation="10 MB", retention="7 days")

    handler = _ForwardToLoguru()
    for name in LIBRARY_LOGGERS:
        lib_logger = logging.getLogger(name)
        lib_logger.handlers = [handler]
        lib_logger.propagate = False
        lib_logger.setLevel(logging.INFO if verbose else logging.WARNING)
