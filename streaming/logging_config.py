"""Logging setup for the streaming command line.

Library modules log through ``logging.getLogger(__name__)`` and never
attach handlers; the CLI calls :func:`setup_logging` once per invocation.
Records go to stderr so the tables and paths the CLI prints on stdout
stay clean for redirection.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "streaming"

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: int = logging.WARNING,
                  log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (stderr) and optional file handlers to the package logger.

    Calling it again replaces the handlers installed by the previous call,
    so repeated ``main()`` invocations in one process do not duplicate
    records. The file handler always records at DEBUG so a run can be
    diagnosed after the fact even when the console is quiet.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    effective = level
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        )
        logger.addHandler(file_handler)
        effective = logging.DEBUG

    logger.setLevel(effective)
    return logger
