# logger.py
import logging
from logging.handlers import RotatingFileHandler
import os
import sys

FILE_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
CONSOLE_FORMAT = '%(message)s'

# Create logger instance
logger = logging.getLogger("tozulip")
logger.setLevel(logging.INFO)

# Avoid duplicate logs if a root handler is configured elsewhere
logger.propagate = False


class _BelowWarning(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


def configure_logging(verbose=False, log_file=None):
    """(Re)attach handlers: info to stdout, warnings and errors to stderr.

    Handlers bind to whatever sys.stdout/sys.stderr are at call time.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_formatter = logging.Formatter(CONSOLE_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(console_formatter)
    stdout_handler.addFilter(_BelowWarning())
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(console_formatter)
    stderr_handler.setLevel(logging.WARNING)
    logger.addHandler(stderr_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        # Create log directory if it doesn't exist
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # 1MB per file, up to 5 backups
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
