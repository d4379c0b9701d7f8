# This module contains a custom formatter and logger factory for the Campus Feed client.
import logging
from typing import Optional

from config import settings

ROOT_LOGGER_NAME = "campus_feed"


class CustomFormatter(logging.Formatter):
    """
    A custom formatter for logging messages with different log levels.

    Attributes:
        grey (str): ANSI escape sequence for grey color.
        yellow (str): ANSI escape sequence for yellow color.
        red (str): ANSI escape sequence for red color.
        bold_red (str): ANSI escape sequence for bold red color.
        reset (str): ANSI escape sequence to reset color.
        log_format (str): The log message format.
        FORMATS (dict): A dictionary mapping log levels to their respective log message formats.

    Usage:
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter())
    """
    grey = "\x1b[37;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    dark_grey = "\x1b[30;1m"
    reset = "\x1b[0m"
    log_format = '[%(levelname)s] %(asctime)s - %(name)s - %(message)s'

    FORMATS = {
        logging.DEBUG: dark_grey + log_format + reset,
        logging.INFO: grey + log_format + reset,
        logging.WARNING: yellow + log_format + reset,
        logging.ERROR: red + log_format + reset,
        logging.CRITICAL: bold_red + log_format + reset
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        """
        Formats the log record based on its log level.

        Args:
            record (logging.LogRecord): The log record to be formatted.

        Returns:
            str: The formatted log message.
        """
        if self.use_color:
            log_fmt = self.FORMATS.get(record.levelno)
        else:
            log_fmt = self.log_format
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger nested under the application's root logger.

    Args:
        name: Usually the calling module's __name__.

    Returns:
        logging.Logger: The configured logger.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_file_logging(log_file: Optional[str] = None, level: int = logging.INFO,
                       use_color: Optional[bool] = None) -> logging.Logger:
    """
    Configure the root application logger with a console and (optionally) a file handler.

    Calling this more than once replaces the previously installed handlers.

    Args:
        log_file: Path of the log file, or None for console only.
        level: Logging level for both handlers.
        use_color: Whether the console output is colored; defaults to settings.USE_COLOR.

    Returns:
        logging.Logger: The application root logger.
    """
    if use_color is None:
        use_color = settings.USE_COLOR

    log = logging.getLogger(ROOT_LOGGER_NAME)
    log.setLevel(level)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(CustomFormatter(use_color=use_color))
    log.addHandler(ch)

    if log_file:
        fh = logging.FileHandler(log_file, encoding='utf-8')
        fh.setLevel(level)
        fh.setFormatter(CustomFormatter(use_color=False))
        log.addHandler(fh)

    log.propagate = False
    return log
