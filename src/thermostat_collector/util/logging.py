"""This module provides a centralized utility for configuring and managing collector logging.

It defines the `LoggingUtil` class, which offers a static method to retrieve
pre-configured logger instances, and the `StructuredFormatter` used by their
handlers. Fields passed through the `extra` argument of a logging call are
appended to the line as `key=value` pairs so that run, device and batch details
can be filtered in the log sink.
"""

import logging
import os

_RESERVED_ATTRIBUTES = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Formatter appending the `extra` fields of a record as `key=value` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRIBUTES and not key.startswith("_")
        }
        if not fields:
            return line
        suffix = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return f"{line} | {suffix}"


class LoggingUtil:
    """A utility class for configuring and retrieving loggers.

    The log level is controlled by the `LOGLEVEL` environment variable and
    defaults to INFO when the variable is unset or invalid.
    """

    LOG_FORMAT = "%(asctime)s - [%(name)s][%(levelname)s] %(message)s"

    @staticmethod
    def get_logger(logger_name: str) -> logging.Logger:
        """Retrieves a configured logger instance.

        Args:
            logger_name: The name of the logger to retrieve (typically `__name__`
                         of the calling module).

        Returns:
            A configured `logging.Logger` instance.
        """
        logger = logging.getLogger(logger_name)
        log_level = os.getenv("LOGLEVEL", "INFO").upper()

        if log_level not in logging.getLevelNamesMapping():
            log_level = "INFO"

        logger.setLevel(log_level)

        # Ensure that handlers are not duplicated if get_logger is called multiple times
        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(StructuredFormatter(LoggingUtil.LOG_FORMAT))
            logger.addHandler(console_handler)

        return logger
