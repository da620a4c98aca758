"""
Logging configuration for cdda_harvest.

Harvest runs log to the console and, optionally, to a rotating
semicolon-separated CSV file that keeps full tracebacks of failed releases.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..settings.logging import LoggingSettings
    from ..settings import HarvestSettings

PROJECT_LOGGER = "cdda_harvest"

# HTTP libraries log every connection at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")

CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter with colored level names for the console."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color is None:
            return formatted
        return formatted.replace(
            record.levelname, f"{color}{record.levelname}{self.RESET}", 1
        )


class CSVFormatter(logging.Formatter):
    """Semicolon-separated formatter for the log file.

    Columns: timestamp, level, time since start, logger, line, message.
    Tracebacks are appended to the message column.
    """

    @staticmethod
    def _quote(value: str) -> str:
        return '"' + value.replace('"', '""') + '"'

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        columns: List[str] = [
            self._quote(self.formatTime(record, self.datefmt)),
            record.levelname.ljust(8),
            self._quote(f"{int(record.relativeCreated)} ms"),
            self._quote(record.name),
            self._quote(str(record.lineno)),
            self._quote(message),
        ]
        return ";".join(columns)


def _console_handler(log_settings: "LoggingSettings", level: str) -> logging.Handler:
    formatter_class = (
        ColoredFormatter if log_settings.console_use_colors else logging.Formatter
    )
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler.setFormatter(formatter_class(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    return handler


def _file_handler(log_settings: "LoggingSettings") -> logging.Handler:
    log_path = Path(log_settings.log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=log_settings.max_bytes,
        backupCount=log_settings.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(CSVFormatter(datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    settings: "HarvestSettings", console_level: Optional[str] = None
) -> None:
    """
    Setup application logging with console and file handlers.

    Args:
        settings: HarvestSettings instance for all logging configuration
        console_level: Overrides the configured console level (e.g. for --verbose)
    """
    log_settings = settings.logging
    console_level = console_level or log_settings.console_log_level

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger(PROJECT_LOGGER).setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    if log_settings.console_logging:
        root_logger.addHandler(_console_handler(log_settings, console_level))

    log_path = None
    if log_settings.file_logging:
        try:
            root_logger.addHandler(_file_handler(log_settings))
            log_path = log_settings.log_file_absolute_path
        except OSError as e:
            # Keep running with console logging only
            root_logger.warning(f"Could not setup file logging: {e}")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized")
    if log_settings.console_logging:
        logger.debug(
            f"Console logging: {console_level} (colors: {log_settings.console_use_colors})"
        )
    if log_path:
        logger.debug(f"File logging: DEBUG at {log_path}")
