"""
Logging configuration for the water compliance report system.

Every record written through the configured handlers is stamped with the
client and report being generated, so a log file that mixes several runs
can be filtered per report.
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

NO_CONTEXT = "-"

FILE_FORMAT = (
    "%(asctime)s - %(levelname)s - [%(client_id)s %(report_id)s] - "
    "%(name)s:%(lineno)d - %(message)s"
)
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - [%(client_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ReportContextFilter(logging.Filter):
    """Add client_id and report_id attributes to log records."""

    def __init__(self):
        super().__init__()
        self.client_id: Optional[str] = None
        self.report_id: Optional[str] = None

    def filter(self, record: logging.LogRecord) -> bool:
        record.client_id = self.client_id or NO_CONTEXT
        record.report_id = self.report_id or NO_CONTEXT
        return True


# Shared by every handler created in setup_logger
report_context = ReportContextFilter()


def set_report_id(report_id: Optional[str]) -> None:
    """Attach the report ID once the report model exists."""
    report_context.report_id = report_id


class ReportLogContext:
    """
    Bind a client (and optionally a report) to every record logged in a block.

    The previous binding is restored on exit, so nested runs log correctly.

    Example:
        >>> with ReportLogContext("c1"):
        ...     logger.info("fetching")  # [c1 -] fetching
    """

    def __init__(self, client_id: str, report_id: Optional[str] = None):
        self.client_id = client_id
        self.report_id = report_id
        self._previous = (None, None)

    def __enter__(self):
        self._previous = (report_context.client_id, report_context.report_id)
        report_context.client_id = self.client_id
        report_context.report_id = self.report_id
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        report_context.client_id, report_context.report_id = self._previous
        return False


def setup_logger(
    name: str = "water_report",
    log_file: Optional[str] = None,
    log_level: str = "INFO"
) -> logging.Logger:
    """
    Set up the report logger with console and file handlers.

    Args:
        name: Logger name
        log_file: Path to log file. If None, uses LOG_FILE env var or default
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = os.getenv("LOG_FILE", "logs/water_report.log")

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))

    for handler in (console_handler, file_handler):
        handler.addFilter(report_context)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


class LoggerContext:
    """
    Time one pipeline stage and log its outcome.

    Keyword arguments, and anything added to ``details`` inside the block,
    are appended to the completion message (e.g. record counts).
    """

    def __init__(self, logger: logging.Logger, operation: str, **details: Any):
        """
        Initialize logger context.

        Args:
            logger: Logger instance
            operation: Name of the stage being logged
            **details: Stage attributes shown with the start and end messages
        """
        self.logger = logger
        self.operation = operation
        self.details: Dict[str, Any] = dict(details)
        self.duration: Optional[float] = None
        self._started = 0.0

    def _suffix(self) -> str:
        if not self.details:
            return ""
        return " (" + ", ".join(f"{k}={v}" for k, v in self.details.items()) + ")"

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.info(f"Starting {self.operation}{self._suffix()}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self._started

        if exc_type is not None:
            self.logger.error(
                f"Failed {self.operation} after {self.duration:.2f}s{self._suffix()}: {exc_val}",
                exc_info=True
            )
            return False

        self.logger.info(f"Completed {self.operation} in {self.duration:.2f}s{self._suffix()}")
        return False
