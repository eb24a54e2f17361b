"""
Core utilities for the water compliance report system.

Provides configuration management, logging, error types and date handling.
"""

from .config import Config
from .logger import setup_logger, LoggerContext, ReportLogContext, set_report_id
from . import constants
from .date_utils import DateUtils
from .exceptions import (
    WaterReportError,
    DataFetchError,
    EmptyResultError,
    MalformedMeasurementError,
    InterpolationSkipped,
    PageCaptureTimeout,
)

__all__ = [
    "Config",
    "setup_logger",
    "LoggerContext",
    "ReportLogContext",
    "set_report_id",
    "constants",
    "DateUtils",
    "WaterReportError",
    "DataFetchError",
    "EmptyResultError",
    "MalformedMeasurementError",
    "InterpolationSkipped",
    "PageCaptureTimeout",
]
