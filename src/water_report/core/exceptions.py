"""
Exception hierarchy for water compliance reporting.

Distinguishes a data source that could not be reached from a valid query
that simply returned nothing.
"""

from datetime import date
from typing import Any, Dict, Optional


class WaterReportError(Exception):
    """Base class for all report generation errors."""


class DataFetchError(WaterReportError):
    """The measurement source could not be reached or answered with an error."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class EmptyResultError(WaterReportError):
    """The query succeeded but returned no measurements for the period."""

    def __init__(self, client_id: str, start: date, end: date):
        super().__init__(
            f"No measurements for client {client_id} between {start} and {end}"
        )
        self.client_id = client_id
        self.start = start
        self.end = end


class MalformedMeasurementError(WaterReportError):
    """A fetched row lacks its timestamp, value or collection point."""

    def __init__(self, reason: str, row: Optional[Dict[str, Any]] = None):
        super().__init__(reason)
        self.reason = reason
        self.row = row or {}


class InterpolationSkipped(WaterReportError):
    """The Sunday/Monday redistribution rule does not apply to a day pair."""

    def __init__(self, day: date, reason: str):
        super().__init__(f"{day}: {reason}")
        self.day = day
        self.reason = reason


class PageCaptureTimeout(WaterReportError):
    """A page did not stabilize within its capture bound."""

    def __init__(self, page_number: int, timeout: float):
        super().__init__(
            f"Page {page_number} did not stabilize within {timeout:.2f}s"
        )
        self.page_number = page_number
        self.timeout = timeout
