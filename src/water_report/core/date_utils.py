"""
Date and timezone utilities.

Centralizes all date/time operations with proper timezone handling.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple
import pytz
from pytz.tzinfo import BaseTzInfo


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'America/Sao_Paulo', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    @staticmethod
    def day_count(start: date, end: date) -> int:
        """
        Number of calendar days in the inclusive range [start, end].

        Returns 0 when end precedes start.
        """
        return max(0, (end - start).days + 1)

    @staticmethod
    def days_in_range(start: date, end: date) -> List[date]:
        """
        Every calendar day in the inclusive range [start, end].

        Args:
            start: First day
            end: Last day

        Returns:
            Ordered list of dates
        """
        return [start + timedelta(days=i) for i in range(DateUtils.day_count(start, end))]

    @staticmethod
    def local_date(dt: datetime, timezone_str: str) -> date:
        """
        Calendar day of a timestamp in the given timezone.

        Naive timestamps are assumed to already be local to that timezone.

        Args:
            dt: Timestamp (naive or aware)
            timezone_str: Timezone string

        Returns:
            Local calendar date
        """
        if dt.tzinfo is None:
            return dt.date()
        tz = DateUtils.parse_timezone(timezone_str)
        return dt.astimezone(tz).date()

    def get_period_range(
        self,
        start: date,
        end: date,
        timezone_str: str
    ) -> Tuple[datetime, datetime]:
        """
        Timezone-aware bounds covering the whole period.

        Args:
            start: First day of the period
            end: Last day of the period
            timezone_str: Timezone string

        Returns:
            Tuple of (start_datetime, end_datetime), both timezone-aware

        Example:
            (2024-10-01, 2024-10-31) in America/Sao_Paulo returns
            (2024-10-01 00:00:00-03:00, 2024-10-31 23:59:59.999999-03:00)
        """
        if end < start:
            raise ValueError(f"Period end {end} precedes start {start}")

        tz = self.parse_timezone(timezone_str)
        start_datetime = tz.localize(datetime.combine(start, datetime.min.time()))
        end_datetime = tz.localize(datetime.combine(end, datetime.max.time()))

        self.logger.debug(
            f"Period range in {timezone_str}: "
            f"{start_datetime.isoformat()} to {end_datetime.isoformat()}"
        )

        return start_datetime, end_datetime

    @staticmethod
    def parse_timestamp(value: str) -> datetime:
        """
        Parse an ISO 8601 timestamp as returned by the measurement source.

        Args:
            value: Timestamp string (a trailing 'Z' is accepted)

        Returns:
            Parsed datetime (aware when the string carries an offset)

        Raises:
            ValueError: If the string is not a valid timestamp
        """
        if not isinstance(value, str) or not value:
            raise ValueError(f"Invalid timestamp: {value!r}")
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)

    @staticmethod
    def format_display(day: date) -> str:
        """Format a date the way reports display it (dd/mm/yyyy)."""
        return day.strftime("%d/%m/%Y")

    @staticmethod
    def is_sunday(day: date) -> bool:
        return day.weekday() == 6

    @staticmethod
    def is_monday(day: date) -> bool:
        return day.weekday() == 0
