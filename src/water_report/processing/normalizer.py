"""
Time series normalization module.

Turns sparse timestamped readings into one value per calendar day.
"""

import logging
import statistics
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..core import constants
from ..core.date_utils import DateUtils
from ..models import DailySeries, Measurement

SeriesKey = Tuple[str, str]  # (point_id, label)


class TimeSeriesNormalizer:
    """Fill every calendar day of a period with a value."""

    METHODS = ("mean", "max")

    def __init__(
        self,
        timezone: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize normalizer.

        Args:
            timezone: Timezone used to decide which day a timestamp belongs to
            logger: Logger instance
        """
        self.timezone = timezone
        self.logger = logger or logging.getLogger(__name__)
        DateUtils.parse_timezone(timezone)

    def normalize(
        self,
        readings: Iterable[Tuple[datetime, float]],
        start: date,
        end: date,
        method: str = "mean"
    ) -> DailySeries:
        """
        Normalize readings into a gap-free daily series.

        Same-day readings are averaged (or their maximum taken with
        method='max') and rounded to 2 decimals; days without readings get 0.

        Args:
            readings: (timestamp, value) pairs in any order
            start: First day of the period
            end: Last day of the period (inclusive)
            method: 'mean' or 'max'

        Returns:
            DailySeries with exactly one value per day of [start, end]
        """
        if method not in self.METHODS:
            raise ValueError(f"Unknown normalization method: {method}")

        by_day: Dict[date, List[float]] = defaultdict(list)
        outside = 0
        for timestamp, value in readings:
            day = DateUtils.local_date(timestamp, self.timezone)
            if day < start or day > end:
                outside += 1
                continue
            by_day[day].append(value)

        if outside:
            self.logger.debug(f"Ignored {outside} readings outside {start}..{end}")

        values = []
        for day in DateUtils.days_in_range(start, end):
            day_values = by_day.get(day)
            if not day_values:
                values.append(0.0)
            elif method == "max":
                values.append(round(max(day_values), constants.DECIMAL_PLACES))
            else:
                values.append(round(statistics.mean(day_values), constants.DECIMAL_PLACES))

        return DailySeries(start, end, values)

    def normalize_by_point(
        self,
        measurements: Iterable[Measurement],
        start: date,
        end: date
    ) -> Dict[SeriesKey, DailySeries]:
        """
        Normalize measurements into one series per (point, parameter label).

        Cumulative meter readings keep the day's highest reading; every
        other parameter uses the daily mean.

        Args:
            measurements: Parsed measurements
            start: First day of the period
            end: Last day of the period (inclusive)

        Returns:
            Dictionary mapping (point_id, label) to its daily series, in
            first-seen order
        """
        grouped: Dict[SeriesKey, List[Tuple[datetime, float]]] = {}
        cumulative: Dict[SeriesKey, bool] = {}

        for m in measurements:
            key = (m.point_id, m.label)
            grouped.setdefault(key, []).append((m.timestamp, m.raw_value))
            cumulative[key] = cumulative.get(key, False) or m.cumulative

        series = {}
        for key, readings in grouped.items():
            method = "max" if cumulative[key] else "mean"
            series[key] = self.normalize(readings, start, end, method=method)

        self.logger.info(f"Normalized {len(series)} daily series for {start}..{end}")
        return series
