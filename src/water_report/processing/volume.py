"""
Volume delta module.

Converts cumulative meter readings into daily consumption.
"""

import logging
from datetime import date
from typing import List, Optional

from ..core import constants
from ..core.date_utils import DateUtils
from ..core.exceptions import InterpolationSkipped
from ..models import DailySeries, VolumeResult


class VolumeDeltaCalculator:
    """
    Derive daily consumption from a cumulative meter.

    Meters are usually not read on Sundays, so Monday's delta carries two
    days of consumption. When that happens the Monday delta is split evenly
    between Sunday and Monday.

    Assumes a single monotonically increasing meter; resets and rollovers
    are not detected.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize volume delta calculator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def daily_deltas(self, cumulative: DailySeries) -> DailySeries:
        """
        Daily consumption from per-day cumulative readings.

        A zero reading means "no reading" and is bridged with the last known
        reading. The first day, and any day before the first reading, is 0.
        Negative differences are clamped to 0.

        Args:
            cumulative: Per-day cumulative meter values (0 = no reading)

        Returns:
            Series of daily deltas rounded to 2 decimals
        """
        deltas = []
        previous: Optional[float] = None

        for value in cumulative.values:
            current = value if value != 0 else previous
            if current is None or previous is None:
                deltas.append(0.0)
            else:
                deltas.append(round(max(0.0, current - previous), constants.DECIMAL_PLACES))
            previous = current

        return cumulative.with_values(deltas)

    @staticmethod
    def total_consumption(cumulative: DailySeries) -> float:
        """
        Consumption over the whole period.

        Args:
            cumulative: Per-day cumulative meter values (0 = no reading)

        Returns:
            Last nonzero reading minus first nonzero reading, 0 with no readings
        """
        readings = [v for v in cumulative.values if v != 0]
        if not readings:
            return 0.0
        return round(readings[-1] - readings[0], constants.DECIMAL_PLACES)

    def interpolate_weekends(self, deltas: DailySeries) -> DailySeries:
        """
        Split a Monday delta between Monday and a zero Sunday before it.

        Only Sunday -> Monday pairs are considered. A Sunday with a nonzero
        delta or a Monday with a zero delta is left unchanged.

        Args:
            deltas: Daily consumption series

        Returns:
            New series with redistributed values
        """
        return deltas.with_values(self._interpolate(deltas)[0])

    def calculate(self, cumulative: DailySeries) -> VolumeResult:
        """
        Full conversion of a cumulative meter series.

        Args:
            cumulative: Per-day cumulative meter values (0 = no reading)

        Returns:
            VolumeResult with interpolated daily deltas and period total
        """
        deltas = self.daily_deltas(cumulative)
        values, interpolated = self._interpolate(deltas)
        return VolumeResult(
            daily=deltas.with_values(values),
            total_consumption=self.total_consumption(cumulative),
            interpolated_dates=interpolated,
        )

    def _interpolate(self, deltas: DailySeries):
        values = list(deltas.values)
        dates = deltas.dates
        interpolated: List[date] = []

        for i in range(1, len(values)):
            if not DateUtils.is_monday(dates[i]):
                continue
            try:
                half = self._split_monday(dates[i - 1], values[i - 1], values[i])
            except InterpolationSkipped as e:
                self.logger.debug(f"Interpolation skipped for {e.day}: {e.reason}")
                continue

            self.logger.debug(
                f"Interpolated Sunday {dates[i - 1]}: {half} (from Monday {dates[i]}: {values[i]})"
            )
            values[i - 1] = half
            values[i] = half
            interpolated.append(dates[i - 1])

        return values, interpolated

    @staticmethod
    def _split_monday(sunday: date, sunday_value: float, monday_value: float) -> float:
        if not DateUtils.is_sunday(sunday):
            raise InterpolationSkipped(sunday, "previous day is not a Sunday")
        if sunday_value != 0:
            raise InterpolationSkipped(sunday, "Sunday already has a reading")
        if monday_value == 0:
            raise InterpolationSkipped(sunday, "Monday has no consumption")
        return round(monday_value / 2, constants.DECIMAL_PLACES)
