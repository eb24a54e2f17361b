"""
Tests for daily time series normalization.
"""

import pytest  # type: ignore
from datetime import date, datetime, timedelta

import pytz

from src.water_report.processing import TimeSeriesNormalizer
from src.water_report.models import DailySeries, ParameterType

TZ = pytz.timezone("America/Sao_Paulo")


def local(year, month, day, hour=12):
    return TZ.localize(datetime(year, month, day, hour))


class TestTimeSeriesNormalizer:
    """Test cases for TimeSeriesNormalizer."""

    @pytest.fixture
    def normalizer(self):
        return TimeSeriesNormalizer("America/Sao_Paulo")

    def test_one_value_per_day(self, normalizer):
        """Output length equals the inclusive day count."""
        series = normalizer.normalize([], date(2024, 10, 1), date(2024, 10, 31))
        assert len(series) == 31
        assert series.values == [0.0] * 31

    def test_same_day_readings_are_averaged(self, normalizer):
        readings = [
            (local(2024, 10, 1, 8), 7.0),
            (local(2024, 10, 1, 14), 7.5),
            (local(2024, 10, 1, 20), 7.3),
            (local(2024, 10, 3, 9), 6.8),
        ]
        series = normalizer.normalize(readings, date(2024, 10, 1), date(2024, 10, 3))

        assert series.values == [7.27, 0.0, 6.8]

    def test_max_method(self, normalizer):
        readings = [(local(2024, 10, 1, 8), 100.0), (local(2024, 10, 1, 18), 112.5)]
        series = normalizer.normalize(readings, date(2024, 10, 1), date(2024, 10, 1), method="max")
        assert series.values == [112.5]

    def test_unknown_method(self, normalizer):
        with pytest.raises(ValueError):
            normalizer.normalize([], date(2024, 10, 1), date(2024, 10, 1), method="median")

    def test_readings_outside_period_are_ignored(self, normalizer):
        readings = [
            (local(2024, 9, 30), 9.0),
            (local(2024, 10, 1), 7.0),
            (local(2024, 10, 3), 9.0),
        ]
        series = normalizer.normalize(readings, date(2024, 10, 1), date(2024, 10, 2))
        assert series.values == [7.0, 0.0]

    def test_days_follow_report_timezone(self, normalizer):
        """01:00 UTC on the 2nd is still the 1st in São Paulo."""
        readings = [(pytz.utc.localize(datetime(2024, 10, 2, 1, 0)), 7.0)]
        series = normalizer.normalize(readings, date(2024, 10, 1), date(2024, 10, 2))
        assert series.values == [7.0, 0.0]

    def test_normalize_by_point(self, normalizer, make_measurement):
        start = date(2024, 10, 1)
        measurements = [
            make_measurement(local(2024, 10, 1), 7.0, point_id="p1"),
            make_measurement(local(2024, 10, 1), 1.5, ParameterType.CHLORINE, point_id="p1"),
            make_measurement(local(2024, 10, 2), 6.0, point_id="p2"),
            make_measurement(local(2024, 10, 1, 8), 500.0, ParameterType.VOLUME,
                             label="Volume", point_id="p3", cumulative=True),
            make_measurement(local(2024, 10, 1, 18), 510.0, ParameterType.VOLUME,
                             label="Volume", point_id="p3", cumulative=True),
        ]
        series = normalizer.normalize_by_point(measurements, start, start + timedelta(days=1))

        assert set(series) == {("p1", "pH"), ("p1", "Cloro"), ("p2", "pH"), ("p3", "Volume")}
        assert series[("p2", "pH")].values == [0.0, 6.0]
        # Cumulative meters keep the day's highest reading
        assert series[("p3", "Volume")].values == [510.0, 0.0]

    def test_meter_and_flow_stay_separate(self, normalizer, make_measurement):
        start = date(2024, 10, 21)
        measurements = [
            make_measurement(local(2024, 10, 21), 1000.0, ParameterType.VOLUME,
                             label="Volume", cumulative=True),
            make_measurement(local(2024, 10, 22), 30.0, ParameterType.FLOW),
        ]
        series = normalizer.normalize_by_point(measurements, start, start + timedelta(days=1))

        assert series[("p1", "Volume")].values == [1000.0, 0.0]
        assert series[("p1", "Vazão")].values == [0.0, 30.0]

    def test_by_point_buckets_in_report_timezone(self, normalizer, make_measurement):
        late = pytz.utc.localize(datetime(2024, 10, 2, 1, 0))
        series = normalizer.normalize_by_point(
            [make_measurement(late, 7.0)], date(2024, 10, 1), date(2024, 10, 2)
        )
        assert series[("p1", "pH")].values == [7.0, 0.0]


class TestDailySeries:
    """Test cases for the DailySeries invariant."""

    def test_length_must_match_period(self):
        with pytest.raises(ValueError):
            DailySeries(date(2024, 10, 1), date(2024, 10, 3), [1.0, 2.0])

    def test_dates(self):
        series = DailySeries(date(2024, 10, 30), date(2024, 11, 1), [1.0, 2.0, 3.0])
        assert series.dates == [date(2024, 10, 30), date(2024, 10, 31), date(2024, 11, 1)]
