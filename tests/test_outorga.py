"""
Tests for permit (outorga) conformance.
"""

import pytest  # type: ignore
from datetime import date

from src.water_report.algorithms import OutorgaConformanceEvaluator
from src.water_report.models import DailySeries, OutorgaLimit

START = date(2024, 10, 1)
END = date(2024, 10, 5)


class TestOutorgaConformanceEvaluator:
    """Test cases for OutorgaConformanceEvaluator."""

    @pytest.fixture
    def evaluator(self):
        return OutorgaConformanceEvaluator()

    def test_evaluate(self, evaluator):
        series = DailySeries(START, END, [10.0, 0.0, 30.0, 20.0, 25.0])
        result = evaluator.evaluate("p1", "Poço 1", series, OutorgaLimit(20.0))

        assert result.days_with_reading == 4
        assert result.conformant_days == 2
        assert result.conformance_rate == 50.0
        assert [d.date for d in result.non_conformities] == [date(2024, 10, 3), date(2024, 10, 5)]
        assert result.non_conformities[0].exceedance_pct == 50.0
        assert result.non_conformities[1].exceedance_pct == 25.0

    def test_value_equal_to_limit_conforms(self, evaluator):
        series = DailySeries(START, END, [20.0] * 5)
        result = evaluator.evaluate("p1", "Poço 1", series, OutorgaLimit(20.0))
        assert result.non_conformities == []
        assert result.conformance_rate == 100.0

    def test_no_readings(self, evaluator):
        series = DailySeries(START, END, [0.0] * 5)
        result = evaluator.evaluate("p1", "Poço 1", series, OutorgaLimit(20.0))
        assert result.days_with_reading == 0
        assert result.conformance_rate == 100.0

    def test_non_positive_limit(self, evaluator):
        with pytest.raises(ValueError):
            evaluator.evaluate("p1", "Poço 1", DailySeries(START, END, [1.0] * 5), OutorgaLimit(0))

    def test_evaluate_all_orders_newest_first(self, evaluator):
        points = [
            ("p1", "Poço 1", DailySeries(START, END, [30.0, 0.0, 0.0, 30.0, 0.0])),
            ("p2", "Poço 2", DailySeries(START, END, [0.0, 0.0, 0.0, 30.0, 30.0])),
            ("p3", "Poço 3", DailySeries(START, END, [99.0] * 5)),
        ]
        report = evaluator.evaluate_all(points, {"p1": OutorgaLimit(20.0), "p2": OutorgaLimit(20.0)})

        assert [p.point_id for p in report.points] == ["p1", "p2"]
        assert [(d.date.day, d.point_id) for d in report.non_conformities] == [
            (5, "p2"), (4, "p1"), (4, "p2"), (1, "p1"),
        ]

    def test_evaluate_all_converts_litres(self, evaluator):
        points = [("p1", "Poço 1", DailySeries(START, END, [25.0] * 5))]
        report = evaluator.evaluate_all(points, {"p1": OutorgaLimit(20000.0, "L")})

        assert report.points[0].limit.unit == "m³"
        assert report.points[0].limit.value == pytest.approx(20.0)
        assert len(report.non_conformities) == 5

    def test_evaluate_all_skips_non_positive_limits(self, evaluator):
        points = [("p1", "Poço 1", DailySeries(START, END, [25.0] * 5))]
        report = evaluator.evaluate_all(points, {"p1": OutorgaLimit(-1.0)})
        assert report.points == []
        assert report.for_point("p1") is None
