"""
Tests for row validation and parameter resolution.
"""

import pytest  # type: ignore
from unittest.mock import Mock

from src.water_report.core.exceptions import MalformedMeasurementError
from src.water_report.models import ParameterType
from src.water_report.processing import (
    KnownParameter,
    MeasurementValidator,
    UnknownParameter,
    infer_parameter,
    resolve_label,
)


def row(**overrides):
    data = {
        "point_id": "p1",
        "point_name": "Poço 1",
        "area_name": "ETA",
        "timestamp": "2024-10-24T08:00:00-03:00",
        "parameter_name": "pH",
        "value": "7.2",
    }
    data.update(overrides)
    return data


class TestResolveLabel:
    """Test cases for label resolution."""

    @pytest.mark.parametrize("label,expected", [
        ("pH", (ParameterType.PH, "pH", False)),
        ("Cloro Residual Livre", (ParameterType.CHLORINE, "Cloro", False)),
        ("Turbidez", (ParameterType.TURBIDITY, "Turbidez", False)),
        ("Registro (m3)", (ParameterType.VOLUME, "Volume", True)),
        ("Hidrômetro", (ParameterType.VOLUME, "Volume", True)),
        ("Vazão", (ParameterType.FLOW, "Vazão", False)),
        ("Condutividade", (ParameterType.OTHER, "Condutividade", False)),
    ])
    def test_labels(self, label, expected):
        assert resolve_label(label) == expected

    def test_photo_is_not_a_measurement(self):
        assert resolve_label("Foto") is None

    def test_ph_needs_a_word_boundary(self):
        """'Phosphate' must not be read as pH."""
        assert resolve_label("Phosphate")[0] is ParameterType.OTHER


class TestInferParameter:
    """Test cases for value-range inference."""

    @pytest.mark.parametrize("value,parameter,cumulative", [
        (1.2, ParameterType.CHLORINE, False),
        (7.0, ParameterType.PH, False),
        (150.0, ParameterType.FLOW, False),
        (12500.0, ParameterType.VOLUME, True),
    ])
    def test_ranges(self, value, parameter, cumulative):
        result = infer_parameter(value)
        assert isinstance(result, KnownParameter)
        assert result.parameter is parameter
        assert result.cumulative is cumulative

    def test_negative_is_unknown(self):
        assert isinstance(infer_parameter(-1.0), UnknownParameter)


class TestMeasurementValidator:
    """Test cases for MeasurementValidator."""

    @pytest.fixture
    def validator(self):
        return MeasurementValidator(logger=Mock())

    def test_parse_row(self, validator):
        m = validator.parse_row(row())

        assert m.parameter is ParameterType.PH
        assert m.raw_value == 7.2
        assert m.point_name == "Poço 1"
        assert m.day.isoformat() == "2024-10-24"
        assert not m.inferred

    def test_comma_decimal_separator(self, validator):
        assert validator.parse_row(row(value="4,5")).raw_value == 4.5

    @pytest.mark.parametrize("overrides", [
        {"point_id": None},
        {"timestamp": None},
        {"timestamp": "not a date"},
        {"value": None},
        {"value": "abc"},
        {"value": "nan"},
    ])
    def test_malformed_rows(self, validator, overrides):
        with pytest.raises(MalformedMeasurementError):
            validator.parse_row(row(**overrides))

    def test_unlabelled_value_is_inferred(self, validator):
        m = validator.parse_row(row(parameter_name="", value="2.5"))
        assert m.parameter is ParameterType.CHLORINE
        assert m.inferred

    def test_flow_keeps_its_own_label(self, validator):
        m = validator.parse_row(row(parameter_name="Vazão", value="30"))
        assert m.parameter is ParameterType.FLOW
        assert m.label == "Vazão"
        assert not m.cumulative

    def test_cumulative_flow_becomes_volume(self, validator):
        m = validator.parse_row(row(parameter_name="Vazão", value="1500", cumulative=True))
        assert m.parameter is ParameterType.VOLUME
        assert m.label == "Volume"
        assert m.cumulative

    def test_parse_rows_skips_malformed(self, validator):
        rows = [row(), row(value=None), row(parameter_name="Foto", value="http://x"), row(value="7.4")]
        measurements = validator.parse_rows(rows)

        assert [m.raw_value for m in measurements] == [7.2, 7.4]
        validator.logger.warning.assert_called()
