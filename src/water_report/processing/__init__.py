"""
Data processing module for the water compliance report system.

Provides row validation, daily normalization, volume deltas and unit conversion.
"""

from .converter import UnitConverter
from .normalizer import TimeSeriesNormalizer
from .validator import (
    MeasurementValidator,
    KnownParameter,
    UnknownParameter,
    infer_parameter,
    resolve_label,
)
from .volume import VolumeDeltaCalculator

__all__ = [
    "UnitConverter",
    "TimeSeriesNormalizer",
    "MeasurementValidator",
    "KnownParameter",
    "UnknownParameter",
    "infer_parameter",
    "resolve_label",
    "VolumeDeltaCalculator",
]
