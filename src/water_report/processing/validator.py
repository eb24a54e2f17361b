"""
Measurement validation module.

Turns flattened source rows into measurements and resolves parameter labels.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.date_utils import DateUtils
from ..core.exceptions import MalformedMeasurementError
from ..models import Measurement, ParameterType


@dataclass(frozen=True)
class KnownParameter:
    """A parameter resolved from a value range."""

    parameter: ParameterType
    label: str
    cumulative: bool = False


@dataclass(frozen=True)
class UnknownParameter:
    """A value whose parameter could not be resolved."""

    value: float


ParameterInference = Union[KnownParameter, UnknownParameter]

_PH_PATTERN = re.compile(r"\bph\b")

# Labels that never carry a measurement value
IGNORED_LABELS = {"foto", "photo"}


def resolve_label(label: str) -> Optional[Tuple[ParameterType, str, bool]]:
    """
    Map a source parameter label onto a parameter type.

    Args:
        label: Label as stored at the source (e.g. 'pH', 'Cloro', 'Registro (m3)')

    Returns:
        Tuple of (parameter type, display label, cumulative) or None for
        labels that are not measurements
    """
    text = label.strip().lower()
    if not text or text in IGNORED_LABELS:
        return None

    if _PH_PATTERN.search(text):
        return ParameterType.PH, "pH", False
    if "cloro" in text or "chlorine" in text:
        return ParameterType.CHLORINE, "Cloro", False
    if "turbidez" in text or "turbidity" in text:
        return ParameterType.TURBIDITY, "Turbidez", False
    if "registro" in text or "hidrômetro" in text or "hidrometro" in text:
        return ParameterType.VOLUME, "Volume", True
    if "vazão" in text or "vazao" in text or text == "volume":
        return ParameterType.FLOW, "Vazão", False

    return ParameterType.OTHER, label.strip(), False


def infer_parameter(value: float) -> ParameterInference:
    """
    Guess a parameter from its value when the source row has no label.

    The guess is only used for display; inferred readings never enter
    compliance scoring.

    Args:
        value: Raw reading

    Returns:
        KnownParameter or UnknownParameter
    """
    if value is None or math.isnan(value) or value < 0:
        return UnknownParameter(value)
    if value < 5:
        return KnownParameter(ParameterType.CHLORINE, "Cloro")
    if value < 15:
        return KnownParameter(ParameterType.PH, "pH")
    if value < 1000:
        return KnownParameter(ParameterType.FLOW, "Vazão")
    return KnownParameter(ParameterType.VOLUME, "Volume", cumulative=True)


class MeasurementValidator:
    """Validate flattened rows and build measurements from them."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize measurement validator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def parse_row(self, row: Dict[str, Any]) -> Optional[Measurement]:
        """
        Build a measurement from a flattened row.

        Args:
            row: Dictionary with timestamp, point_id, point_name, area_name,
                 parameter_name, value and cumulative keys

        Returns:
            Measurement, or None when the row is not a measurement (photos)

        Raises:
            MalformedMeasurementError: If timestamp, value or point_id is
                missing or unparseable, or the parameter cannot be resolved
        """
        point_id = row.get("point_id")
        if not point_id:
            raise MalformedMeasurementError("missing collection point", row)

        raw_timestamp = row.get("timestamp")
        if not raw_timestamp:
            raise MalformedMeasurementError("missing timestamp", row)
        try:
            timestamp = DateUtils.parse_timestamp(raw_timestamp)
        except ValueError:
            raise MalformedMeasurementError(f"invalid timestamp {raw_timestamp!r}", row)

        label = row.get("parameter_name") or ""
        resolved = resolve_label(label) if label else None
        if label and resolved is None:
            return None

        value = self._parse_value(row)

        inferred = False
        cumulative = bool(row.get("cumulative"))
        if resolved is None:
            inference = infer_parameter(value)
            if isinstance(inference, UnknownParameter):
                raise MalformedMeasurementError(
                    f"unlabelled value {value} matches no known parameter", row
                )
            parameter, display_label = inference.parameter, inference.label
            cumulative = cumulative or inference.cumulative
            inferred = True
            self.logger.debug(
                f"Inferred {display_label} for unlabelled value {value} at {point_id}"
            )
        else:
            parameter, display_label, label_cumulative = resolved
            cumulative = cumulative or label_cumulative

        if cumulative and parameter is ParameterType.FLOW:
            parameter, display_label = ParameterType.VOLUME, "Volume"

        return Measurement(
            timestamp=timestamp,
            point_id=str(point_id),
            point_name=row.get("point_name") or str(point_id),
            area_name=row.get("area_name") or "",
            parameter=parameter,
            label=display_label,
            raw_value=value,
            cumulative=cumulative,
            inferred=inferred,
            sample_id=row.get("sample_id"),
        )

    def parse_rows(self, rows: List[Dict[str, Any]]) -> List[Measurement]:
        """
        Build measurements from rows, skipping malformed ones with a warning.

        Args:
            rows: Flattened rows

        Returns:
            List of measurements, in row order
        """
        measurements = []
        skipped = 0

        for row in rows:
            try:
                measurement = self.parse_row(row)
            except MalformedMeasurementError as e:
                skipped += 1
                self.logger.warning(f"Skipping malformed measurement: {e.reason}")
                continue
            if measurement is not None:
                measurements.append(measurement)

        if skipped:
            self.logger.warning(f"Skipped {skipped} of {len(rows)} rows")

        return measurements

    @staticmethod
    def _parse_value(row: Dict[str, Any]) -> float:
        raw_value = row.get("value")
        if raw_value is None or raw_value == "":
            raise MalformedMeasurementError("missing value", row)
        try:
            value = float(str(raw_value).replace(",", "."))
        except ValueError:
            raise MalformedMeasurementError(f"invalid value {raw_value!r}", row)
        if math.isnan(value) or math.isinf(value):
            raise MalformedMeasurementError(f"non-finite value {raw_value!r}", row)
        return value
