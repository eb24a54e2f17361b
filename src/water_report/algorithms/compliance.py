"""
Compliance classification module.

Scores quality readings against their regulatory bands and bundles them
into samples.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..core import constants
from ..models import (
    ComplianceBand,
    Measurement,
    ParameterReading,
    ParameterType,
    RiskTier,
    Sample,
)

# Regulatory bands used for scoring
REGULATORY_BANDS: Dict[ParameterType, ComplianceBand] = {
    ParameterType.PH: ComplianceBand(min=constants.PH_MIN, max=constants.PH_MAX),
    ParameterType.CHLORINE: ComplianceBand(max=constants.CHLORINE_MAX),
    ParameterType.TURBIDITY: ComplianceBand(max=constants.TURBIDITY_MAX),
}

# Operator display range for pH, shown on the summary page only
OPERATOR_PH_DISPLAY_RANGE = (
    constants.OPERATOR_PH_DISPLAY_MIN,
    constants.OPERATOR_PH_DISPLAY_MAX,
)

READING_NAMES = {
    ParameterType.PH: "pH",
    ParameterType.CHLORINE: "Cloro Residual",
    ParameterType.TURBIDITY: "Turbidez",
}

READING_UNITS = {
    ParameterType.PH: "",
    ParameterType.CHLORINE: "mg/L",
    ParameterType.TURBIDITY: "NTU",
}


@dataclass(frozen=True)
class ComplianceResult:
    """Outcome of scoring one value against one band."""

    is_compliant: bool
    deviation_pct: float = 0.0
    risk_tier: Optional[RiskTier] = None


def risk_tier_for(deviation_pct: float) -> RiskTier:
    """
    Map a deviation percentage onto a risk tier.

    Args:
        deviation_pct: Deviation past the violated bound, in percent

    Returns:
        LOW up to 10%, MEDIUM up to 25%, HIGH above
    """
    if deviation_pct <= constants.RISK_LOW_MAX_DEVIATION:
        return RiskTier.LOW
    if deviation_pct <= constants.RISK_MEDIUM_MAX_DEVIATION:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


class ComplianceClassifier:
    """Classify quality readings against regulatory bands."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize compliance classifier.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def classify(value: float, band: ComplianceBand) -> ComplianceResult:
        """
        Score a value against a band.

        Deviation is measured relative to the violated bound and rounded to
        2 decimals before the risk tier is chosen, so a value displayed as
        10.00% is always LOW.

        Args:
            value: Measured value
            band: Band with a min, a max or both

        Returns:
            ComplianceResult; compliant readings have deviation 0 and no tier
        """
        if band.min is not None and value < band.min:
            deviation = (band.min - value) / band.min * 100
        elif band.max is not None and value > band.max:
            deviation = (value - band.max) / band.max * 100
        else:
            return ComplianceResult(is_compliant=True)

        deviation = round(abs(deviation), constants.DECIMAL_PLACES)
        return ComplianceResult(
            is_compliant=False,
            deviation_pct=deviation,
            risk_tier=risk_tier_for(deviation),
        )

    def reading(self, parameter: ParameterType, value: float) -> ParameterReading:
        """
        Build a scored reading for a quality parameter.

        Args:
            parameter: PH, CHLORINE or TURBIDITY
            value: Measured value

        Returns:
            ParameterReading with its regulatory band and classification

        Raises:
            ValueError: If the parameter has no regulatory band
        """
        band = REGULATORY_BANDS.get(parameter)
        if band is None:
            raise ValueError(f"No compliance band for parameter {parameter.value}")

        result = self.classify(value, band)
        return ParameterReading(
            parameter=parameter,
            name=READING_NAMES[parameter],
            value=value,
            unit=READING_UNITS[parameter],
            band=band,
            is_compliant=result.is_compliant,
            deviation_pct=result.deviation_pct,
            risk_tier=result.risk_tier,
        )

    def build_samples(self, measurements: Iterable[Measurement]) -> List[Sample]:
        """
        Bundle quality measurements into scored samples.

        Measurements sharing a sample id (or, without one, the same point and
        timestamp) form one sample. Inferred readings and non-quality
        parameters are left out. When a bundle holds the same parameter
        twice, the last one wins.

        Args:
            measurements: Parsed measurements

        Returns:
            Samples ordered by timestamp
        """
        bundles: Dict[Tuple, Sample] = {}
        excluded = 0

        for m in measurements:
            if not m.parameter.is_quality:
                continue
            if m.inferred:
                excluded += 1
                continue

            key = ("id", m.sample_id) if m.sample_id else ("at", m.point_id, m.timestamp)
            sample = bundles.get(key)
            if sample is None:
                sample = Sample(
                    timestamp=m.timestamp,
                    point_id=m.point_id,
                    point_name=m.point_name,
                    area_name=m.area_name,
                )
                bundles[key] = sample

            scored = self.reading(m.parameter, m.raw_value)
            if m.parameter is ParameterType.PH:
                sample.ph = scored
            elif m.parameter is ParameterType.CHLORINE:
                sample.chlorine = scored
            else:
                sample.turbidity = scored

        if excluded:
            self.logger.info(f"Excluded {excluded} inferred readings from compliance scoring")

        samples = sorted(bundles.values(), key=lambda s: s.timestamp.timestamp())
        self.logger.debug(f"Built {len(samples)} samples")
        return samples
