"""
Unit conversion module.

Converts permit volumes into the unit daily consumption is reported in.
"""

import logging
from typing import Optional

from ..models import OutorgaLimit


class UnitConverter:
    """Convert between volume units."""

    # Factors to cubic metres
    _TO_CUBIC_METERS = {
        "m³": 1.0,
        "m3": 1.0,
        "l": 0.001,
        "litro": 0.001,
        "litros": 0.001,
        "kl": 1.0,
        "ml": 0.000001,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize unit converter.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def convert_volume(self, value: float, from_unit: str, to_unit: str = "m³") -> float:
        """
        Convert a volume between units.

        A rate suffix such as '/dia' is ignored; unknown units pass through.

        Args:
            value: Volume
            from_unit: Source unit (e.g. 'L', 'm³/dia')
            to_unit: Target unit

        Returns:
            Converted volume
        """
        source = self._base_unit(from_unit)
        target = self._base_unit(to_unit)
        if source == target:
            return value

        source_factor = self._TO_CUBIC_METERS.get(source)
        target_factor = self._TO_CUBIC_METERS.get(target)
        if source_factor is None or target_factor is None:
            self.logger.warning(f"Unknown volume unit '{from_unit}' or '{to_unit}', keeping value")
            return value

        return value * source_factor / target_factor

    def limit_in_cubic_meters(self, limit: OutorgaLimit) -> OutorgaLimit:
        """Express a permit limit in cubic metres."""
        value = self.convert_volume(limit.value, limit.unit, "m³")
        return OutorgaLimit(value=value, unit="m³")

    @staticmethod
    def _base_unit(unit: str) -> str:
        return (unit or "m³").split("/")[0].strip().lower()
