"""
Outorga (water-use permit) conformance module.

Compares daily consumption against each point's permitted maximum.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..core import constants
from ..models import (
    DailySeries,
    NonConformantDay,
    OutorgaLimit,
    OutorgaReport,
    PointConformance,
)
from ..processing.converter import UnitConverter


class OutorgaConformanceEvaluator:
    """Evaluate daily volumes against permit limits."""

    def __init__(
        self,
        converter: Optional[UnitConverter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize outorga evaluator.

        Args:
            converter: Unit converter for permit limits
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.converter = converter or UnitConverter(logger=self.logger)

    def evaluate(
        self,
        point_id: str,
        point_name: str,
        daily_series: DailySeries,
        limit: OutorgaLimit
    ) -> PointConformance:
        """
        Evaluate one point's daily consumption against its permit.

        A day is non-conformant when its value strictly exceeds the limit.
        Days with a zero value count as days without a reading.

        Args:
            point_id: Collection point ID
            point_name: Collection point name
            daily_series: Daily consumption in the limit's unit
            limit: Permit limit (must be positive)

        Returns:
            PointConformance with non-conformities in date order

        Raises:
            ValueError: If the limit is not positive
        """
        if limit.value <= 0:
            raise ValueError(f"Permit limit for {point_name} must be positive, got {limit.value}")

        days_with_reading = 0
        non_conformities = []

        for day, value in zip(daily_series.dates, daily_series.values):
            if value != 0:
                days_with_reading += 1
            if value > limit.value:
                exceedance = max(0.0, (value - limit.value) / limit.value * 100)
                non_conformities.append(NonConformantDay(
                    date=day,
                    point_id=point_id,
                    point_name=point_name,
                    value=value,
                    limit=limit.value,
                    exceedance_pct=round(exceedance, constants.DECIMAL_PLACES),
                ))

        conformant = days_with_reading - len(non_conformities)
        if days_with_reading:
            rate = round(conformant / days_with_reading * 100, constants.DECIMAL_PLACES)
        else:
            rate = 100.0

        if non_conformities:
            self.logger.info(
                f"{point_name}: {len(non_conformities)} days above permit of "
                f"{limit.value:.2f} {limit.unit}"
            )

        return PointConformance(
            point_id=point_id,
            point_name=point_name,
            limit=limit,
            days_with_reading=days_with_reading,
            conformant_days=conformant,
            conformance_rate=rate,
            non_conformities=non_conformities,
        )

    def evaluate_all(
        self,
        points: List[Tuple[str, str, DailySeries]],
        limits: Dict[str, OutorgaLimit]
    ) -> OutorgaReport:
        """
        Evaluate every point that has a permit.

        Args:
            points: (point_id, point_name, daily consumption in m³) tuples
            limits: Permit limit per point ID

        Returns:
            OutorgaReport with all non-conformities, newest first; ties keep
            point order
        """
        report = OutorgaReport()

        for point_id, point_name, series in points:
            limit = limits.get(point_id)
            if limit is None:
                continue
            if limit.value <= 0:
                self.logger.warning(
                    f"Ignoring non-positive permit limit {limit.value} for {point_name}"
                )
                continue

            limit = self.converter.limit_in_cubic_meters(limit)
            conformance = self.evaluate(point_id, point_name, series, limit)
            report.points.append(conformance)
            report.non_conformities.extend(conformance.non_conformities)

        report.non_conformities.sort(key=lambda d: d.date, reverse=True)
        return report
