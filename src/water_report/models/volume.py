"""
Volume and permit data models.

Contains DTOs for daily consumption and outorga (permit) conformance.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .measurement import DailySeries


@dataclass(frozen=True)
class OutorgaLimit:
    """Maximum volume granted by a water-extraction permit."""

    value: float
    unit: str = "m³"


@dataclass
class VolumeResult:
    """Daily consumption derived from a cumulative meter."""

    daily: DailySeries
    total_consumption: float
    interpolated_dates: List[date] = field(default_factory=list)


@dataclass
class NonConformantDay:
    """A day whose consumption exceeded the permit."""

    date: date
    point_id: str
    point_name: str
    value: float
    limit: float
    exceedance_pct: float

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "pointId": self.point_id,
            "pointName": self.point_name,
            "value": self.value,
            "limit": self.limit,
            "exceedance": self.exceedance_pct,
        }


@dataclass
class PointConformance:
    """Permit conformance of one collection point over the period."""

    point_id: str
    point_name: str
    limit: OutorgaLimit
    days_with_reading: int
    conformant_days: int
    conformance_rate: float
    non_conformities: List[NonConformantDay] = field(default_factory=list)


@dataclass
class OutorgaReport:
    """Permit conformance across all points of a report."""

    points: List[PointConformance] = field(default_factory=list)
    non_conformities: List[NonConformantDay] = field(default_factory=list)

    def for_point(self, point_id: str) -> Optional[PointConformance]:
        for point in self.points:
            if point.point_id == point_id:
                return point
        return None
