"""
Measurement data models.

Contains DTOs for raw measurements, classified readings and samples.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from ..core.date_utils import DateUtils


class ParameterType(Enum):
    """Measured parameter kinds known to the report."""

    PH = "pH"
    CHLORINE = "Cloro"
    TURBIDITY = "Turbidez"
    VOLUME = "Volume"  # cumulative meter reading
    FLOW = "Vazão"  # volume already expressed per day
    OTHER = "Outro"

    @property
    def is_quality(self) -> bool:
        return self in (ParameterType.PH, ParameterType.CHLORINE, ParameterType.TURBIDITY)

    @property
    def is_volume(self) -> bool:
        return self in (ParameterType.VOLUME, ParameterType.FLOW)


class RiskTier(Enum):
    """Severity of an out-of-band reading."""

    LOW = "baixo"
    MEDIUM = "médio"
    HIGH = "alto"


@dataclass(frozen=True)
class ComplianceBand:
    """Regulatory range within which a parameter is acceptable."""

    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self):
        # Relative deviation is undefined against a zero bound
        if self.min == 0 or self.max == 0:
            raise ValueError("Compliance band bounds must be nonzero")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"Band min {self.min} exceeds max {self.max}")

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    def describe(self) -> str:
        if self.min is not None and self.max is not None:
            return f"{self.min:.1f} - {self.max:.1f}"
        if self.max is not None:
            return f"≤ {self.max:.1f}"
        if self.min is not None:
            return f"≥ {self.min:.1f}"
        return "-"


@dataclass
class Measurement:
    """A single raw reading, flattened from a fetched row."""

    timestamp: datetime
    point_id: str
    point_name: str
    area_name: str
    parameter: ParameterType
    label: str  # display label, e.g. "pH", "Volume", "Condutividade"
    raw_value: float
    cumulative: bool = False
    inferred: bool = False  # parameter guessed from the value range
    sample_id: Optional[str] = None


@dataclass
class ParameterReading:
    """A reading scored against its compliance band."""

    parameter: ParameterType
    name: str
    value: float
    unit: str
    band: ComplianceBand
    is_compliant: bool
    deviation_pct: float = 0.0
    risk_tier: Optional[RiskTier] = None


@dataclass
class Sample:
    """One timestamped bundle of quality readings for a collection point."""

    timestamp: datetime
    point_id: str
    point_name: str
    area_name: str
    ph: Optional[ParameterReading] = None
    chlorine: Optional[ParameterReading] = None
    turbidity: Optional[ParameterReading] = None

    @property
    def readings(self) -> List[ParameterReading]:
        return [r for r in (self.ph, self.chlorine, self.turbidity) if r is not None]

    @property
    def overall_compliance(self) -> bool:
        return all(r.is_compliant for r in self.readings)

    @property
    def non_compliance_count(self) -> int:
        return sum(1 for r in self.readings if not r.is_compliant)


@dataclass
class NonComplianceEvent:
    """An out-of-band quality reading."""

    timestamp: datetime
    point_id: str
    point_name: str
    parameter: ParameterType
    value: float
    deviation_pct: float
    risk_tier: RiskTier

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "pointId": self.point_id,
            "pointName": self.point_name,
            "parameter": self.parameter.value,
            "value": self.value,
            "deviation": self.deviation_pct,
            "riskLevel": self.risk_tier.value,
        }


@dataclass
class DailySeries:
    """One value per calendar day of [start, end], gap-free."""

    start: date
    end: date
    values: List[float] = field(default_factory=list)

    def __post_init__(self):
        expected = DateUtils.day_count(self.start, self.end)
        if len(self.values) != expected:
            raise ValueError(
                f"Series for {self.start}..{self.end} needs {expected} values, "
                f"got {len(self.values)}"
            )

    @property
    def dates(self) -> List[date]:
        return DateUtils.days_in_range(self.start, self.end)

    def __len__(self) -> int:
        return len(self.values)

    def with_values(self, values: List[float]) -> "DailySeries":
        """Same period, new values."""
        return DailySeries(self.start, self.end, list(values))
