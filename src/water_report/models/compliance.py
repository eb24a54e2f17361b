"""
Compliance statistics models.

Contains the report-wide and per-parameter compliance roll-ups.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .measurement import NonComplianceEvent, ParameterType, RiskTier


@dataclass
class ParameterStats:
    """Compliance statistics for one quality parameter."""

    total_measurements: int = 0
    compliant_measurements: int = 0
    compliance_rate: float = 0.0
    average_value: float = 0.0
    non_compliant_values: List[NonComplianceEvent] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalMeasurements": self.total_measurements,
            "compliantMeasurements": self.compliant_measurements,
            "complianceRate": self.compliance_rate,
            "averageValue": self.average_value,
            "nonCompliantValues": [e.to_dict() for e in self.non_compliant_values],
        }


@dataclass
class ComplianceSummary:
    """Report-wide compliance roll-up, usable without pagination."""

    total_samples: int = 0
    compliant_samples: int = 0
    non_compliant_samples: int = 0
    compliance_rate: float = 0.0
    parameter_stats: Dict[ParameterType, ParameterStats] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)

    @property
    def high_risk_count(self) -> int:
        return sum(
            1
            for stats in self.parameter_stats.values()
            for event in stats.non_compliant_values
            if event.risk_tier is RiskTier.HIGH
        )

    def to_dict(self) -> dict:
        return {
            "totalSamples": self.total_samples,
            "compliantSamples": self.compliant_samples,
            "nonCompliantSamples": self.non_compliant_samples,
            "complianceRate": self.compliance_rate,
            "parameterStats": {
                parameter.name.lower(): stats.to_dict()
                for parameter, stats in self.parameter_stats.items()
            },
            "recommendations": list(self.recommendations),
        }
