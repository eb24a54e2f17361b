"""
Compliance aggregation module.

Rolls scored samples up into report-wide statistics and recommendations.
"""

import logging
import statistics
from typing import Dict, List, Optional

from ..core import constants
from ..models import (
    ComplianceSummary,
    NonComplianceEvent,
    ParameterStats,
    ParameterType,
    RiskTier,
    Sample,
)

QUALITY_PARAMETERS = (ParameterType.PH, ParameterType.CHLORINE, ParameterType.TURBIDITY)

HIGH_RISK_ALERTS = {
    ParameterType.PH: (
        "Atenção: {count} medições de pH com risco alto detectadas. "
        "Verificar sistema de correção de pH."
    ),
    ParameterType.CHLORINE: (
        "Atenção: {count} medições de cloro residual com risco alto. "
        "Revisar dosagem de cloro."
    ),
    ParameterType.TURBIDITY: (
        "Atenção: {count} medições de turbidez com risco alto. "
        "Verificar sistema de filtração."
    ),
}

GENERAL_REVIEW_MESSAGE = (
    "Taxa de conformidade abaixo de 90%. "
    "Recomenda-se revisão geral dos processos de tratamento."
)

ALL_WITHIN_LIMITS_MESSAGE = (
    "Todos os parâmetros estão dentro dos limites de conformidade. "
    "Manter monitoramento regular."
)


def _rate(part: int, total: int) -> float:
    """Percentage rounded to 2 decimals and clamped to [0, 100]; 0 when total is 0."""
    if total <= 0:
        return 0.0
    return round(min(100.0, max(0.0, part / total * 100)), constants.DECIMAL_PLACES)


class ComplianceAggregator:
    """Aggregate sample compliance across a report."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize compliance aggregator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def aggregate(self, samples: List[Sample]) -> ComplianceSummary:
        """
        Calculate compliance statistics and recommendations.

        Args:
            samples: Scored samples

        Returns:
            ComplianceSummary with per-parameter statistics for pH, chlorine
            and turbidity, and recommendations in fixed order
        """
        total = len(samples)
        compliant = sum(1 for s in samples if s.overall_compliance)

        parameter_stats = {
            parameter: self._parameter_stats(parameter, samples)
            for parameter in QUALITY_PARAMETERS
        }
        compliance_rate = _rate(compliant, total)
        exact_rate = compliant / total * 100 if total else 0.0

        summary = ComplianceSummary(
            total_samples=total,
            compliant_samples=compliant,
            non_compliant_samples=total - compliant,
            compliance_rate=compliance_rate,
            parameter_stats=parameter_stats,
            recommendations=self.recommendations(parameter_stats, exact_rate),
        )

        self.logger.info(
            f"Compliance: {compliant}/{total} samples compliant ({compliance_rate:.2f}%)"
        )
        return summary

    @staticmethod
    def recommendations(
        parameter_stats: Dict[ParameterType, ParameterStats],
        compliance_rate: float
    ) -> List[str]:
        """
        Build recommendations from the fixed rule set.

        Rules, in order: one alert per parameter with high-risk readings,
        a general review when the rate is below 90%, and an all-clear
        message when nothing else fired.

        Args:
            parameter_stats: Per-parameter statistics
            compliance_rate: Overall compliance rate, unrounded

        Returns:
            List of recommendation strings
        """
        recommendations = []

        for parameter in QUALITY_PARAMETERS:
            stats = parameter_stats.get(parameter)
            if stats is None:
                continue
            high_risk = sum(
                1 for event in stats.non_compliant_values
                if event.risk_tier is RiskTier.HIGH
            )
            if high_risk > 0:
                recommendations.append(HIGH_RISK_ALERTS[parameter].format(count=high_risk))

        if compliance_rate < constants.GENERAL_REVIEW_THRESHOLD:
            recommendations.append(GENERAL_REVIEW_MESSAGE)

        if not recommendations:
            recommendations.append(ALL_WITHIN_LIMITS_MESSAGE)

        return recommendations

    @staticmethod
    def _parameter_stats(parameter: ParameterType, samples: List[Sample]) -> ParameterStats:
        values = []
        events = []

        for sample in samples:
            reading = next((r for r in sample.readings if r.parameter is parameter), None)
            if reading is None:
                continue
            values.append(reading.value)
            if not reading.is_compliant:
                events.append(NonComplianceEvent(
                    timestamp=sample.timestamp,
                    point_id=sample.point_id,
                    point_name=sample.point_name,
                    parameter=parameter,
                    value=reading.value,
                    deviation_pct=reading.deviation_pct,
                    risk_tier=reading.risk_tier,
                ))

        # Newest first
        events.sort(key=lambda e: e.timestamp.timestamp(), reverse=True)

        total = len(values)
        return ParameterStats(
            total_measurements=total,
            compliant_measurements=total - len(events),
            compliance_rate=_rate(total - len(events), total),
            average_value=round(statistics.mean(values), constants.DECIMAL_PLACES) if values else 0.0,
            non_compliant_values=events,
        )
