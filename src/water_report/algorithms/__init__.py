"""
Calculation algorithms for water compliance reporting.

Provides compliance classification, aggregation and permit conformance.
"""

from .compliance import (
    ComplianceClassifier,
    ComplianceResult,
    REGULATORY_BANDS,
    OPERATOR_PH_DISPLAY_RANGE,
    risk_tier_for,
)
from .aggregator import ComplianceAggregator
from .outorga import OutorgaConformanceEvaluator

__all__ = [
    "ComplianceClassifier",
    "ComplianceResult",
    "REGULATORY_BANDS",
    "OPERATOR_PH_DISPLAY_RANGE",
    "risk_tier_for",
    "ComplianceAggregator",
    "OutorgaConformanceEvaluator",
]
