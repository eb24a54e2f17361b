"""
Data models for the water compliance report system.

Contains DTOs for measurements, compliance statistics, volumes and report pages.
"""

from .measurement import (
    ParameterType,
    RiskTier,
    ComplianceBand,
    Measurement,
    ParameterReading,
    Sample,
    NonComplianceEvent,
    DailySeries,
)
from .compliance import ParameterStats, ComplianceSummary
from .volume import (
    OutorgaLimit,
    VolumeResult,
    NonConformantDay,
    PointConformance,
    OutorgaReport,
)
from .report import (
    ClientInfo,
    ViewState,
    PointPanel,
    TableColumnGroup,
    TableCell,
    TableRow,
    MeasurementTable,
    PageContent,
    SummaryPage,
    VolumeGridPage,
    QualityGridPage,
    MeasurementTablePage,
    ReportModel,
    NoDataResult,
)

__all__ = [
    "ParameterType",
    "RiskTier",
    "ComplianceBand",
    "Measurement",
    "ParameterReading",
    "Sample",
    "NonComplianceEvent",
    "DailySeries",
    "ParameterStats",
    "ComplianceSummary",
    "OutorgaLimit",
    "VolumeResult",
    "NonConformantDay",
    "PointConformance",
    "OutorgaReport",
    "ClientInfo",
    "ViewState",
    "PointPanel",
    "TableColumnGroup",
    "TableCell",
    "TableRow",
    "MeasurementTable",
    "PageContent",
    "SummaryPage",
    "VolumeGridPage",
    "QualityGridPage",
    "MeasurementTablePage",
    "ReportModel",
    "NoDataResult",
]
