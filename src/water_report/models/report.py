"""
Report data models.

Contains the page model shared by the interactive and export surfaces.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Mapping, Optional, Tuple

from .compliance import ComplianceSummary
from .measurement import DailySeries
from .volume import OutorgaLimit, OutorgaReport


@dataclass
class ClientInfo:
    """Client identity, display only."""

    name: str
    tax_id: str = ""
    address: str = ""
    district: str = ""
    city: str = ""


@dataclass(frozen=True)
class ViewState:
    """Per-report visibility of chart series, keyed by parameter label."""

    visibility: Mapping[str, bool] = field(default_factory=dict)

    def is_visible(self, label: str) -> bool:
        return self.visibility.get(label, True)

    def toggled(self, label: str) -> "ViewState":
        """New state with one label's visibility flipped."""
        updated = dict(self.visibility)
        updated[label] = not self.is_visible(label)
        return ViewState(updated)


@dataclass
class PointPanel:
    """Chart panel for one collection point on a grid page."""

    point_id: str
    point_name: str
    area_name: str
    series: Dict[str, DailySeries] = field(default_factory=dict)
    units: Dict[str, str] = field(default_factory=dict)
    limit: Optional[OutorgaLimit] = None
    total_consumption: Optional[float] = None

    @property
    def title(self) -> str:
        if self.area_name:
            return f"{self.area_name} - {self.point_name}"
        return self.point_name

    @property
    def labels(self) -> List[str]:
        return sorted(self.series)


@dataclass
class TableColumnGroup:
    """Measurement table header for one collection point."""

    point_id: str
    point_name: str
    parameters: List[Tuple[str, str]] = field(default_factory=list)  # (label, unit)


@dataclass
class TableCell:
    value: float
    status: str = "normal"


@dataclass
class TableRow:
    date: date
    cells: Dict[Tuple[str, str], TableCell] = field(default_factory=dict)


@dataclass
class MeasurementTable:
    """Per-day measurement table, ordered by date ascending."""

    columns: List[TableColumnGroup] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)


@dataclass
class PageContent:
    """Base class for one page of the report."""

    number: int

    kind = "page"


@dataclass
class SummaryPage(PageContent):
    kind = "summary"


@dataclass
class VolumeGridPage(PageContent):
    point_ids: List[str] = field(default_factory=list)

    kind = "volume_grid"


@dataclass
class QualityGridPage(PageContent):
    point_ids: List[str] = field(default_factory=list)

    kind = "quality_grid"


@dataclass
class MeasurementTablePage(PageContent):
    kind = "measurement_table"


@dataclass
class ReportModel:
    """Everything needed to render every page of a report."""

    report_id: str
    generated_at: datetime
    client: ClientInfo
    start: date
    end: date
    volume_panels: List[PointPanel] = field(default_factory=list)
    quality_panels: List[PointPanel] = field(default_factory=list)
    compliance: ComplianceSummary = field(default_factory=ComplianceSummary)
    outorga: OutorgaReport = field(default_factory=OutorgaReport)
    table: Optional[MeasurementTable] = None
    days_with_measurements: int = 0
    pages: List[PageContent] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def page(self, number: int) -> PageContent:
        if not 1 <= number <= len(self.pages):
            raise IndexError(f"Page {number} out of range 1..{len(self.pages)}")
        return self.pages[number - 1]

    def volume_panel(self, point_id: str) -> PointPanel:
        return _find_panel(self.volume_panels, point_id)

    def quality_panel(self, point_id: str) -> PointPanel:
        return _find_panel(self.quality_panels, point_id)


@dataclass
class NoDataResult:
    """Outcome of a period with no measurements at all."""

    client_id: str
    start: date
    end: date
    message: str


def _find_panel(panels: List[PointPanel], point_id: str) -> PointPanel:
    for panel in panels:
        if panel.point_id == point_id:
            return panel
    raise KeyError(point_id)
