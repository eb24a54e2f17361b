"""
Report pagination module.

Decides how many pages a report has and what each page holds.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core import constants
from ..models import (
    MeasurementTablePage,
    PageContent,
    QualityGridPage,
    SummaryPage,
    VolumeGridPage,
)


@dataclass(frozen=True)
class PageAssignment:
    """Content assigned to one page number."""

    number: int
    kind: str
    point_ids: Tuple[str, ...] = ()

    def to_page(self) -> PageContent:
        """Build the report model page for this assignment."""
        if self.kind == VolumeGridPage.kind:
            return VolumeGridPage(self.number, list(self.point_ids))
        if self.kind == QualityGridPage.kind:
            return QualityGridPage(self.number, list(self.point_ids))
        if self.kind == MeasurementTablePage.kind:
            return MeasurementTablePage(self.number)
        return SummaryPage(self.number)


class ReportPaginator:
    """
    Pure page layout: summary first, then volume grids, quality grids and
    the optional measurement table.
    """

    def __init__(
        self,
        points_per_page: int = constants.DEFAULT_POINTS_PER_PAGE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize paginator.

        Args:
            points_per_page: Chart panels per grid page
            logger: Logger instance
        """
        if points_per_page < 1:
            raise ValueError(f"points_per_page must be at least 1, got {points_per_page}")
        self.points_per_page = points_per_page
        self.logger = logger or logging.getLogger(__name__)

    def total_pages(self, volume_points: int, quality_points: int, has_table: bool) -> int:
        """
        Number of pages of a report.

        Args:
            volume_points: Points with volume data
            quality_points: Points with quality data
            has_table: Whether the measurement table page is included

        Returns:
            1 + ceil(volume / n) + ceil(quality / n) + (1 if has_table)
        """
        return (
            1
            + math.ceil(max(0, volume_points) / self.points_per_page)
            + math.ceil(max(0, quality_points) / self.points_per_page)
            + (1 if has_table else 0)
        )

    def assign(
        self,
        volume_ids: Sequence[str],
        quality_ids: Sequence[str],
        has_table: bool
    ) -> List[PageAssignment]:
        """
        Assign content to every page.

        Grid page k of a section holds points [k*n, k*n + n) in input order.

        Args:
            volume_ids: Point IDs with volume data, in display order
            quality_ids: Point IDs with quality data, in display order
            has_table: Whether the measurement table page is included

        Returns:
            Page assignments numbered from 1
        """
        pages = [PageAssignment(1, SummaryPage.kind)]

        for kind, ids in ((VolumeGridPage.kind, volume_ids), (QualityGridPage.kind, quality_ids)):
            for chunk in self._chunks(list(ids)):
                pages.append(PageAssignment(len(pages) + 1, kind, tuple(chunk)))

        if has_table:
            pages.append(PageAssignment(len(pages) + 1, MeasurementTablePage.kind))

        expected = self.total_pages(len(volume_ids), len(quality_ids), has_table)
        if len(pages) != expected:
            raise RuntimeError(f"Assigned {len(pages)} pages, expected {expected}")

        self.logger.debug(f"Paginated report into {len(pages)} pages")
        return pages

    def _chunks(self, ids: List[str]) -> List[List[str]]:
        size = self.points_per_page
        return [ids[i:i + size] for i in range(0, len(ids), size)]
