"""
Per-series display statistics.

Derived on demand from a panel and a view state; nothing is stored.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..core import constants
from ..models import DailySeries, PointPanel, ViewState


@dataclass(frozen=True)
class SeriesStats:
    """Statistics shown under a chart, over days with a nonzero value."""

    minimum: Optional[float]
    average: Optional[float]
    maximum: Optional[float]
    total: Optional[float] = None  # volume series only

    def to_dict(self) -> dict:
        data = {"min": self.minimum, "avg": self.average, "max": self.maximum}
        if self.total is not None:
            data["total"] = self.total
        return data


def series_stats(series: DailySeries, include_total: bool = False) -> SeriesStats:
    """
    Compute display statistics of one series.

    Args:
        series: Daily series (0 = no reading)
        include_total: Add the period total (volume series)

    Returns:
        SeriesStats; all None when the series has no nonzero day
    """
    values = [v for v in series.values if v != 0]
    if not values:
        return SeriesStats(None, None, None, 0.0 if include_total else None)

    places = constants.DECIMAL_PLACES
    return SeriesStats(
        minimum=round(min(values), places),
        average=round(sum(values) / len(values), places),
        maximum=round(max(values), places),
        total=round(sum(values), places) if include_total else None,
    )


def panel_stats(
    panel: PointPanel,
    view_state: ViewState,
    include_total: bool = False
) -> Dict[str, SeriesStats]:
    """
    Statistics of every visible series of a panel, keyed by label.

    Args:
        panel: Chart panel
        view_state: Series visibility
        include_total: Add period totals (volume panels)

    Returns:
        Dictionary of label to stats, in label order
    """
    return {
        label: series_stats(panel.series[label], include_total)
        for label in panel.labels
        if view_state.is_visible(label)
    }
