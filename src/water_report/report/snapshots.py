"""
Chart snapshot module.

Draws a chart's series into a PNG raster for embedding in the export.
"""

import io
import logging
from datetime import date
from typing import Any, Dict, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.dates as mdates  # noqa: E402
import matplotlib.pyplot as plt  # noqa: E402

from ..core import constants  # noqa: E402


class ChartSnapshotter:
    """Capture charts as PNG images with matplotlib."""

    def __init__(
        self,
        dpi: int = constants.CHART_DPI,
        size_inches=constants.CHART_SIZE_INCHES,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize chart snapshotter.

        Args:
            dpi: Output resolution
            size_inches: Figure (width, height) in inches
            logger: Logger instance
        """
        self.dpi = dpi
        self.size_inches = size_inches
        self.logger = logger or logging.getLogger(__name__)

    def capture(self, chart: Dict[str, Any]) -> Optional[bytes]:
        """
        Draw a chart and return its PNG bytes.

        Args:
            chart: Chart data as produced by the interactive surface
                   (title, dates, series, limit)

        Returns:
            PNG bytes, or None when the chart has nothing to draw
        """
        dates = [date.fromisoformat(d) for d in chart.get("dates", [])]
        series = chart.get("series", [])
        if not dates or not series:
            self.logger.debug(f"Nothing to draw for chart {chart.get('chart_id')}")
            return None

        fig, ax = plt.subplots(figsize=self.size_inches)
        try:
            for s in series:
                ax.plot(dates, s["values"], label=s["label"], color=s["color"], linewidth=1.5)

            limit = chart.get("limit")
            if limit is not None:
                ax.axhline(limit, color="#EF4444", linestyle="--", linewidth=1, label="Outorga")

            ax.set_title(chart.get("title", ""), fontsize=9)
            ax.xaxis.set_major_formatter(mdates.DateFormatter("%d/%m"))
            ax.tick_params(labelsize=7)
            ax.grid(True, alpha=0.3)
            ax.legend(fontsize=7, loc="upper left")
            fig.autofmt_xdate()
            fig.tight_layout()

            buf = io.BytesIO()
            fig.savefig(buf, format="png", dpi=self.dpi, bbox_inches="tight")
            return buf.getvalue()
        finally:
            plt.close(fig)
