"""
Report rendering for the water compliance report system.

Provides pagination, page composition and the interactive and export surfaces.
"""

from .paginator import PageAssignment, ReportPaginator
from .composer import PageComposer, content_signature, iter_chart_nodes
from .interactive import InteractiveRenderer
from .snapshots import ChartSnapshotter
from .export import ExportDocument, ExportRenderer
from .builder import ReportBuilder
from .stats import SeriesStats, panel_stats, series_stats

__all__ = [
    "PageAssignment",
    "ReportPaginator",
    "PageComposer",
    "content_signature",
    "iter_chart_nodes",
    "InteractiveRenderer",
    "ChartSnapshotter",
    "ExportDocument",
    "ExportRenderer",
    "ReportBuilder",
    "SeriesStats",
    "panel_stats",
    "series_stats",
]
