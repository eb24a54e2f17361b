"""
Water Compliance Report System

This package turns raw water-quality and volume measurements into a
paginated regulatory compliance report with matching interactive and
export renderings.
"""

__version__ = "0.1.0"
__description__ = "Water quality and volume compliance reports"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "WaterReportApp":
        from .main import WaterReportApp
        return WaterReportApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "WaterReportApp",
]
