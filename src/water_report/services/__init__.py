"""
Business logic services for the water compliance report system.

Services orchestrate API operations and provide higher-level functionality.
"""

from .data_fetcher import DataFetcher

__all__ = [
    "DataFetcher",
]
