"""
API layer for the water measurement REST source.

Provides a low-level client for measurements, collection points and clients.
"""

import logging
from typing import Optional

from .client import APIClient
from .measurements import MeasurementsAPI
from .collection_points import CollectionPointsAPI
from .clients import ClientsAPI


class WaterDataAPI(APIClient, MeasurementsAPI, CollectionPointsAPI, ClientsAPI):
    """
    Unified API client for the measurement source.

    Combines measurement, collection point and client operations.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize unified API client.

        Args:
            base_url: Base URL for the API
            api_key: Project API key
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            verify_ssl=verify_ssl,
            logger=logger
        )


__all__ = [
    "APIClient",
    "MeasurementsAPI",
    "CollectionPointsAPI",
    "ClientsAPI",
    "WaterDataAPI",
]
