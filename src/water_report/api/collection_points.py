"""
Collection point operations for the REST source.

Handles retrieval of per-point water-use permits.
"""

import logging
from typing import Any, Dict, Iterable, List


class CollectionPointsAPI:
    """Mixin for collection point API operations."""

    logger: logging.Logger

    def get(self, endpoint: str, params: Any = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_collection_points(self, point_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """
        Get collection points with their permit data.

        Args:
            point_ids: Collection point IDs

        Returns:
            List of {id, nome, outorga} objects; outorga is a JSON object
            like {"volumeMax": {"value": 120, "unit": "m³"}} or null
        """
        ids = sorted(set(point_ids))
        if not ids:
            return []

        self.logger.info(f"Fetching permits for {len(ids)} collection points")
        params = {
            "select": "id,nome,outorga",
            "id": f"in.({','.join(ids)})",
        }
        result = self.get("/rest/v1/ponto_de_coleta", params=params)

        if isinstance(result, list):
            return result
        return result.get("data", [])
