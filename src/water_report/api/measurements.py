"""
Measurement operations for the REST source.

Handles retrieval of a client's measurements for a period.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

MEASUREMENT_SELECT = (
    "id,"
    "data_hora_medicao,"
    "ponto_de_coleta_id,"
    "area_de_trabalho:area_de_trabalho_id(nome_area),"
    "ponto_de_coleta:ponto_de_coleta_id(id,nome),"
    "medicao_items(parametro,valor,tipo_medicao_nome)"
)


class MeasurementsAPI:
    """Mixin for measurement-related API operations."""

    logger: logging.Logger

    def get(self, endpoint: str, params: Any = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_measurements(
        self,
        client_id: str,
        start: datetime,
        end: datetime
    ) -> List[Dict[str, Any]]:
        """
        Get measurements of a client between two instants.

        Args:
            client_id: Client ID
            start: Period start (inclusive, timezone-aware)
            end: Period end (inclusive, timezone-aware)

        Returns:
            List of measurement rows with nested point, area and items,
            oldest first
        """
        self.logger.info(f"Fetching measurements for client {client_id}")
        params = [
            ("select", MEASUREMENT_SELECT),
            ("cliente_id", f"eq.{client_id}"),
            ("data_hora_medicao", f"gte.{start.isoformat()}"),
            ("data_hora_medicao", f"lte.{end.isoformat()}"),
            ("order", "data_hora_medicao.asc"),
        ]
        result = self.get("/rest/v1/medicao", params=params)

        if isinstance(result, list):
            return result
        return result.get("data", [])
