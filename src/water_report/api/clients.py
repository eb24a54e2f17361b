"""
Client operations for the REST source.

Handles retrieval of client identity shown on the report header.
"""

import logging
from typing import Any, Dict, Optional


class ClientsAPI:
    """Mixin for client API operations."""

    logger: logging.Logger

    def get(self, endpoint: str, params: Any = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_client(self, client_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a client by ID.

        Args:
            client_id: Client ID

        Returns:
            Client object (razao_social, cnpj_cpf, endereco, bairro, cidade)
            or None if not found
        """
        self.logger.info(f"Fetching client {client_id}")
        params = {
            "select": "id,razao_social,cnpj_cpf,endereco,bairro,cidade",
            "id": f"eq.{client_id}",
        }
        result = self.get("/rest/v1/clientes", params=params)

        if isinstance(result, list):
            return result[0] if result else None
        return result or None
