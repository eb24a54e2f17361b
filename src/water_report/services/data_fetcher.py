"""
Data fetching service for water measurements.

Fetches measurements, permits and client identity from the API and
flattens nested rows for validation.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

import requests  # type: ignore

from ..core import DateUtils, constants
from ..core.exceptions import DataFetchError, EmptyResultError
from ..models import ClientInfo, Measurement, OutorgaLimit
from ..processing import MeasurementValidator

if TYPE_CHECKING:
    from ..api import WaterDataAPI


class DataFetcher:
    """Fetch and flatten report input data."""

    def __init__(
        self,
        api_client: "WaterDataAPI",
        timezone: str = constants.DEFAULT_TIMEZONE,
        validator: Optional[MeasurementValidator] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize data fetcher.

        Args:
            api_client: API client instance
            timezone: Timezone the report period is expressed in
            validator: Row validator
            logger: Logger instance
        """
        self.api_client = api_client
        self.timezone = timezone
        self.logger = logger or logging.getLogger(__name__)
        self.validator = validator or MeasurementValidator(logger=self.logger)
        self.date_utils = DateUtils(logger)

    def fetch_rows(self, client_id: str, start: date, end: date) -> List[Dict[str, Any]]:
        """
        Fetch a client's measurement rows, flattened to one row per value.

        Args:
            client_id: Client ID
            start: First day of the period
            end: Last day of the period (inclusive)

        Returns:
            Flat rows with timestamp, point_id, point_name, area_name,
            parameter_name, value and sample_id keys

        Raises:
            DataFetchError: If the source cannot be reached
            EmptyResultError: If the source has no measurements for the period
        """
        start_dt, end_dt = self.date_utils.get_period_range(start, end, self.timezone)

        try:
            raw_rows = self.api_client.get_measurements(client_id, start_dt, end_dt)
        except requests.exceptions.RequestException as e:
            raise DataFetchError(f"Failed to fetch measurements: {e}", cause=e)

        if not raw_rows:
            raise EmptyResultError(client_id, start, end)

        rows = []
        for raw in raw_rows:
            rows.extend(self.flatten_row(raw))

        self.logger.info(f"Fetched {len(raw_rows)} measurements ({len(rows)} values)")
        return rows

    def fetch_measurements(self, client_id: str, start: date, end: date) -> List[Measurement]:
        """
        Fetch and validate a client's measurements.

        Malformed rows are skipped with a warning.

        Args:
            client_id: Client ID
            start: First day of the period
            end: Last day of the period (inclusive)

        Returns:
            Parsed measurements

        Raises:
            DataFetchError: If the source cannot be reached
            EmptyResultError: If no usable measurement remains
        """
        measurements = self.validator.parse_rows(self.fetch_rows(client_id, start, end))
        if not measurements:
            raise EmptyResultError(client_id, start, end)
        return measurements

    def fetch_permits(self, point_ids: Iterable[str]) -> Dict[str, OutorgaLimit]:
        """
        Fetch permit limits of collection points.

        Points without a usable permit are left out.

        Args:
            point_ids: Collection point IDs

        Returns:
            Dictionary mapping point ID to its permit limit

        Raises:
            DataFetchError: If the source cannot be reached
        """
        try:
            points = self.api_client.get_collection_points(point_ids)
        except requests.exceptions.RequestException as e:
            raise DataFetchError(f"Failed to fetch collection points: {e}", cause=e)

        limits = {}
        for point in points:
            limit = self.parse_permit(point.get("outorga"))
            if limit is not None:
                limits[str(point.get("id"))] = limit

        self.logger.info(f"Found permits for {len(limits)} of {len(points)} collection points")
        return limits

    def fetch_client(self, client_id: str) -> ClientInfo:
        """
        Fetch the client shown on the report header.

        Args:
            client_id: Client ID

        Returns:
            ClientInfo; a client missing at the source is shown by its ID

        Raises:
            DataFetchError: If the source cannot be reached
        """
        try:
            client = self.api_client.get_client(client_id)
        except requests.exceptions.RequestException as e:
            raise DataFetchError(f"Failed to fetch client: {e}", cause=e)

        if not client:
            self.logger.warning(f"Client {client_id} not found, using its ID as name")
            return ClientInfo(name=str(client_id))

        return ClientInfo(
            name=client.get("razao_social") or str(client_id),
            tax_id=client.get("cnpj_cpf") or "",
            address=client.get("endereco") or "",
            district=client.get("bairro") or "",
            city=client.get("cidade") or "",
        )

    @staticmethod
    def flatten_row(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Flatten one nested measurement row.

        Args:
            raw: Row with data_hora_medicao, ponto_de_coleta, area_de_trabalho
                 and medicao_items

        Returns:
            One flat row per measurement item
        """
        point = raw.get("ponto_de_coleta") or {}
        area = raw.get("area_de_trabalho") or {}
        point_id = raw.get("ponto_de_coleta_id") or point.get("id")

        base = {
            "timestamp": raw.get("data_hora_medicao"),
            "point_id": str(point_id) if point_id else None,
            "point_name": point.get("nome"),
            "area_name": area.get("nome_area"),
            "sample_id": str(raw["id"]) if raw.get("id") is not None else None,
        }

        rows = []
        for item in raw.get("medicao_items") or []:
            row = dict(base)
            row["parameter_name"] = item.get("parametro") or item.get("tipo_medicao_nome") or ""
            row["value"] = item.get("valor")
            rows.append(row)
        return rows

    def parse_permit(self, outorga: Any) -> Optional[OutorgaLimit]:
        """
        Parse a permit object.

        Args:
            outorga: {"volumeMax": {"value": ..., "unit": ...}} as dict or JSON text

        Returns:
            OutorgaLimit, or None if absent or unusable
        """
        if not outorga:
            return None

        if isinstance(outorga, str):
            try:
                outorga = json.loads(outorga)
            except ValueError:
                self.logger.warning(f"Ignoring unparseable permit: {outorga!r}")
                return None

        volume_max = outorga.get("volumeMax") if isinstance(outorga, dict) else None
        if not isinstance(volume_max, dict) or volume_max.get("value") in (None, ""):
            return None

        try:
            value = float(str(volume_max["value"]).replace(",", "."))
        except ValueError:
            self.logger.warning(f"Ignoring permit with invalid value: {volume_max['value']!r}")
            return None

        return OutorgaLimit(value=value, unit=volume_max.get("unit") or "m³")
