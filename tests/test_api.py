"""
Tests for the REST API client layer.
"""

import unittest
from unittest.mock import Mock
from datetime import datetime

import pytz
import requests  # type: ignore

from src.water_report.api import WaterDataAPI


class TestWaterDataAPI(unittest.TestCase):
    """Test API client request building."""

    def setUp(self):
        """Set up test fixtures."""
        self.api = WaterDataAPI(
            base_url="https://example.supabase.co/",
            api_key="anon-key",
            logger=Mock()
        )
        self.response = Mock()
        self.response.json.return_value = []
        self.api.session.request = Mock(return_value=self.response)

    def test_headers(self):
        """Test API key headers."""
        self.assertEqual(self.api.session.headers["apikey"], "anon-key")
        self.assertEqual(self.api.session.headers["Authorization"], "Bearer anon-key")

    def test_get_measurements(self):
        """Test measurement query parameters."""
        tz = pytz.timezone("America/Sao_Paulo")
        start = tz.localize(datetime(2024, 10, 1))
        end = tz.localize(datetime(2024, 10, 31, 23, 59, 59))

        self.api.get_measurements("c1", start, end)

        kwargs = self.api.session.request.call_args[1]
        self.assertEqual(kwargs["url"], "https://example.supabase.co/rest/v1/medicao")
        params = kwargs["params"]
        self.assertIn(("cliente_id", "eq.c1"), params)
        self.assertIn(("data_hora_medicao", "gte.2024-10-01T00:00:00-03:00"), params)
        self.assertIn(("data_hora_medicao", "lte.2024-10-31T23:59:59-03:00"), params)

    def test_get_collection_points(self):
        """Test permit query filters by point IDs."""
        self.api.get_collection_points(["p2", "p1", "p1"])

        params = self.api.session.request.call_args[1]["params"]
        self.assertEqual(params["id"], "in.(p1,p2)")

    def test_get_collection_points_without_ids(self):
        """Test that no request is made without point IDs."""
        self.assertEqual(self.api.get_collection_points([]), [])
        self.api.session.request.assert_not_called()

    def test_get_client(self):
        """Test that a client lookup returns the first row."""
        self.response.json.return_value = [{"id": "c1", "razao_social": "ACME"}]
        self.assertEqual(self.api.get_client("c1")["razao_social"], "ACME")

    def test_http_error_propagates(self):
        """Test that HTTP errors are raised to the caller."""
        self.response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")

        with self.assertRaises(requests.exceptions.HTTPError):
            self.api.get_client("c1")
