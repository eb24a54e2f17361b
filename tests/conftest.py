"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from datetime import date, datetime
from pathlib import Path

import pytest
import json

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.water_report.models import ClientInfo, Measurement, OutorgaLimit, ParameterType  # noqa: E402
from src.water_report.processing import MeasurementValidator  # noqa: E402
from src.water_report.report import ReportBuilder  # noqa: E402
from src.water_report.services import DataFetcher  # noqa: E402


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_data(fixtures_dir):
    """Load sample measurement rows from fixtures."""
    data_file = fixtures_dir / "sample_measurements.json"
    with open(data_file, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def period():
    """Thursday 24/10/2024 to Tuesday 29/10/2024."""
    return date(2024, 10, 24), date(2024, 10, 29)


@pytest.fixture
def sample_measurements(sample_data):
    """Measurements parsed from the fixture rows."""
    rows = []
    for raw in sample_data["measurements"]:
        rows.extend(DataFetcher.flatten_row(raw))
    return MeasurementValidator().parse_rows(rows)


@pytest.fixture
def report_model(sample_measurements, period):
    """Report model of the fixture data with a 24 m³ permit on p1."""
    start, end = period
    builder = ReportBuilder(timezone="America/Sao_Paulo")
    return builder.build(
        client=ClientInfo(name="Condomínio Águas Claras", tax_id="12.345.678/0001-90"),
        measurements=sample_measurements,
        permits={"p1": OutorgaLimit(24.0)},
        start=start,
        end=end,
        generated_at=datetime(2024, 11, 1, 10, 0),
    )


@pytest.fixture
def make_measurement():
    """Factory for single measurements."""
    def _make(
        timestamp,
        value,
        parameter=ParameterType.PH,
        label=None,
        point_id="p1",
        point_name="Ponto 1",
        sample_id=None,
        inferred=False,
        cumulative=False,
    ):
        return Measurement(
            timestamp=timestamp,
            point_id=point_id,
            point_name=point_name,
            area_name="",
            parameter=parameter,
            label=label or parameter.value,
            raw_value=value,
            cumulative=cumulative,
            inferred=inferred,
            sample_id=sample_id,
        )
    return _make


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring API access"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
