"""
Tests for the report builder, page composition and both report surfaces.
"""

import base64
import pytest  # type: ignore
from datetime import date, datetime, timedelta
from unittest.mock import Mock

import pytz

from src.water_report.core import constants
from src.water_report.models import (
    ClientInfo,
    NonConformantDay,
    OutorgaLimit,
    OutorgaReport,
    ParameterType,
    ReportModel,
    SummaryPage,
    ViewState,
)
from src.water_report.report import (
    ChartSnapshotter,
    ExportRenderer,
    InteractiveRenderer,
    PageComposer,
    ReportBuilder,
    content_signature,
    iter_chart_nodes,
)
from src.water_report.report.formatting import color_for, format_value, truncate_rows

PNG = b"\x89PNG\r\n\x1a\nfake"


def fake_clock():
    """Clock/sleep pair where sleeping advances time instantly."""
    now = [0.0]

    def clock():
        return now[0]

    def sleep(seconds):
        now[0] += seconds

    return clock, sleep


def make_exporter(snapshotter=None, timeout=1.0):
    clock, sleep = fake_clock()
    if snapshotter is None:
        snapshotter = Mock()
        snapshotter.capture.return_value = PNG
    return ExportRenderer(
        snapshotter=snapshotter,
        capture_timeout=timeout,
        poll_interval=0.1,
        clock=clock,
        sleep=sleep,
    )


class TestReportBuilder:
    """Test cases for ReportBuilder."""

    def test_pages(self, report_model):
        assert report_model.report_id == "WQR-20241101"
        assert [p.kind for p in report_model.pages] == [
            "summary", "volume_grid", "quality_grid", "measurement_table",
        ]

    def test_volume_panel(self, report_model):
        panel = report_model.volume_panel("p1")

        assert panel.series["Volume"].values == [0.0, 20.0, 20.0, 25.0, 25.0, 25.0]
        assert panel.total_consumption == 115.0
        assert panel.limit.value == 24.0

    def test_quality_panel(self, report_model):
        panel = report_model.quality_panel("p2")
        assert panel.labels == ["Cloro", "Turbidez", "pH"]
        assert panel.series["pH"].values == [7.0, 4.0, 0.0, 0.0, 0.0, 0.0]

    def test_compliance(self, report_model):
        summary = report_model.compliance
        assert summary.total_samples == 2
        assert summary.compliance_rate == 50.0
        assert len(summary.recommendations) == 2

    def test_outorga(self, report_model):
        point = report_model.outorga.for_point("p1")
        assert point.days_with_reading == 5
        assert point.conformance_rate == 40.0
        assert [d.date.day for d in report_model.outorga.non_conformities] == [29, 28, 27]

    def test_measurement_table(self, report_model):
        table = report_model.table
        assert [row.date.day for row in table.rows] == [24, 25, 26, 27, 28, 29]
        assert table.rows[1].cells[("p2", "Cloro")].status == "critical"
        assert table.rows[1].cells[("p2", "pH")].status == "warning"
        assert table.rows[0].cells[("p2", "pH")].status == "normal"

    def test_days_with_measurements(self, report_model):
        assert report_model.days_with_measurements == 5

    def test_aggregation_failure_keeps_pagination(self, sample_measurements, period):
        builder = ReportBuilder()
        builder.aggregator.aggregate = Mock(side_effect=RuntimeError("boom"))
        model = builder.build(ClientInfo("X"), sample_measurements, {}, *period)

        assert model.compliance.total_samples == 0
        assert model.total_pages == 4

    def test_without_table(self, sample_measurements, period):
        builder = ReportBuilder(include_table=False)
        model = builder.build(ClientInfo("X"), sample_measurements, {}, *period)
        assert model.table is None
        assert model.total_pages == 3

    def test_meter_and_flow_on_one_point(self, make_measurement):
        tz = pytz.timezone("America/Sao_Paulo")
        monday = tz.localize(datetime(2024, 10, 21, 9))
        measurements = [
            make_measurement(monday, 1000.0, ParameterType.VOLUME, label="Volume", cumulative=True),
            make_measurement(monday + timedelta(days=1), 30.0, ParameterType.FLOW),
            make_measurement(monday + timedelta(days=2), 1050.0, ParameterType.VOLUME,
                             label="Volume", cumulative=True),
        ]
        model = ReportBuilder().build(
            ClientInfo("X"), measurements, {"p1": OutorgaLimit(100.0)},
            date(2024, 10, 21), date(2024, 10, 23),
        )
        panel = model.volume_panel("p1")

        assert panel.series["Volume"].values == [0.0, 0.0, 50.0]
        assert panel.series["Vazão"].values == [0.0, 30.0, 0.0]
        assert panel.total_consumption == 50.0
        assert model.outorga.non_conformities == []
        assert model.outorga.for_point("p1").days_with_reading == 1

    def test_flow_only_point_counts_flow(self, make_measurement):
        tz = pytz.timezone("America/Sao_Paulo")
        day = tz.localize(datetime(2024, 10, 22, 9))
        measurements = [
            make_measurement(day, 30.0, ParameterType.FLOW),
            make_measurement(day + timedelta(days=1), 130.0, ParameterType.FLOW),
        ]
        model = ReportBuilder().build(
            ClientInfo("X"), measurements, {"p1": OutorgaLimit(100.0)},
            date(2024, 10, 22), date(2024, 10, 23),
        )

        assert model.volume_panel("p1").total_consumption == 160.0
        assert [d.value for d in model.outorga.non_conformities] == [130.0]


class TestFormatting:
    """Test cases for shared formatting helpers."""

    def test_truncate(self):
        shown, footer = truncate_rows(list(range(15)), 10)
        assert shown == list(range(10))
        assert footer == "showing 10 of 15"

    def test_no_truncation(self):
        assert truncate_rows([1, 2], 10) == ([1, 2], None)

    def test_format_value(self):
        assert format_value(2.5, "Cloro") == "2.50 mg/L"
        assert format_value(7.123, "pH") == "7.12"
        assert format_value(None, "Cloro") == "-"

    def test_fallback_color_is_stable(self):
        assert color_for("Nitrato") == color_for("Nitrato")
        assert color_for("Nitrato") in constants.FALLBACK_COLORS
        assert color_for("pH") == constants.MEASUREMENT_COLORS["pH"]


class TestPageComposer:
    """Test cases for PageComposer."""

    @pytest.fixture
    def composer(self):
        return PageComposer()

    def test_summary_page(self, composer, report_model):
        tree = composer.compose(report_model, 1)
        body = {node["type"]: node for node in tree["body"] if node["type"] != "table"}

        assert tree["footer"]["page"] == "Página 1 de 4"
        assert tree["header"]["period"] == "24/10/2024 - 29/10/2024"
        assert [i["value"] for i in body["counters"]["items"]] == ["2", "5", "4", "1"]
        assert body["compliance_summary"]["compliance_rate"] == "50.00%"
        assert body["compliance_summary"]["operator_ph_range"] == "6.50 - 8.50"

    def test_volume_page(self, composer, report_model):
        tree = composer.compose(report_model, 2)
        panel = tree["body"][0]["panels"][0]

        assert panel["title"] == "ETA - Poço 1"
        assert panel["consumption"] == "C: 115.00 m³"
        assert panel["permit"] == "Máx: 24.00 m³"
        assert panel["stats"] == [
            {"label": "Volume", "min": "20.00", "avg": "23.00", "max": "25.00", "total": "115.00"}
        ]

    def test_measurement_table_page(self, composer, report_model):
        tree = composer.compose(report_model, 4)
        table = tree["body"][0]

        assert [c["point"] for c in table["columns"]] == ["Poço 1", "Saída"]
        cells = table["rows"][1]["cells"]
        assert [c["value"] for c in cells] == ["20.00", "6.50", "-", "4.00"]
        assert cells[1]["color"] == constants.STATUS_COLORS["critical"]

    def test_nonconformity_table_is_truncated(self, composer):
        start = date(2024, 10, 1)
        days = [
            NonConformantDay(start + timedelta(days=i), "p1", "Poço 1", 30.0, 20.0, 50.0)
            for i in range(15)
        ]
        model = ReportModel(
            report_id="WQR-20241101",
            generated_at=datetime(2024, 11, 1),
            client=ClientInfo("X"),
            start=start,
            end=start + timedelta(days=14),
            outorga=OutorgaReport(non_conformities=days),
            pages=[SummaryPage(1)],
        )
        tree = composer.compose(model, 1)
        table = next(n for n in tree["body"] if n.get("id") == "outorga_nonconformities")

        assert len(table["rows"]) == 10
        assert table["footer"] == "showing 10 of 15"

    def test_page_out_of_range(self, composer, report_model):
        with pytest.raises(IndexError):
            composer.compose(report_model, 5)

    def test_hidden_series(self, composer, report_model):
        tree = composer.compose(report_model, 3, ViewState({"pH": False}))
        panel = tree["body"][0]["panels"][0]

        assert [s["label"] for s in panel["stats"]] == ["Cloro", "Turbidez"]
        assert {l["label"]: l["visible"] for l in panel["legend"]}["pH"] is False

    def test_deterministic(self, composer, report_model):
        for page in range(1, report_model.total_pages + 1):
            assert composer.compose(report_model, page) == composer.compose(report_model, page)


class TestInteractiveRenderer:
    """Test cases for interactive navigation."""

    @pytest.fixture
    def view(self, report_model):
        return InteractiveRenderer(report_model)

    def test_initial_page(self, view):
        assert view.current_page == 1

    def test_navigation_is_clamped(self, view):
        assert view.previous() == 1
        for _ in range(10):
            view.next()
        assert view.current_page == 4
        assert view.go_to(99) == 4
        assert view.go_to(-3) == 1

    def test_reset(self, view):
        view.go_to(3)
        assert view.reset() == 1

    def test_render_attaches_chart_data(self, view):
        view.go_to(2)
        tree = view.render()
        chart = next(iter_chart_nodes(tree))

        assert chart["data"]["limit"] == 24.0
        assert chart["data"]["series"][0]["values"] == [0.0, 20.0, 20.0, 25.0, 25.0, 25.0]
        assert chart["data"]["dates"][0] == "2024-10-24"

    def test_stability(self, view):
        assert not view.is_stable()
        view.render()
        assert view.is_stable()
        view.next()
        assert not view.is_stable()

    def test_toggle_series(self, view):
        view.go_to(3)
        view.toggle_series("pH")
        chart = next(iter_chart_nodes(view.render()))
        assert [s["label"] for s in chart["data"]["series"]] == ["Cloro", "Turbidez"]


class TestExportRenderer:
    """Test cases for the export surface."""

    def test_parity_with_interactive(self, report_model):
        interactive = InteractiveRenderer(report_model)
        document = make_exporter().export(interactive)

        assert len(document.pages) == report_model.total_pages
        for number, exported in enumerate(document.pages, start=1):
            interactive.go_to(number)
            assert content_signature(exported) == content_signature(interactive.render())

    def test_snapshots_are_embedded(self, report_model):
        document = make_exporter().export(InteractiveRenderer(report_model))
        chart = next(iter_chart_nodes(document.pages[1]))

        assert base64.b64decode(chart["image"]["data"]) == PNG
        assert document.placeholders == 0

    def test_missing_snapshot_becomes_placeholder(self, report_model):
        snapshotter = Mock()
        snapshotter.capture.side_effect = lambda chart: None if chart["chart_id"].endswith("p2") else PNG
        document = make_exporter(snapshotter).export(InteractiveRenderer(report_model))

        quality_chart = next(iter_chart_nodes(document.pages[2]))
        assert quality_chart["placeholder"]["type"] == "placeholder"
        assert "image" not in quality_chart
        assert document.placeholders == 1

    def test_failing_snapshot_becomes_placeholder(self, report_model):
        snapshotter = Mock()
        snapshotter.capture.side_effect = RuntimeError("renderer crashed")
        document = make_exporter(snapshotter).export(InteractiveRenderer(report_model))

        assert document.placeholders == 2
        assert len(document.pages) == 4

    def test_page_timeout_degrades_only_that_page(self, report_model):
        class SlowPage(InteractiveRenderer):
            def is_stable(self):
                return self.current_page != 2 and super().is_stable()

        document = make_exporter().export(SlowPage(report_model))

        assert document.timed_out_pages == [2]
        assert len(document.pages) == 4
        volume_chart = next(iter_chart_nodes(document.pages[1]))
        assert volume_chart["placeholder"]["reason"] == "page capture timed out"
        assert "image" in next(iter_chart_nodes(document.pages[2]))

    def test_export_restores_current_page(self, report_model):
        interactive = InteractiveRenderer(report_model)
        interactive.go_to(3)
        make_exporter().export(interactive)
        assert interactive.current_page == 3

    def test_export_is_deterministic(self, report_model):
        first = make_exporter().export(InteractiveRenderer(report_model)).to_dict()
        second = make_exporter().export(InteractiveRenderer(report_model)).to_dict()
        assert first == second


class TestChartSnapshotter:
    """Test cases for matplotlib chart snapshots."""

    def test_capture_png(self, report_model):
        view = InteractiveRenderer(report_model)
        png = ChartSnapshotter().capture(view.chart_data("volume_grid:p1"))
        assert png.startswith(b"\x89PNG")

    def test_nothing_to_draw(self):
        assert ChartSnapshotter().capture({"chart_id": "x", "dates": [], "series": []}) is None
