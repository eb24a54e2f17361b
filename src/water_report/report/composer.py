"""
Page composition module.

Builds the page-content tree of one report page. Both the interactive and the
export surface go through PageComposer, so point subsets, ordering,
truncation and number formatting can only differ in the chart payload each
surface attaches.
"""

import copy
import logging
from typing import Any, Dict, Iterator, List, Optional

from ..algorithms.compliance import OPERATOR_PH_DISPLAY_RANGE, REGULATORY_BANDS, READING_NAMES
from ..core import constants
from ..core.date_utils import DateUtils
from ..models import (
    MeasurementTablePage,
    ParameterType,
    PointPanel,
    QualityGridPage,
    ReportModel,
    SummaryPage,
    ViewState,
    VolumeGridPage,
)
from .formatting import (
    color_for,
    format_number,
    format_percent,
    format_value,
    truncate_rows,
    unit_for,
)
from .stats import panel_stats

# Keys a surface may add to a chart node
CHART_PAYLOAD_KEYS = ("data", "image", "placeholder")


def chart_id_for(kind: str, point_id: str) -> str:
    return f"{kind}:{point_id}"


def iter_chart_nodes(tree: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """Yield every chart node of a page tree, in document order."""
    if tree.get("type") == "chart":
        yield tree
        return
    for value in tree.values():
        children = value if isinstance(value, list) else [value]
        for child in children:
            if isinstance(child, dict):
                yield from iter_chart_nodes(child)


def content_signature(tree: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of a page tree without surface-specific chart payloads.

    Two surfaces rendered the same page identically iff their signatures
    are equal.
    """
    stripped = copy.deepcopy(tree)
    for node in iter_chart_nodes(stripped):
        for key in CHART_PAYLOAD_KEYS:
            node.pop(key, None)
    return stripped


class PageComposer:
    """Compose page-content trees from a report model."""

    def __init__(
        self,
        max_nonconformity_rows: int = constants.DEFAULT_MAX_NONCONFORMITY_ROWS,
        max_table_rows: int = constants.DEFAULT_MAX_TABLE_ROWS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize page composer.

        Args:
            max_nonconformity_rows: Row cap of non-conformity tables
            max_table_rows: Row cap of the measurement table
            logger: Logger instance
        """
        self.max_nonconformity_rows = max_nonconformity_rows
        self.max_table_rows = max_table_rows
        self.logger = logger or logging.getLogger(__name__)

    def compose(
        self,
        model: ReportModel,
        page_number: int,
        view_state: Optional[ViewState] = None
    ) -> Dict[str, Any]:
        """
        Build the content tree of one page.

        Args:
            model: Report model
            page_number: Page number (1-based)
            view_state: Series visibility; all visible when omitted

        Returns:
            Page tree with header, body nodes and footer

        Raises:
            IndexError: If the page number is out of range
        """
        view_state = view_state or ViewState()
        page = model.page(page_number)

        if isinstance(page, VolumeGridPage):
            body = [self._grid(model, page.kind, page.point_ids, view_state, volume=True)]
        elif isinstance(page, QualityGridPage):
            body = [self._grid(model, page.kind, page.point_ids, view_state, volume=False)]
        elif isinstance(page, MeasurementTablePage):
            body = [self._measurement_table(model)]
        elif isinstance(page, SummaryPage):
            body = self._summary(model)
        else:
            raise TypeError(f"Unknown page type: {type(page).__name__}")

        return {
            "type": "page",
            "number": page_number,
            "total_pages": model.total_pages,
            "kind": page.kind,
            "header": self._header(model),
            "body": body,
            "footer": {
                "system": constants.SYSTEM_NAME,
                "page": f"Página {page_number} de {model.total_pages}",
            },
        }

    def chart_data(
        self,
        model: ReportModel,
        chart_id: str,
        view_state: Optional[ViewState] = None
    ) -> Dict[str, Any]:
        """
        Raw series of one chart, as drawn by the interactive surface.

        Args:
            model: Report model
            chart_id: Chart ID from a chart node ('<kind>:<point_id>')
            view_state: Series visibility

        Returns:
            Dictionary with title, ISO dates, visible series and the permit
            limit line (volume charts with a permit)

        Raises:
            KeyError: If the chart does not belong to the model
        """
        view_state = view_state or ViewState()
        kind, point_id = chart_id.split(":", 1)
        volume = kind == VolumeGridPage.kind
        panel = model.volume_panel(point_id) if volume else model.quality_panel(point_id)

        dates = []
        series = []
        for label in panel.labels:
            daily = panel.series[label]
            if not dates:
                dates = [d.isoformat() for d in daily.dates]
            if not view_state.is_visible(label):
                continue
            series.append({
                "label": label,
                "unit": panel.units.get(label, unit_for(label)),
                "color": color_for(label),
                "values": list(daily.values),
            })

        return {
            "chart_id": chart_id,
            "title": panel.title,
            "dates": dates,
            "series": series,
            "limit": panel.limit.value if volume and panel.limit else None,
        }

    def _header(self, model: ReportModel) -> Dict[str, Any]:
        return {
            "title": constants.REPORT_TITLE,
            "report_id": model.report_id,
            "client": model.client.name,
            "period": (
                f"{DateUtils.format_display(model.start)} - "
                f"{DateUtils.format_display(model.end)}"
            ),
            "generated_at": model.generated_at.strftime("%d/%m/%Y %H:%M"),
        }

    def _summary(self, model: ReportModel) -> List[Dict[str, Any]]:
        client = model.client
        address = ", ".join(part for part in (client.address, client.district, client.city) if part)
        point_ids = {p.point_id for p in model.volume_panels + model.quality_panels}
        labels = {
            label
            for p in model.volume_panels + model.quality_panels
            for label in p.series
        }

        nodes = [
            {
                "type": "client",
                "name": client.name,
                "tax_id": client.tax_id or "-",
                "address": address or "-",
            },
            {
                "type": "counters",
                "items": [
                    {"label": "Pontos de coleta", "value": str(len(point_ids))},
                    {"label": "Dias com medições", "value": str(model.days_with_measurements)},
                    {"label": "Parâmetros", "value": str(len(labels))},
                    {"label": "Alertas críticos", "value": str(model.compliance.high_risk_count)},
                ],
            },
            self._compliance_overview(model),
            {
                "type": "list",
                "title": "Recomendações",
                "items": list(model.compliance.recommendations),
            },
            self._quality_nonconformities(model),
            self._outorga_conformance(model),
            self._outorga_nonconformities(model),
        ]
        return nodes

    def _compliance_overview(self, model: ReportModel) -> Dict[str, Any]:
        summary = model.compliance
        rows = []
        for parameter, band in REGULATORY_BANDS.items():
            stats = summary.parameter_stats.get(parameter)
            if stats is None:
                continue
            rows.append([
                READING_NAMES[parameter],
                band.describe(),
                str(stats.total_measurements),
                str(stats.compliant_measurements),
                format_percent(stats.compliance_rate),
                format_value(stats.average_value if stats.total_measurements else None, parameter.value),
            ])

        ph_min, ph_max = OPERATOR_PH_DISPLAY_RANGE
        return {
            "type": "compliance_summary",
            "compliance_rate": format_percent(summary.compliance_rate),
            "total_samples": str(summary.total_samples),
            "compliant_samples": str(summary.compliant_samples),
            "non_compliant_samples": str(summary.non_compliant_samples),
            "operator_ph_range": f"{format_number(ph_min)} - {format_number(ph_max)}",
            "table": {
                "type": "table",
                "id": "parameter_stats",
                "columns": ["Parâmetro", "Limite", "Medições", "Conformes", "Conformidade", "Média"],
                "rows": rows,
                "footer": None,
            },
        }

    def _quality_nonconformities(self, model: ReportModel) -> Dict[str, Any]:
        events = [
            event
            for stats in model.compliance.parameter_stats.values()
            for event in stats.non_compliant_values
        ]
        events.sort(key=lambda e: e.timestamp.timestamp(), reverse=True)
        shown, footer = truncate_rows(events, self.max_nonconformity_rows)

        return {
            "type": "table",
            "id": "quality_nonconformities",
            "title": "Não conformidades de qualidade",
            "columns": ["Data", "Ponto", "Parâmetro", "Valor", "Desvio", "Risco"],
            "rows": [
                [
                    e.timestamp.strftime("%d/%m/%Y %H:%M"),
                    e.point_name,
                    e.parameter.value,
                    format_value(e.value, e.parameter.value),
                    format_percent(e.deviation_pct),
                    e.risk_tier.value,
                ]
                for e in shown
            ],
            "footer": footer,
        }

    def _outorga_conformance(self, model: ReportModel) -> Dict[str, Any]:
        return {
            "type": "table",
            "id": "outorga_conformance",
            "title": "Conformidade com a outorga",
            "columns": ["Ponto", "Outorga", "Dias com leitura", "Dias conformes", "Conformidade"],
            "rows": [
                [
                    point.point_name,
                    f"{format_number(point.limit.value)} {point.limit.unit}",
                    str(point.days_with_reading),
                    str(point.conformant_days),
                    format_percent(point.conformance_rate),
                ]
                for point in model.outorga.points
            ],
            "footer": None,
        }

    def _outorga_nonconformities(self, model: ReportModel) -> Dict[str, Any]:
        shown, footer = truncate_rows(model.outorga.non_conformities, self.max_nonconformity_rows)
        return {
            "type": "table",
            "id": "outorga_nonconformities",
            "title": "Dias acima da outorga",
            "columns": ["Data", "Ponto", "Volume", "Limite", "Excedente"],
            "rows": [
                [
                    DateUtils.format_display(day.date),
                    day.point_name,
                    format_value(day.value, ParameterType.VOLUME.value),
                    format_value(day.limit, ParameterType.VOLUME.value),
                    format_percent(day.exceedance_pct),
                ]
                for day in shown
            ],
            "footer": footer,
        }

    def _grid(
        self,
        model: ReportModel,
        kind: str,
        point_ids: List[str],
        view_state: ViewState,
        volume: bool
    ) -> Dict[str, Any]:
        panels = []
        for point_id in point_ids:
            panel = model.volume_panel(point_id) if volume else model.quality_panel(point_id)
            panels.append(self._panel(panel, kind, view_state, volume))

        return {
            "type": "grid",
            "title": "Volumes diários" if volume else "Parâmetros de qualidade",
            "columns": 2,
            "panels": panels,
        }

    def _panel(
        self,
        panel: PointPanel,
        kind: str,
        view_state: ViewState,
        volume: bool
    ) -> Dict[str, Any]:
        stats = panel_stats(panel, view_state, include_total=volume)

        node = {
            "type": "panel",
            "point_id": panel.point_id,
            "title": panel.title,
            "chart": {"type": "chart", "chart_id": chart_id_for(kind, panel.point_id)},
            "legend": [
                {
                    "label": label,
                    "color": color_for(label),
                    "unit": panel.units.get(label, unit_for(label)),
                    "visible": view_state.is_visible(label),
                }
                for label in panel.labels
            ],
            "stats": [
                {"label": label, **{key: format_number(value) for key, value in s.to_dict().items()}}
                for label, s in stats.items()
            ],
        }

        if volume:
            node["consumption"] = (
                f"C: {format_value(panel.total_consumption, ParameterType.VOLUME.value)}"
                if panel.total_consumption is not None else None
            )
            node["permit"] = (
                f"Máx: {format_number(panel.limit.value)} {panel.limit.unit}"
                if panel.limit else None
            )

        return node

    def _measurement_table(self, model: ReportModel) -> Dict[str, Any]:
        table = model.table
        if table is None:
            return {"type": "measurement_table", "columns": [], "rows": [], "footer": None}

        keys = [
            (group.point_id, label)
            for group in table.columns
            for label, _ in group.parameters
        ]
        shown, footer = truncate_rows(table.rows, self.max_table_rows)

        rows = []
        for row in shown:
            cells = []
            for key in keys:
                cell = row.cells.get(key)
                if cell is None:
                    cells.append({"value": "-", "status": "normal", "color": None})
                else:
                    cells.append({
                        "value": format_number(cell.value),
                        "status": cell.status,
                        "color": constants.STATUS_COLORS.get(cell.status),
                    })
            rows.append({"date": DateUtils.format_display(row.date), "cells": cells})

        return {
            "type": "measurement_table",
            "columns": [
                {
                    "point": group.point_name,
                    "parameters": [
                        {"label": label, "unit": unit} for label, unit in group.parameters
                    ],
                }
                for group in table.columns
            ],
            "rows": rows,
            "footer": footer,
        }
