"""
Report model builder.

Runs the pure stages of report generation: normalize, derive volumes,
classify, aggregate, evaluate permits and paginate.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..algorithms import (
    ComplianceAggregator,
    ComplianceClassifier,
    OutorgaConformanceEvaluator,
    REGULATORY_BANDS,
)
from ..core import DateUtils, LoggerContext, constants
from ..models import (
    ClientInfo,
    ComplianceSummary,
    DailySeries,
    Measurement,
    MeasurementTable,
    OutorgaLimit,
    OutorgaReport,
    ParameterType,
    PointPanel,
    ReportModel,
    RiskTier,
    TableCell,
    TableColumnGroup,
    TableRow,
)
from ..processing import TimeSeriesNormalizer, UnitConverter, VolumeDeltaCalculator
from .formatting import unit_for
from .paginator import ReportPaginator

STATUS_BY_RISK = {
    None: "normal",
    RiskTier.LOW: "warning",
    RiskTier.MEDIUM: "warning",
    RiskTier.HIGH: "critical",
}


class ReportBuilder:
    """Build a ReportModel from parsed measurements."""

    def __init__(
        self,
        timezone: str = constants.DEFAULT_TIMEZONE,
        points_per_page: int = constants.DEFAULT_POINTS_PER_PAGE,
        include_table: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize report builder.

        Args:
            timezone: Timezone that defines calendar days
            points_per_page: Chart panels per grid page
            include_table: Whether to add the measurement table page
            logger: Logger instance
        """
        self.timezone = timezone
        self.include_table = include_table
        self.logger = logger or logging.getLogger(__name__)

        self.normalizer = TimeSeriesNormalizer(timezone, logger=self.logger)
        self.volume_calc = VolumeDeltaCalculator(logger=self.logger)
        self.classifier = ComplianceClassifier(logger=self.logger)
        self.aggregator = ComplianceAggregator(logger=self.logger)
        self.converter = UnitConverter(logger=self.logger)
        self.outorga = OutorgaConformanceEvaluator(converter=self.converter, logger=self.logger)
        self.paginator = ReportPaginator(points_per_page, logger=self.logger)

    def build(
        self,
        client: ClientInfo,
        measurements: List[Measurement],
        permits: Dict[str, OutorgaLimit],
        start: date,
        end: date,
        generated_at: Optional[datetime] = None
    ) -> ReportModel:
        """
        Build the report model.

        Args:
            client: Client shown on the header
            measurements: Parsed measurements of the period
            permits: Permit limit per collection point ID
            start: First day of the period
            end: Last day of the period (inclusive)
            generated_at: Generation time; now in the report timezone when omitted

        Returns:
            ReportModel with every page assigned
        """
        if generated_at is None:
            generated_at = datetime.now(DateUtils.parse_timezone(self.timezone))

        with LoggerContext(self.logger, "normalization", measurements=len(measurements)):
            series = self.normalizer.normalize_by_point(measurements, start, end)

        points = self._points(measurements)
        kinds = self._label_kinds(measurements)

        with LoggerContext(self.logger, "volume derivation", points=len(points)) as stage:
            volume_panels, consumption = self._volume_panels(points, series, kinds, permits)
            stage.details["volume_points"] = len(volume_panels)
        quality_panels = self._quality_panels(points, series, kinds)

        compliance = self._compliance(measurements)
        outorga = self._outorga(volume_panels, consumption, permits)

        table = None
        if self.include_table:
            table = self._table(points, volume_panels, quality_panels, kinds)

        days = self._days_with_measurements(series)

        assignments = self.paginator.assign(
            [p.point_id for p in volume_panels],
            [p.point_id for p in quality_panels],
            table is not None,
        )

        model = ReportModel(
            report_id=f"{constants.REPORT_ID_PREFIX}-{generated_at:%Y%m%d}",
            generated_at=generated_at,
            client=client,
            start=start,
            end=end,
            volume_panels=volume_panels,
            quality_panels=quality_panels,
            compliance=compliance,
            outorga=outorga,
            table=table,
            days_with_measurements=days,
            pages=[a.to_page() for a in assignments],
        )

        self.logger.info(
            f"Report {model.report_id}: {len(volume_panels)} volume points, "
            f"{len(quality_panels)} quality points, {model.total_pages} pages"
        )
        return model

    @staticmethod
    def _points(measurements: List[Measurement]) -> List[Tuple[str, str, str]]:
        """(point_id, point_name, area_name) ordered by area, then name."""
        seen: Dict[str, Tuple[str, str, str]] = {}
        for m in measurements:
            seen.setdefault(m.point_id, (m.point_id, m.point_name, m.area_name))
        return sorted(seen.values(), key=lambda p: (p[2], p[1], p[0]))

    @staticmethod
    def _label_kinds(measurements: List[Measurement]) -> Dict[Tuple[str, str], ParameterType]:
        kinds = {}
        for m in measurements:
            key = (m.point_id, m.label)
            # A cumulative meter wins over other readings sharing its label
            if kinds.get(key) is not ParameterType.VOLUME:
                kinds[key] = m.parameter
        return kinds

    def _volume_panels(
        self,
        points: List[Tuple[str, str, str]],
        series: Dict[Tuple[str, str], DailySeries],
        kinds: Dict[Tuple[str, str], ParameterType],
        permits: Dict[str, OutorgaLimit]
    ) -> Tuple[List[PointPanel], Dict[str, DailySeries]]:
        """
        Build volume panels and the daily consumption of each point.

        A point's cumulative meters define its consumption; flow series
        only count when the point has no meter.
        """
        panels = []
        consumption: Dict[str, DailySeries] = {}
        for point_id, point_name, area_name in points:
            labels = sorted(
                label for (pid, label), kind in kinds.items()
                if pid == point_id and kind.is_volume
            )
            if not labels:
                continue

            panel = PointPanel(point_id, point_name, area_name)
            meters, flows = [], []
            for label in labels:
                raw = series[(point_id, label)]
                if kinds[(point_id, label)] is ParameterType.VOLUME:
                    result = self.volume_calc.calculate(raw)
                    panel.series[label] = result.daily
                    meters.append((result.daily, result.total_consumption))
                else:
                    panel.series[label] = raw
                    flows.append((raw, sum(raw.values)))
                panel.units[label] = unit_for(label)

            sources = meters or flows
            if meters and flows:
                self.logger.debug(f"{point_name}: flow series shown but not counted as consumption")

            daily = [sum(values) for values in zip(*(s.values for s, _ in sources))]
            consumption[point_id] = sources[0][0].with_values(
                [round(v, constants.DECIMAL_PLACES) for v in daily]
            )
            panel.total_consumption = round(sum(total for _, total in sources), constants.DECIMAL_PLACES)

            limit = permits.get(point_id)
            if limit is not None and limit.value > 0:
                panel.limit = self.converter.limit_in_cubic_meters(limit)
            panels.append(panel)
        return panels, consumption

    @staticmethod
    def _quality_panels(
        points: List[Tuple[str, str, str]],
        series: Dict[Tuple[str, str], DailySeries],
        kinds: Dict[Tuple[str, str], ParameterType]
    ) -> List[PointPanel]:
        panels = []
        for point_id, point_name, area_name in points:
            labels = sorted(
                label for (pid, label), kind in kinds.items()
                if pid == point_id and not kind.is_volume
            )
            if not labels:
                continue

            panel = PointPanel(point_id, point_name, area_name)
            for label in labels:
                panel.series[label] = series[(point_id, label)]
                panel.units[label] = unit_for(label)
            panels.append(panel)
        return panels

    def _compliance(self, measurements: List[Measurement]) -> ComplianceSummary:
        try:
            samples = self.classifier.build_samples(measurements)
            return self.aggregator.aggregate(samples)
        except Exception as e:
            self.logger.error(f"Compliance aggregation failed, using empty summary: {e}", exc_info=True)
            return ComplianceSummary()

    def _outorga(
        self,
        volume_panels: List[PointPanel],
        consumption: Dict[str, DailySeries],
        permits: Dict[str, OutorgaLimit]
    ) -> OutorgaReport:
        points = [
            (panel.point_id, panel.point_name, consumption[panel.point_id])
            for panel in volume_panels
        ]

        try:
            return self.outorga.evaluate_all(points, permits)
        except Exception as e:
            self.logger.error(f"Permit evaluation failed, using empty result: {e}", exc_info=True)
            return OutorgaReport()

    def _table(
        self,
        points: List[Tuple[str, str, str]],
        volume_panels: List[PointPanel],
        quality_panels: List[PointPanel],
        kinds: Dict[Tuple[str, str], ParameterType]
    ) -> MeasurementTable:
        panels_by_point: Dict[str, List[PointPanel]] = {}
        for panel in volume_panels + quality_panels:
            panels_by_point.setdefault(panel.point_id, []).append(panel)

        columns = []
        column_series: List[Tuple[Tuple[str, str], DailySeries]] = []
        for point_id, point_name, _ in points:
            merged: Dict[str, DailySeries] = {}
            for panel in panels_by_point.get(point_id, []):
                merged.update(panel.series)
            labels = sorted(merged)
            columns.append(TableColumnGroup(
                point_id, point_name, [(label, unit_for(label)) for label in labels]
            ))
            column_series.extend(((point_id, label), merged[label]) for label in labels)

        rows = []
        if column_series:
            dates = column_series[0][1].dates
            for i, day in enumerate(dates):
                cells = {}
                for key, daily in column_series:
                    value = daily.values[i]
                    if value != 0:
                        cells[key] = TableCell(value, self._cell_status(kinds.get(key), value))
                if cells:
                    rows.append(TableRow(day, cells))

        return MeasurementTable(columns=columns, rows=rows)

    def _cell_status(self, parameter: Optional[ParameterType], value: float) -> str:
        band = REGULATORY_BANDS.get(parameter)
        if band is None:
            return "normal"
        return STATUS_BY_RISK[self.classifier.classify(value, band).risk_tier]

    @staticmethod
    def _days_with_measurements(series: Dict[Tuple[str, str], DailySeries]) -> int:
        days = set()
        for daily in series.values():
            days.update(d for d, v in zip(daily.dates, daily.values) if v != 0)
        return len(days)
