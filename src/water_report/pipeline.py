"""
Report generation pipeline.

Fetches once, then runs the pure stages. A period without data ends in an
explicit NoDataResult; an unreachable source raises DataFetchError.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from .core import LoggerContext, constants, set_report_id
from .core.exceptions import EmptyResultError
from .models import NoDataResult, ReportModel
from .report import ReportBuilder
from .services import DataFetcher


class ReportPipeline:
    """Fetch report input and build the report model."""

    def __init__(
        self,
        fetcher: DataFetcher,
        builder: ReportBuilder,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            fetcher: Data fetcher
            builder: Report builder
            logger: Logger instance
        """
        self.fetcher = fetcher
        self.builder = builder
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        client_id: str,
        start: date,
        end: date,
        generated_at: Optional[datetime] = None
    ) -> Union[ReportModel, NoDataResult]:
        """
        Generate the report model of a client and period.

        Args:
            client_id: Client ID
            start: First day of the period
            end: Last day of the period (inclusive)
            generated_at: Generation time

        Returns:
            ReportModel, or NoDataResult when the period has no measurements

        Raises:
            DataFetchError: If the data source cannot be reached
        """
        try:
            with LoggerContext(self.logger, "measurement fetch", period=f"{start}..{end}") as stage:
                measurements = self.fetcher.fetch_measurements(client_id, start, end)
                stage.details["measurements"] = len(measurements)
        except EmptyResultError as e:
            self.logger.warning(str(e))
            return NoDataResult(client_id, start, end, constants.NO_DATA_MESSAGE)

        point_ids = {m.point_id for m in measurements}
        permits = self.fetcher.fetch_permits(point_ids)
        client = self.fetcher.fetch_client(client_id)

        with LoggerContext(self.logger, "report build", points=len(point_ids), permits=len(permits)):
            model = self.builder.build(client, measurements, permits, start, end, generated_at)

        set_report_id(model.report_id)
        return model
