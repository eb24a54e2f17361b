"""
Main entry point for the water compliance report system.

Orchestrates fetching, report building and export for one client and period.
"""

import sys
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from .core import Config, ReportLogContext, setup_logger, constants
from .core.exceptions import DataFetchError
from .api import WaterDataAPI
from .services import DataFetcher
from .report import (
    ReportBuilder,
    PageComposer,
    InteractiveRenderer,
    ChartSnapshotter,
    ExportRenderer,
)
from .models import NoDataResult, ReportModel
from .pipeline import ReportPipeline
from .writer import ReportWriter


class WaterReportApp:
    """Main application for water compliance reports."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        # Load configuration
        self.config = Config(config_file)

        # Setup logger
        self.logger = setup_logger()
        self.logger.info("=" * 60)
        self.logger.info("Water Compliance Report System")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        # Initialize components (will be set in initialize_components)
        self.api_client: Optional[WaterDataAPI] = None
        self.pipeline: Optional[ReportPipeline] = None
        self.composer: Optional[PageComposer] = None
        self.exporter: Optional[ExportRenderer] = None
        self.writer: Optional[ReportWriter] = None

    def initialize_components(self) -> None:
        """Initialize all application components."""
        self.logger.info("Initializing components...")

        self.api_client = WaterDataAPI(
            base_url=self.config.api_base_url,
            api_key=self.config.api_key,
            timeout=self.config.api_timeout,
            max_retries=self.config.api_max_retries,
            verify_ssl=self.config.api_verify_ssl,
            logger=self.logger
        )

        fetcher = DataFetcher(
            api_client=self.api_client,
            timezone=self.config.timezone,
            logger=self.logger
        )
        builder = ReportBuilder(
            timezone=self.config.timezone,
            points_per_page=self.config.points_per_page,
            include_table=self.config.include_measurement_table,
            logger=self.logger
        )
        self.pipeline = ReportPipeline(fetcher, builder, logger=self.logger)

        self.composer = PageComposer(
            max_nonconformity_rows=self.config.max_nonconformity_rows,
            max_table_rows=self.config.max_table_rows,
            logger=self.logger
        )
        self.exporter = ExportRenderer(
            composer=self.composer,
            snapshotter=ChartSnapshotter(logger=self.logger),
            capture_timeout=self.config.capture_timeout,
            poll_interval=self.config.poll_interval,
            logger=self.logger
        )

        self.writer = ReportWriter(self.config.output_directory, logger=self.logger)

        self.logger.info("All components initialized successfully")

    def run(
        self,
        client_id: str,
        start: date,
        end: date,
        summary_only: bool = False
    ) -> Union[ReportModel, NoDataResult]:
        """
        Generate and write the report of a client and period.

        Args:
            client_id: Client ID
            start: First day of the period
            end: Last day of the period (inclusive)
            summary_only: Write only the compliance summary, skip the export

        Returns:
            The report model, or NoDataResult for a period without data

        Raises:
            DataFetchError: If the data source cannot be reached
        """
        with ReportLogContext(client_id):
            return self._generate(client_id, start, end, summary_only)

    def _generate(
        self,
        client_id: str,
        start: date,
        end: date,
        summary_only: bool
    ) -> Union[ReportModel, NoDataResult]:
        try:
            self.initialize_components()

            if not all([self.pipeline, self.composer, self.exporter, self.writer]):
                raise RuntimeError("Components not properly initialized")

            self.logger.info(f"Generating report for client {client_id}: {start} to {end}")
            result = self.pipeline.run(client_id, start, end)

            if isinstance(result, NoDataResult):
                self.logger.warning(result.message)
                self.writer.write_no_data(result)
                return result

            self.writer.write_summary(result.report_id, result.compliance)

            if not summary_only:
                interactive = InteractiveRenderer(result, self.composer, logger=self.logger)
                document = self.exporter.export(interactive)
                self.writer.write_export(document)

            self.logger.info("Processing complete")
            return result

        except DataFetchError as e:
            self.logger.error(f"{constants.SOURCE_UNREACHABLE_MESSAGE}: {e}")
            raise

        except Exception as e:
            self.logger.error(f"Application error: {e}", exc_info=True)
            raise

        finally:
            if self.api_client:
                self.api_client.close()


def previous_month() -> Tuple[date, date]:
    """First and last day of the month before today."""
    end = date.today().replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Water Compliance Report System"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--client",
        type=str,
        required=True,
        help="Client ID"
    )
    parser.add_argument(
        "--start",
        type=str,
        default=None,
        help="First day of the period (YYYY-MM-DD). Default: first day of last month"
    )
    parser.add_argument(
        "--end",
        type=str,
        default=None,
        help="Last day of the period (YYYY-MM-DD). Default: last day of last month"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory (overrides configuration)"
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Write only the compliance summary"
    )

    args = parser.parse_args()

    # Parse period
    start, end = previous_month()
    try:
        if args.start:
            start = datetime.strptime(args.start, "%Y-%m-%d").date()
        if args.end:
            end = datetime.strptime(args.end, "%Y-%m-%d").date()
    except ValueError as e:
        print(f"Invalid date: {e}. Use YYYY-MM-DD")
        sys.exit(1)

    if end < start:
        print(f"Invalid period: {end} is before {start}")
        sys.exit(1)

    # Run application
    try:
        app = WaterReportApp(config_file=args.config)
        if args.output:
            app.config.config.setdefault("output", {})["directory"] = args.output
        result = app.run(args.client, start, end, summary_only=args.summary_only)
    except DataFetchError:
        print(constants.SOURCE_UNREACHABLE_MESSAGE)
        sys.exit(2)
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)

    if isinstance(result, NoDataResult):
        print(result.message)
        sys.exit(0)

    print(f"Report {result.report_id}: {result.total_pages} pages, "
          f"compliance {result.compliance.compliance_rate:.2f}%")


if __name__ == "__main__":
    main()
