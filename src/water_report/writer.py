"""
Report writer module.

Writes the export page tree and the dashboard compliance summary as JSON.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .models import ComplianceSummary, NoDataResult
from .report import ExportDocument


class ReportWriter:
    """Write report outputs to the output directory."""

    def __init__(self, output_directory: str = "output", logger: Optional[logging.Logger] = None):
        """
        Initialize report writer.

        Args:
            output_directory: Directory the files are written to
            logger: Logger instance
        """
        self.output_directory = Path(output_directory)
        self.logger = logger or logging.getLogger(__name__)

    def write_export(self, document: ExportDocument, filename: Optional[str] = None) -> Path:
        """
        Write the export page tree.

        Args:
            document: Assembled export document
            filename: File name; '<report id>.json' when omitted

        Returns:
            Path of the written file
        """
        path = self.output_directory / (filename or f"{document.report_id}.json")
        self._write_json(path, document.to_dict())
        self.logger.info(
            f"Wrote {len(document.pages)} pages to {path} "
            f"({document.placeholders} chart placeholders)"
        )
        return path

    def write_summary(self, report_id: str, summary: ComplianceSummary) -> Path:
        """
        Write the standalone compliance summary used by dashboards.

        Args:
            report_id: Report ID
            summary: Compliance summary

        Returns:
            Path of the written file
        """
        path = self.output_directory / f"{report_id}-summary.json"
        self._write_json(path, summary.to_dict())
        self.logger.info(f"Wrote compliance summary to {path}")
        return path

    def write_no_data(self, result: NoDataResult) -> Path:
        """
        Record a period without data.

        Args:
            result: No-data outcome

        Returns:
            Path of the written file
        """
        path = self.output_directory / f"no-data-{result.client_id}-{result.start:%Y%m%d}.json"
        self._write_json(path, {
            "clientId": result.client_id,
            "start": result.start.isoformat(),
            "end": result.end.isoformat(),
            "message": result.message,
        })
        return path

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise
