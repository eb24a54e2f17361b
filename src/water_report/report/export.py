"""
Export report surface.

Visits every page of the interactive surface in order, waits for each page
to settle, captures its charts and assembles a fixed page tree.
"""

import base64
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..core import constants
from ..core.exceptions import PageCaptureTimeout
from .composer import PageComposer, iter_chart_nodes
from .interactive import InteractiveRenderer
from .snapshots import ChartSnapshotter

PLACEHOLDER_TEXT = "Gráfico indisponível"


@dataclass
class ExportDocument:
    """Fully assembled export: one page tree per page, in order."""

    report_id: str
    pages: List[Dict[str, Any]] = field(default_factory=list)
    placeholders: int = 0
    timed_out_pages: List[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "reportId": self.report_id,
            "totalPages": len(self.pages),
            "placeholders": self.placeholders,
            "timedOutPages": list(self.timed_out_pages),
            "pages": self.pages,
        }


class ExportRenderer:
    """Render a finished export from the interactive surface."""

    def __init__(
        self,
        composer: Optional[PageComposer] = None,
        snapshotter: Optional[ChartSnapshotter] = None,
        capture_timeout: float = constants.DEFAULT_CAPTURE_TIMEOUT,
        poll_interval: float = constants.DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize export renderer.

        Args:
            composer: Page composer; defaults to the interactive surface's own
            snapshotter: Chart snapshotter
            capture_timeout: Maximum wait for a page to settle (seconds)
            poll_interval: Delay between stability checks (seconds)
            clock: Monotonic clock
            sleep: Sleep function
            logger: Logger instance
        """
        self.composer = composer
        self.logger = logger or logging.getLogger(__name__)
        self.snapshotter = snapshotter or ChartSnapshotter(logger=self.logger)
        self.capture_timeout = capture_timeout
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep

    def export(self, interactive: InteractiveRenderer) -> ExportDocument:
        """
        Assemble the export document.

        A chart whose snapshot is missing becomes a placeholder. A page that
        does not settle in time gets placeholders for all its charts; the
        remaining pages are still exported.

        Args:
            interactive: Interactive surface to capture from

        Returns:
            ExportDocument with every page in order
        """
        composer = self.composer or interactive.composer
        model = interactive.model
        document = ExportDocument(report_id=model.report_id)
        return_to = interactive.current_page

        for page_number in range(1, interactive.total_pages + 1):
            interactive.go_to(page_number)
            interactive.render()

            snapshots: Dict[str, Optional[bytes]] = {}
            reason = "snapshot unavailable"
            try:
                self.wait_until_stable(interactive, page_number)
                tree = composer.compose(model, page_number, interactive.view_state)
                for node in iter_chart_nodes(tree):
                    snapshots[node["chart_id"]] = self._capture(interactive, node["chart_id"])
            except PageCaptureTimeout as e:
                self.logger.warning(f"{e}; exporting placeholders for its charts")
                document.timed_out_pages.append(page_number)
                reason = "page capture timed out"
                tree = composer.compose(model, page_number, interactive.view_state)

            document.placeholders += self._embed(tree, snapshots, reason)
            document.pages.append(tree)

        interactive.go_to(return_to)

        if document.placeholders:
            self.logger.warning(f"Export contains {document.placeholders} chart placeholders")
        self.logger.info(f"Exported {len(document.pages)} pages")
        return document

    def wait_until_stable(self, interactive: InteractiveRenderer, page_number: int) -> None:
        """
        Poll the interactive surface until the page reports stable.

        Raises:
            PageCaptureTimeout: If the page is not stable within capture_timeout
        """
        deadline = self.clock() + self.capture_timeout
        while not interactive.is_stable():
            if self.clock() >= deadline:
                raise PageCaptureTimeout(page_number, self.capture_timeout)
            self.sleep(self.poll_interval)

    def _capture(self, interactive: InteractiveRenderer, chart_id: str) -> Optional[bytes]:
        try:
            return self.snapshotter.capture(interactive.chart_data(chart_id))
        except Exception as e:
            self.logger.warning(f"Snapshot of chart {chart_id} failed: {e}")
            return None

    def _embed(
        self,
        tree: Dict[str, Any],
        snapshots: Dict[str, Optional[bytes]],
        reason: str
    ) -> int:
        placeholders = 0
        for node in iter_chart_nodes(tree):
            png = snapshots.get(node["chart_id"])
            if png:
                node["image"] = {
                    "format": "png",
                    "encoding": "base64",
                    "data": base64.b64encode(png).decode("ascii"),
                }
            else:
                node["placeholder"] = {
                    "type": "placeholder",
                    "text": PLACEHOLDER_TEXT,
                    "reason": reason,
                }
                placeholders += 1
                self.logger.debug(f"Placeholder for chart {node['chart_id']}: {reason}")
        return placeholders
