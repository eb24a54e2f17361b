"""
Interactive report surface.

A navigable view over a report model: one page at a time, with chart series
data attached so charts can be drawn and toggled.
"""

import logging
from typing import Any, Dict, Optional

from ..models import ReportModel, ViewState
from .composer import PageComposer, iter_chart_nodes


class InteractiveRenderer:
    """
    Page navigation state machine.

    States are pages 1..N, the initial state is page 1 and next/previous
    never leave that range. There is no terminal state.
    """

    def __init__(
        self,
        model: ReportModel,
        composer: Optional[PageComposer] = None,
        view_state: Optional[ViewState] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize interactive renderer.

        Args:
            model: Report model
            composer: Page composer shared with the export surface
            view_state: Initial series visibility
            logger: Logger instance
        """
        self.model = model
        self.logger = logger or logging.getLogger(__name__)
        self.composer = composer or PageComposer(logger=self.logger)
        self.view_state = view_state or ViewState()

        self._page = 1
        self._rendered_page: Optional[int] = None

    @property
    def current_page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        # A model without pages still shows its summary page
        return max(1, self.model.total_pages)

    def next(self) -> int:
        """Advance one page (stays on the last page)."""
        return self.go_to(self._page + 1)

    def previous(self) -> int:
        """Go back one page (stays on the first page)."""
        return self.go_to(self._page - 1)

    def go_to(self, page_number: int) -> int:
        """
        Jump to a page, clamped to [1, N].

        Args:
            page_number: Requested page

        Returns:
            The page now shown
        """
        target = min(max(1, page_number), self.total_pages)
        if target != self._page:
            self._page = target
            self._rendered_page = None
        return self._page

    def reset(self) -> int:
        """Return to page 1."""
        return self.go_to(1)

    def toggle_series(self, label: str) -> ViewState:
        """
        Show or hide a series on every chart.

        Args:
            label: Parameter label

        Returns:
            The new view state
        """
        self.view_state = self.view_state.toggled(label)
        self._rendered_page = None
        return self.view_state

    def render(self) -> Dict[str, Any]:
        """
        Render the current page.

        Returns:
            Page tree with each chart node carrying its series under 'data'
        """
        tree = self.composer.compose(self.model, self._page, self.view_state)
        for node in iter_chart_nodes(tree):
            node["data"] = self.chart_data(node["chart_id"])
        self._rendered_page = self._page
        return tree

    def chart_data(self, chart_id: str) -> Dict[str, Any]:
        """Series data of a chart under the current view state."""
        return self.composer.chart_data(self.model, chart_id, self.view_state)

    def is_stable(self) -> bool:
        """Whether the current page has been fully rendered."""
        return self._rendered_page == self._page
