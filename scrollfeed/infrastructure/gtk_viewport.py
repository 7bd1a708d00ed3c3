"""GTK4 binding - drives a PaginationController from a scrolled list."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Callable, Iterable, List, Optional

from scrollfeed.core.errors import TransportFailure
from scrollfeed.domain.geometry import ViewportGeometry
from scrollfeed.managers.pagination_controller import PaginationController
from scrollfeed.managers.scroll_monitor import DEFAULT_THRESHOLD_PX, ScrollMonitor
from scrollfeed.services.http_data_source import HttpDataSource

logger = logging.getLogger("ScrollFeed.GtkViewport")


def _nearest_scrolled_window(content):
    import gi

    gi.require_version("Gtk", "4.0")
    from gi.repository import Gtk

    return content.get_ancestor(Gtk.ScrolledWindow)


def _outer_height(widget) -> float:
    return widget.get_height() + widget.get_margin_top() + widget.get_margin_bottom()


class RowHeights(Sequence):
    """Outer heights of the rows of a content widget, read on demand.

    Iterating in reverse walks from the last child backward, so the scroll
    monitor only touches the rows below the fold.
    """

    def __init__(self, content, row_css_class: Optional[str] = None):
        self.content = content
        self.row_css_class = row_css_class

    def _is_row(self, child) -> bool:
        if self.row_css_class is None:
            return True
        return child.has_css_class(self.row_css_class)

    def _rows_forward(self):
        child = self.content.get_first_child()
        while child is not None:
            if self._is_row(child):
                yield child
            child = child.get_next_sibling()

    def _rows_backward(self):
        child = self.content.get_last_child()
        while child is not None:
            if self._is_row(child):
                yield child
            child = child.get_prev_sibling()

    def __iter__(self):
        for row in self._rows_forward():
            yield _outer_height(row)

    def __reversed__(self):
        for row in self._rows_backward():
            yield _outer_height(row)

    def __len__(self) -> int:
        return sum(1 for _ in self._rows_forward())

    def __getitem__(self, index):
        heights = list(self)
        return heights[index]


class InfiniteScrollBinding:
    """Connects a scrolled content widget to a PaginationController.

    ``content`` is the widget holding the rows (usually a ``Gtk.ListBox``).
    ``scroll_viewport`` is the ``Gtk.ScrolledWindow`` to observe; when omitted
    the nearest scrolled window around ``content`` is used.
    """

    def __init__(
        self,
        content,
        controller: PaginationController,
        *,
        scroll_viewport=None,
        row_css_class: Optional[str] = None,
    ):
        self.content = content
        self.controller = controller
        self.row_css_class = row_css_class
        self.scroll_viewport = scroll_viewport or _nearest_scrolled_window(content)
        if self.scroll_viewport is None:
            raise ValueError("content is not inside a Gtk.ScrolledWindow")
        self._adjustment = None
        self._handler_id = None

    @property
    def is_attached(self) -> bool:
        return self._handler_id is not None

    def attach(self) -> "InfiniteScrollBinding":
        if self.is_attached:
            return self
        self._adjustment = self.scroll_viewport.get_vadjustment()
        self._handler_id = self._adjustment.connect(
            "value-changed", self._on_scroll_changed
        )
        return self

    def detach(self) -> None:
        if not self.is_attached:
            return
        self._adjustment.disconnect(self._handler_id)
        self._adjustment = None
        self._handler_id = None

    def rows(self) -> RowHeights:
        return RowHeights(self.content, self.row_css_class)

    def geometry(self) -> Optional[ViewportGeometry]:
        """Measure the viewport, or None while the content is not laid out."""
        adjustment = self.scroll_viewport.get_vadjustment()
        ok, bounds = self.content.compute_bounds(self.scroll_viewport)
        if not ok:
            return None

        value = adjustment.get_value()
        # Bounds are relative to the visible area, which is already scrolled.
        return ViewportGeometry(
            viewport_top=value,
            viewport_height=adjustment.get_page_size(),
            content_top=bounds.get_y() + value,
            content_height=bounds.get_height(),
        )

    def check(self) -> bool:
        """Evaluate the current scroll position; True if a fetch started."""
        if self.controller.is_fetching:
            return False

        geometry = self.geometry()
        if geometry is None:
            logger.debug("Content not allocated yet, skipping scroll check")
            return False

        return self.controller.trigger_if_needed(geometry, self.rows())

    def reset_and_refetch(self) -> None:
        self.controller.reset_and_refetch()

    def _on_scroll_changed(self, adjustment):
        self.check()


def infinite_scroll(
    content,
    fetch_url,
    get_filters: Callable[[], Iterable],
    append_data: Callable[[List[Any]], None],
    *,
    row_css_class: Optional[str] = None,
    threshold_rows: Optional[int] = None,
    threshold_px: float = DEFAULT_THRESHOLD_PX,
    scroll_viewport=None,
    clear_data: Optional[Callable[[], None]] = None,
    on_error: Optional[Callable[[TransportFailure], None]] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> InfiniteScrollBinding:
    """Make *content* load more rows as its scrolled window nears the end.

    Args:
        content: Widget whose children are the rendered rows
        fetch_url: URL of the row endpoint, or any DataSource
        get_filters: Callback returning the current ``{key, value}`` filters
        append_data: Callback receiving each non-empty page
        row_css_class: Only children with this CSS class count as rows
        threshold_rows: Rows left below the viewport that trigger a fetch
        threshold_px: Pixels left below the viewport that trigger a fetch
        scroll_viewport: ScrolledWindow to observe instead of the nearest one
        clear_data: Callback removing rendered rows on reset
        on_error: Callback receiving transport failures
        loop: asyncio loop driving the GLib main loop

    Returns:
        InfiniteScrollBinding: attached binding, exposing reset_and_refetch()
    """
    data_source = (
        HttpDataSource(fetch_url) if isinstance(fetch_url, str) else fetch_url
    )
    controller = PaginationController(
        data_source,
        get_filters,
        append_data,
        monitor=ScrollMonitor(threshold_rows, threshold_px),
        clear_data=clear_data,
        on_error=on_error,
        loop=loop,
    )
    binding = InfiniteScrollBinding(
        content,
        controller,
        scroll_viewport=scroll_viewport,
        row_css_class=row_css_class,
    )
    return binding.attach()
