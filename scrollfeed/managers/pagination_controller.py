"""Infinite scroll state machine: fetch-in-flight, filter resets and results."""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from scrollfeed.core.errors import TransportFailure
from scrollfeed.core.protocols import DataSource
from scrollfeed.domain.fetch import FetchState, build_payload
from scrollfeed.domain.geometry import ViewportGeometry
from scrollfeed.managers.scroll_monitor import ScrollMonitor

logger = logging.getLogger("ScrollFeed.PaginationController")


class PaginationController:
    """Coordinates scroll-triggered fetches for one content region.

    At most one request is in flight at a time. A reset that arrives while a
    request is outstanding is remembered and served once that request
    resolves; the stale page is dropped. Every transition happens on the
    event loop thread.

    There is no timeout or cancellation: a request that never resolves keeps
    the controller in a fetching state.
    """

    def __init__(
        self,
        data_source: DataSource,
        get_filters: Callable[[], Iterable],
        append_data: Callable[[List[Any]], None],
        *,
        monitor: Optional[ScrollMonitor] = None,
        clear_data: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[TransportFailure], None]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """Initialize PaginationController.

        Args:
            data_source: Where pages of rows come from
            get_filters: Callback returning the current ``{key, value}`` filters
            append_data: Callback receiving each non-empty page
            monitor: Threshold policy, defaults to a pixel threshold
            clear_data: Callback removing rendered rows on reset
            on_error: Callback receiving transport failures
            loop: Event loop to schedule fetches on, defaults to the running one
        """
        self.data_source = data_source
        self.get_filters = get_filters
        self.append_data = append_data
        self.monitor = monitor or ScrollMonitor()
        self.clear_data = clear_data
        self.on_error = on_error
        self._loop = loop

        self._state = FetchState.IDLE
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def is_fetching(self) -> bool:
        return self._state is not FetchState.IDLE

    def trigger_if_needed(
        self,
        geometry: ViewportGeometry,
        rows: Sequence[float] = (),
        row_count: Optional[int] = None,
    ) -> bool:
        """Start a fetch if the monitor says more rows are needed.

        Args:
            geometry: Current viewport/content measurements
            rows: Outer heights of the rendered rows, in render order
            row_count: Number of rendered rows, defaults to ``len(rows)``

        Returns:
            bool: True if a fetch was started
        """
        if self.is_fetching:
            return False

        if not self.monitor.evaluate(geometry, rows):
            return False

        if row_count is None:
            row_count = len(rows)
        logger.debug(f"Near the end of the list, fetching from row {row_count}")
        self.issue_fetch(row_count)
        return True

    def reset_and_refetch(self) -> None:
        """Start over from row 0, typically because the filters changed.

        Returns immediately; rows arrive later through ``append_data``.
        ``clear_data`` runs on every call, also while a fetch is in flight,
        so stale rows are gone before the row 0 page arrives. Safe to call
        from ``append_data`` or ``on_error``.
        """
        if self.clear_data:
            self.clear_data()

        if self._state is FetchState.IDLE:
            logger.info("Reset requested, fetching from row 0")
            self.issue_fetch(0)
        else:
            logger.info("Reset requested while fetching, refetch deferred")
            self._state = FetchState.FETCHING_WITH_RESET_PENDING

    def issue_fetch(self, row_index: int) -> None:
        """Send a request for rows starting at ``row_index``.

        Filters are read now, not when the fetch was decided.
        """
        if self.is_fetching:
            raise RuntimeError("A fetch is already in flight")

        payload = self._build_payload(row_index)
        loop = self._loop or asyncio.get_running_loop()
        self._state = FetchState.FETCHING
        self._task = loop.create_task(self._run_fetch(payload))
        self._task.add_done_callback(self._on_task_done)

    async def wait_idle(self) -> None:
        """Wait until no fetch is in flight."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def _build_payload(self, row_index: int) -> Dict[str, Any]:
        return build_payload(row_index, self.get_filters())

    async def _run_fetch(self, payload: Dict[str, Any]) -> None:
        while True:
            logger.debug(f"Requesting rows: {payload}")
            try:
                rows = await self.data_source.fetch_rows(payload)
            except Exception as e:
                # on_error may start over with reset_and_refetch().
                self._state = FetchState.IDLE
                self._report_failure(e, payload)
                return

            if self._state is FetchState.FETCHING_WITH_RESET_PENDING:
                logger.info(
                    f"Discarding {len(rows)} stale rows, refetching from row 0"
                )
                payload = self._restart_payload()
                continue

            try:
                if rows:
                    logger.debug(f"Appending {len(rows)} rows")
                    self.append_data(rows)
                else:
                    logger.debug("Data source returned no rows")
            except Exception:
                self._state = FetchState.IDLE
                raise

            if self._state is FetchState.FETCHING_WITH_RESET_PENDING:
                logger.info("Reset requested while appending, refetching from row 0")
                payload = self._restart_payload()
                continue

            self._state = FetchState.IDLE
            return

    def _restart_payload(self) -> Dict[str, Any]:
        self._state = FetchState.FETCHING
        try:
            return self._build_payload(0)
        except Exception as e:
            logger.error(f"Could not build reset request: {e}")
            self._state = FetchState.IDLE
            raise

    def _report_failure(self, error: Exception, payload: Dict[str, Any]) -> None:
        if isinstance(error, TransportFailure):
            failure = error
        else:
            failure = TransportFailure(str(error) or type(error).__name__, payload=payload)
            failure.__cause__ = error

        logger.error(f"Infinite scroll failed to fetch data: {failure}")
        if self.on_error:
            try:
                self.on_error(failure)
            except Exception as e:
                logger.error(f"Error callback failed: {e}")

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            if self._task is task:
                self._state = FetchState.IDLE
                self._task = None
            return
        if self._task is task:
            self._task = None
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Unhandled error in fetch task",
                exc_info=(type(exc), exc, exc.__traceback__),
            )
