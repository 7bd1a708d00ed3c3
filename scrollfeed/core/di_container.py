"""Dependency injection container."""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from scrollfeed.config import Settings, SettingsManager
from scrollfeed.core.errors import TransportFailure
from scrollfeed.infrastructure.gtk_viewport import InfiniteScrollBinding
from scrollfeed.managers import PaginationController, ScrollMonitor
from scrollfeed.services import HttpDataSource


@dataclass
class AppContainer:
    settings: Settings

    _data_source: Optional[HttpDataSource] = field(
        default=None, init=False, repr=False
    )

    @property
    def data_source(self) -> HttpDataSource:
        """Shared by every controller. Each controller has at most one request
        in flight, but requests from different controllers run on separate
        worker threads against the same session."""
        if self._data_source is None:
            self._data_source = HttpDataSource(
                self.settings.data_source.fetch_url,
                request_timeout=self.settings.data_source.request_timeout,
            )
        return self._data_source

    def create_monitor(self) -> ScrollMonitor:
        return ScrollMonitor(
            threshold_rows=self.settings.scroll.threshold_rows,
            threshold_px=self.settings.scroll.threshold_px,
        )

    def create_controller(
        self,
        get_filters: Callable[[], Iterable],
        append_data: Callable[[List[Any]], None],
        clear_data: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[TransportFailure], None]] = None,
    ) -> PaginationController:
        return PaginationController(
            self.data_source,
            get_filters,
            append_data,
            monitor=self.create_monitor(),
            clear_data=clear_data,
            on_error=on_error,
        )

    def create_binding(
        self,
        content,
        get_filters: Callable[[], Iterable],
        append_data: Callable[[List[Any]], None],
        *,
        scroll_viewport=None,
        clear_data: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[TransportFailure], None]] = None,
    ) -> InfiniteScrollBinding:
        """Create an attached binding for a scrolled content widget."""
        controller = self.create_controller(
            get_filters, append_data, clear_data=clear_data, on_error=on_error
        )
        binding = InfiniteScrollBinding(
            content,
            controller,
            scroll_viewport=scroll_viewport,
            row_css_class=self.settings.scroll.row_css_class,
        )
        return binding.attach()

    def close(self) -> None:
        if self._data_source is not None:
            self._data_source.close()
            self._data_source = None

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        config_path=None,
    ) -> "AppContainer":
        if settings is None:
            settings = SettingsManager(config_path).settings
        return cls(settings=settings)
