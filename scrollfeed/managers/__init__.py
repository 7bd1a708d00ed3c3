"""Manager classes for infinite scroll state."""

from .pagination_controller import PaginationController
from .scroll_monitor import ScrollMonitor

__all__ = ["PaginationController", "ScrollMonitor"]
