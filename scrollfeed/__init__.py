"""Scroll-driven incremental loading for row lists."""

from .managers import PaginationController, ScrollMonitor

__all__ = ["PaginationController", "ScrollMonitor"]
__version__ = "0.1.0"
