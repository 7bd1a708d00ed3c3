"""Data source services."""

from .http_data_source import HttpDataSource

__all__ = ["HttpDataSource"]
