"""Core interfaces, errors and dependency injection."""

from .errors import ScrollFeedError, TransportFailure
from .protocols import DataSource

__all__ = ["DataSource", "ScrollFeedError", "TransportFailure"]
