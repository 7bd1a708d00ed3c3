"""Exceptions raised by scrollfeed."""

from typing import Any, Dict, Optional


class ScrollFeedError(Exception):
    """Base class for all scrollfeed errors."""


class TransportFailure(ScrollFeedError):
    """The data source request could not complete.

    Covers network errors, non-2xx responses and bodies that are not a JSON
    array. The controller recovers from it locally and never re-raises it.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.url = url
        self.payload = payload
        self.status = status
