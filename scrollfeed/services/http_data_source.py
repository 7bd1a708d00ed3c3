"""HTTP data source - POSTs the request payload and returns a page of rows."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from scrollfeed.core.errors import TransportFailure

logger = logging.getLogger("ScrollFeed.HttpDataSource")


class HttpDataSource:
    """Fetches rows from an endpoint accepting ``{rowIndex, ...filters}``.

    The blocking request runs in a worker thread; callers await the result
    on the event loop. ``request_timeout`` is None by default, so a server
    that never answers keeps the request outstanding.

    One instance may serve several controllers, each posting from its own
    worker thread through the shared session.
    """

    def __init__(
        self,
        fetch_url: str,
        *,
        request_timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.fetch_url = fetch_url
        self.request_timeout = request_timeout
        self._owns_session = session is None
        self._session = session or requests.Session()

    async def fetch_rows(self, payload: Dict[str, Any]) -> List[Any]:
        return await asyncio.to_thread(self._post, payload)

    def _post(self, payload: Dict[str, Any]) -> List[Any]:
        try:
            response = self._session.post(
                self.fetch_url,
                json=payload,
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportFailure(
                f"Request to {self.fetch_url} failed: {exc}",
                url=self.fetch_url,
                payload=payload,
            ) from exc

        if not response.ok:
            raise TransportFailure(
                f"{self.fetch_url} returned HTTP {response.status_code}",
                url=self.fetch_url,
                payload=payload,
                status=response.status_code,
            )

        try:
            rows = response.json()
        except ValueError as exc:
            raise TransportFailure(
                f"{self.fetch_url} returned a body that is not JSON",
                url=self.fetch_url,
                payload=payload,
                status=response.status_code,
            ) from exc

        if not isinstance(rows, list):
            raise TransportFailure(
                f"{self.fetch_url} returned {type(rows).__name__}, expected a JSON array",
                url=self.fetch_url,
                payload=payload,
                status=response.status_code,
            )

        logger.debug(f"Received {len(rows)} rows for rowIndex={payload.get('rowIndex')}")
        return rows

    def close(self) -> None:
        if self._owns_session:
            self._session.close()
