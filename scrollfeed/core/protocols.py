"""Protocol definitions for dependency injection."""

from typing import Any, Dict, List, Protocol


class DataSource(Protocol):
    async def fetch_rows(self, payload: Dict[str, Any]) -> List[Any]: ...
