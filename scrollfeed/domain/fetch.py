"""Fetch state and request payload helpers."""

from enum import Enum
from typing import Any, Dict, Iterable, NamedTuple


class FetchState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    FETCHING_WITH_RESET_PENDING = "fetching_with_reset_pending"


class Filter(NamedTuple):
    """One caller supplied filter, sent to the data source as ``key: value``."""

    key: str
    value: Any


def _unpack(item) -> tuple:
    if isinstance(item, dict):
        return item["key"], item["value"]
    if hasattr(item, "key") and hasattr(item, "value"):
        return item.key, item.value
    key, value = item
    return key, value


def filters_as_mapping(filters: Iterable) -> Dict[str, Any]:
    """Convert an ordered filter sequence into a dict.

    Accepts :class:`Filter` tuples, plain ``(key, value)`` pairs or dicts with
    ``key`` and ``value`` entries. Later duplicates replace earlier ones.
    """
    converted: Dict[str, Any] = {}
    for item in filters or ():
        key, value = _unpack(item)
        converted[key] = value
    return converted


def build_payload(row_index: int, filters: Iterable) -> Dict[str, Any]:
    """Build the JSON body posted to the data source."""
    if row_index < 0:
        raise ValueError(f"row_index must be >= 0, got {row_index}")
    payload: Dict[str, Any] = {"rowIndex": row_index}
    payload.update(filters_as_mapping(filters))
    return payload
