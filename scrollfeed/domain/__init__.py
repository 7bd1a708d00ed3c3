"""Domain value objects."""

from .fetch import FetchState, Filter, build_payload, filters_as_mapping
from .geometry import ViewportGeometry

__all__ = [
    "FetchState",
    "Filter",
    "ViewportGeometry",
    "build_payload",
    "filters_as_mapping",
]
