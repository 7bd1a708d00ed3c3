"""Viewport geometry domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewportGeometry:
    """Snapshot of a viewport and its content region, taken on a scroll tick.

    All values are in pixels. ``content_margin`` is everything above the
    first row that is not reported by ``content_top`` (margin, padding and
    border of the content region).
    """

    viewport_top: float
    viewport_height: float
    content_top: float
    content_height: float
    content_margin: float = 0.0

    @property
    def pixels_above(self) -> float:
        """Content scrolled past above the viewport."""
        return self.viewport_top - self.content_top - self.content_margin

    @property
    def pixels_below(self) -> float:
        """Content not yet scrolled into view. Negative when it is too short."""
        return self.content_height - self.viewport_height - self.pixels_above
