"""Decides when a scrolled list is close enough to its end to load more."""

import logging
from typing import Optional, Sequence

from scrollfeed.domain.geometry import ViewportGeometry

logger = logging.getLogger("ScrollFeed.ScrollMonitor")

DEFAULT_THRESHOLD_PX = 1000.0


class ScrollMonitor:
    """Pure "should we fetch more rows now?" predicate.

    A row threshold, when set, takes precedence over the pixel threshold.
    """

    def __init__(
        self,
        threshold_rows: Optional[int] = None,
        threshold_px: float = DEFAULT_THRESHOLD_PX,
    ):
        if threshold_rows is not None and threshold_rows < 0:
            raise ValueError("threshold_rows must be >= 0")
        self.threshold_rows = threshold_rows
        self.threshold_px = threshold_px

    @property
    def uses_rows(self) -> bool:
        return self.threshold_rows is not None

    @staticmethod
    def pixels_below(geometry: ViewportGeometry) -> float:
        return geometry.pixels_below

    @staticmethod
    def rows_below(rows: Sequence[float], pixels_below: float) -> int:
        """Count trailing rows that fit entirely within ``pixels_below``.

        Walks from the last row backward and stops at the first row that
        does not fit, so only rows below the fold are visited.
        """
        count = 0
        accumulated = 0.0
        for height in reversed(rows):
            accumulated += height
            if accumulated > pixels_below:
                break
            count += 1
        return count

    def evaluate(self, geometry: ViewportGeometry, rows: Sequence[float] = ()) -> bool:
        """Return True when more rows should be requested.

        Args:
            geometry: Current viewport/content measurements
            rows: Outer heights of the rendered rows, in render order

        Returns:
            bool: True if the unseen content is within the threshold
        """
        below = self.pixels_below(geometry)
        if below < 0:
            # Content does not fill the viewport yet.
            return True

        if self.uses_rows:
            rows_below = self.rows_below(rows, below)
            logger.debug(
                f"{rows_below} rows ({below:.0f}px) below the fold, "
                f"threshold {self.threshold_rows} rows"
            )
            return rows_below <= self.threshold_rows

        logger.debug(f"{below:.0f}px below the fold, threshold {self.threshold_px}px")
        return below <= self.threshold_px
