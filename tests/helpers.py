"""Test helpers and utilities."""
import asyncio

from scrollfeed.domain.geometry import ViewportGeometry


async def settle(cycles: int = 10) -> None:
    """Let pending tasks and callbacks run."""
    for _ in range(cycles):
        await asyncio.sleep(0)


def geometry_with_pixels_below(pixels_below: float) -> ViewportGeometry:
    """Geometry of a 500px viewport scrolled so *pixels_below* remain."""
    return ViewportGeometry(
        viewport_top=1000,
        viewport_height=500,
        content_top=0,
        content_height=1500 + pixels_below,
    )
