"""Graphics module for LEAFFALL rendering."""

from leaffall.graphics.primitives import new_buffer, fill, draw_rect, blend
from leaffall.graphics.overlay import (
    OverlayPalette,
    logical_size,
    grid_center,
    fill_cover,
    render_overlay,
)

__all__ = [
    # Primitives
    "new_buffer",
    "fill",
    "draw_rect",
    "blend",
    # Overlay
    "OverlayPalette",
    "logical_size",
    "grid_center",
    "fill_cover",
    "render_overlay",
]
