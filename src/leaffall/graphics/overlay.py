"""Renders a flicker field frame as a covering overlay.

The overlay sits on top of the content being revealed. Each active cell
covers a cell_size x cell_size square with the dark or light tone at the
cell's opacity; once a cell has faded out the content shows through.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from leaffall.animation.flicker import FrameState
from leaffall.graphics.primitives import Buffer, Color, blend, fill


@dataclass(frozen=True)
class OverlayPalette:
    """Colors of the covering overlay."""

    dark: Color = (20, 20, 20)  # color 0
    light: Color = (100, 100, 100)  # color 1
    cover: Color = (40, 40, 40)  # solid cover before the first frame


def logical_size(pixel_width: int, pixel_height: int, cell_size: int) -> Tuple[int, int]:
    """Grid extent for a pixel area, whole cells only."""
    return pixel_width // cell_size, pixel_height // cell_size


def grid_center(width: int, height: int) -> Tuple[float, float]:
    """Center cell of a grid."""
    return float(width // 2), float(height // 2)


def fill_cover(buffer: Buffer, palette: OverlayPalette = OverlayPalette()) -> None:
    """Hide the content completely."""
    fill(buffer, palette.cover)


def render_overlay(
    buffer: Buffer,
    frame: FrameState,
    cell_size: int,
    palette: OverlayPalette = OverlayPalette(),
    overlay_opacity: float = 1.0,
) -> None:
    """Blend a frame's cells over the buffer.

    Args:
        buffer: Content buffer (height, width, 3), modified in place
        frame: Cell state from FlickerField.tick
        cell_size: Screen pixels per cell edge
        palette: Overlay colors
        overlay_opacity: Extra opacity applied to the whole overlay
    """
    h, w = buffer.shape[:2]

    alpha = np.where(frame.active, frame.opacity, 0.0) * overlay_opacity
    alpha = np.repeat(np.repeat(alpha, cell_size, axis=0), cell_size, axis=1)
    tones = np.repeat(np.repeat(frame.color, cell_size, axis=0), cell_size, axis=1)

    # Pixels past the last whole cell keep their content
    ch, cw = min(h, alpha.shape[0]), min(w, alpha.shape[1])
    alpha = alpha[:ch, :cw]
    tones = tones[:ch, :cw]

    colors = np.where(
        tones[..., np.newaxis] == 1,
        np.array(palette.light, dtype=np.uint8),
        np.array(palette.dark, dtype=np.uint8),
    )
    blend(buffer[:ch, :cw], colors, alpha)
