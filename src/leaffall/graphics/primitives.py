"""Basic drawing primitives for LEAFFALL buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Create an RGB buffer of shape (height, width, 3)."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a filled rectangle, optionally alpha-blended over the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        alpha: Coverage, 0 = no change, 1 = solid
    """
    h, w = buffer.shape[:2]

    # Clamp to buffer bounds
    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))

    if alpha >= 1.0:
        buffer[y1:y2, x1:x2] = color
    elif alpha > 0.0:
        region = buffer[y1:y2, x1:x2].astype(np.float32)
        blended = region * (1.0 - alpha) + np.array(color, dtype=np.float32) * alpha
        buffer[y1:y2, x1:x2] = np.clip(blended, 0, 255).astype(np.uint8)


def blend(
    buffer: Buffer,
    colors: NDArray,
    alpha: NDArray,
) -> None:
    """Alpha-blend a per-pixel color layer over the buffer in place.

    Args:
        buffer: Target numpy array (height, width, 3)
        colors: Layer colors, shape (height, width, 3)
        alpha: Layer coverage in [0, 1], shape (height, width)
    """
    a = alpha[..., np.newaxis].astype(np.float32)
    blended = buffer.astype(np.float32) * (1.0 - a) + colors.astype(np.float32) * a
    buffer[:] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
