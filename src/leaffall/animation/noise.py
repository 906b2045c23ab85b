"""Cheap multi-wave noise used to bend the reveal contour.

Not real Perlin noise: three sine/cosine products at different
frequencies, good enough for organic-looking boundaries and fully
deterministic for a given position.
"""

from typing import Union

import numpy as np
from numpy.typing import NDArray

Number = Union[float, NDArray[np.float64]]

# (x frequency, y frequency, weight)
NOISE_WAVES = (
    (0.5, 0.3, 0.5),
    (1.2, 0.8, 0.3),
    (2.1, 1.7, 0.2),
)


def noise_2d(x: Number, y: Number) -> Number:
    """Sample the noise field at (x, y).

    Works elementwise on numpy arrays as well as on plain floats.

    Returns:
        Value roughly in [-1, 1] (in practice within +-1/3)
    """
    total = 0.0
    for fx, fy, weight in NOISE_WAVES:
        total = total + np.sin(x * fx) * np.cos(y * fy) * weight
    return total / len(NOISE_WAVES)


def noise_field(width: int, height: int, scale: float = 0.02) -> NDArray[np.float64]:
    """Noise for every cell of a grid, shape (height, width).

    Cell (x, y) is sampled at (x * scale, y * scale), matching noise_2d.
    """
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    return noise_2d(xs * scale, ys * scale)
