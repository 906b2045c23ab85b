"""Animation module for LEAFFALL."""

from leaffall.animation.noise import noise_2d, noise_field
from leaffall.animation.flicker import (
    FlickerField,
    FlickerConfig,
    CellState,
    CellView,
    FrameState,
)

__all__ = [
    # Noise
    "noise_2d",
    "noise_field",
    # Flicker field
    "FlickerField",
    "FlickerConfig",
    "CellState",
    "CellView",
    "FrameState",
]
