import numpy as np
import pytest

from leaffall.animation.flicker import FlickerConfig, FlickerField


@pytest.fixture
def rng():
    """Seeded random source for reproducible fields."""
    return np.random.default_rng(1234)


@pytest.fixture
def field(rng):
    """Default 100x100 field centered at (50, 50)."""
    return FlickerField(100, 100, 50, 50, rng=rng)


@pytest.fixture
def steady_config():
    """Config without random jitter, so stop times depend on position only."""
    return FlickerConfig(natural_variation=0.0)
