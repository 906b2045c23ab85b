import math

import numpy as np
import pytest

from leaffall.animation.noise import noise_2d, noise_field


def test_noise_is_zero_at_origin():
    assert noise_2d(0.0, 0.0) == pytest.approx(0.0)


def test_noise_matches_wave_sum():
    x, y = 1.0, 1.0
    expected = (
        math.sin(x * 0.5) * math.cos(y * 0.3) * 0.5
        + math.sin(x * 1.2) * math.cos(y * 0.8) * 0.3
        + math.sin(x * 2.1) * math.cos(y * 1.7) * 0.2
    ) / 3
    assert noise_2d(x, y) == pytest.approx(expected)


def test_noise_is_deterministic_and_bounded():
    xs = np.linspace(-50, 50, 201)
    values = noise_2d(xs, xs[::-1])
    assert np.array_equal(values, noise_2d(xs, xs[::-1]))
    assert np.all(np.abs(values) <= 1.0 / 3.0 + 1e-12)


def test_noise_field_samples_scaled_positions():
    grid = noise_field(30, 20, scale=0.02)
    assert grid.shape == (20, 30)
    assert grid[7, 12] == pytest.approx(noise_2d(12 * 0.02, 7 * 0.02))
    assert grid[19, 29] == pytest.approx(noise_2d(29 * 0.02, 19 * 0.02))
