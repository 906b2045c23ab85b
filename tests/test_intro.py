import numpy as np
import pytest

from leaffall.animation.flicker import FlickerConfig
from leaffall.core.intro import IntroConfig, IntroController, IntroState


@pytest.fixture
def intro():
    return IntroController(
        40,
        40,
        config=IntroConfig(cell_size=2, canvas_fade_ms=1000.0, resize_debounce_ms=100.0),
        flicker_config=FlickerConfig(
            total_duration_ms=1000.0,
            fade_out_duration_ms=200.0,
            border_thickness=2,
        ),
        rng=np.random.default_rng(3),
    )


def test_field_sized_from_pixels(intro):
    assert (intro.field.width, intro.field.height) == (20, 20)
    assert (intro.field.center_x, intro.field.center_y) == (10.0, 10.0)
    assert intro.state == IntroState.IDLE
    assert intro.update(0.0) is None


def test_full_lifecycle(intro):
    finished = []
    intro.add_listener(finished.append)

    assert intro.start(1000.0)
    assert intro.state == IntroState.RUNNING

    frame = intro.update(1000.0)
    assert frame.color.shape == (20, 20)
    assert np.all(frame.active)

    frame = intro.update(2200.0)
    assert frame is not None
    assert intro.state == IntroState.FADING_OUT
    assert intro.progress == 100.0

    intro.update(2700.0)
    assert intro.overlay_opacity == pytest.approx(0.5)
    assert intro.is_running

    assert intro.update(3200.0) is None
    assert intro.state == IntroState.REVEALED
    assert intro.is_finished
    assert intro.update(4000.0) is None
    assert finished == [IntroState.REVEALED]


def test_skip(intro):
    finished = []
    intro.add_listener(finished.append)

    intro.start(0.0)
    intro.update(100.0)
    assert intro.skip()
    assert intro.state == IntroState.SKIPPED
    assert intro.overlay_opacity == 0.0
    assert intro.update(200.0) is None
    assert not intro.skip()
    assert finished == [IntroState.SKIPPED]


def test_restart_resets_field(intro):
    intro.start(0.0)
    intro.update(1300.0)
    intro.update(2400.0)
    assert intro.state == IntroState.REVEALED

    assert intro.restart(5000.0)
    assert intro.state == IntroState.RUNNING
    assert intro.overlay_opacity == 1.0
    assert intro.field.cell(10, 10).is_flickering

    intro.update(5100.0)
    assert intro.elapsed_ms == 100.0


def test_restart_from_idle_starts(intro):
    assert intro.restart(50.0)
    assert intro.state == IntroState.RUNNING


def test_resize_is_debounced(intro):
    intro.start(0.0)
    intro.update(900.0)

    intro.resize(80, 60, 1000.0)
    intro.update(1050.0)
    assert intro.field.width == 20

    frame = intro.update(1100.0)
    assert (intro.field.width, intro.field.height) == (40, 30)
    assert frame.opacity.shape == (30, 40)
    assert intro.elapsed_ms == 0.0


def test_failing_listener_does_not_propagate(intro):
    def broken(state):
        raise RuntimeError("boom")

    intro.add_listener(broken)
    intro.start(0.0)
    assert intro.skip()


def test_remove_listener(intro):
    finished = []
    intro.add_listener(finished.append)
    intro.remove_listener(finished.append)

    intro.start(0.0)
    intro.skip()
    assert finished == []


def test_skip_before_start(intro):
    finished = []
    intro.add_listener(finished.append)

    assert intro.skip()
    assert intro.state == IntroState.SKIPPED
    assert intro.overlay_opacity == 0.0
    assert intro.update(10.0) is None
    assert finished == [IntroState.SKIPPED]


def test_resize_during_final_fade_keeps_page_uncovered(intro):
    intro.start(0.0)
    for now in np.arange(0.0, 1250.0, 50.0):
        frame = intro.update(now)
    assert intro.state == IntroState.FADING_OUT
    assert frame.opacity[2:-2, 2:-2].max() == 0.0

    intro.resize(80, 60, 1250.0)
    frame = intro.update(1400.0)
    assert intro.overlay_opacity == pytest.approx(0.8)
    assert frame.opacity.shape == (20, 20)
    assert frame.opacity[2:-2, 2:-2].max() == 0.0
    assert intro.field.width == 20

    assert intro.update(2300.0) is None
    assert intro.state == IntroState.REVEALED

    intro.update(2400.0)
    assert (intro.field.width, intro.field.height) == (40, 30)
