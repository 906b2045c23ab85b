"""
Intro controller for the flickering leaves reveal.

States:
    IDLE: Overlay covers the content, effect not started
    RUNNING: Cells flicker and dissolve
    FADING_OUT: Effect finished, remaining overlay fades as a whole
    REVEALED: Overlay gone, content fully visible
    SKIPPED: User skipped the intro

The controller is clock-agnostic: callers pass a monotonic time in
milliseconds (e.g. pygame.time.get_ticks()) to every method.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Callable, Optional
import logging

import numpy as np

from leaffall.animation.flicker import FlickerConfig, FlickerField, FrameState
from leaffall.graphics.overlay import grid_center, logical_size

logger = logging.getLogger(__name__)


class IntroState(Enum):
    """Intro lifecycle states."""
    IDLE = auto()
    RUNNING = auto()
    FADING_OUT = auto()
    REVEALED = auto()
    SKIPPED = auto()


@dataclass
class IntroConfig:
    """Intro timing and layout."""
    cell_size: int = 2
    canvas_fade_ms: float = 1000.0  # Whole-overlay fade after the effect
    resize_debounce_ms: float = 100.0


CompletionListener = Callable[[IntroState], None]


class IntroController:
    """
    Drives a FlickerField from a frame clock.

    Handles the covering overlay lifecycle around the field: start,
    per-frame update, final fade-out, skip, restart and debounced resize.
    """

    VALID_TRANSITIONS: list[tuple[IntroState, IntroState]] = [
        (IntroState.IDLE, IntroState.RUNNING),
        (IntroState.IDLE, IntroState.SKIPPED),
        (IntroState.RUNNING, IntroState.FADING_OUT),
        (IntroState.RUNNING, IntroState.SKIPPED),
        (IntroState.FADING_OUT, IntroState.REVEALED),
        (IntroState.FADING_OUT, IntroState.SKIPPED),
        # Restart
        (IntroState.RUNNING, IntroState.RUNNING),
        (IntroState.FADING_OUT, IntroState.RUNNING),
        (IntroState.REVEALED, IntroState.RUNNING),
        (IntroState.SKIPPED, IntroState.RUNNING),
    ]

    def __init__(
        self,
        pixel_width: int,
        pixel_height: int,
        config: Optional[IntroConfig] = None,
        flicker_config: Optional[FlickerConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config or IntroConfig()
        self.flicker_config = flicker_config or FlickerConfig()
        self._rng = rng if rng is not None else np.random.default_rng()

        self._state = IntroState.IDLE
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        self._listeners: list[CompletionListener] = []

        self._start_ms = 0.0
        self._fade_start_ms = 0.0
        self._elapsed_ms = 0.0
        self.overlay_opacity = 1.0

        self._last_frame: Optional[FrameState] = None
        self._pending_size: Optional[tuple[int, int]] = None
        self._resize_at_ms = 0.0

        self.pixel_width = pixel_width
        self.pixel_height = pixel_height
        self.field = self._create_field()

    @property
    def state(self) -> IntroState:
        """Get current state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the overlay still needs drawing."""
        return self._state in (IntroState.RUNNING, IntroState.FADING_OUT)

    @property
    def is_finished(self) -> bool:
        """Check if the content is uncovered."""
        return self._state in (IntroState.REVEALED, IntroState.SKIPPED)

    @property
    def elapsed_ms(self) -> float:
        """Effect time of the last update."""
        return self._elapsed_ms

    @property
    def progress(self) -> float:
        """Effect progress percentage of the last update."""
        return self.field.get_progress(self._elapsed_ms)

    def _create_field(self) -> FlickerField:
        width, height = logical_size(
            self.pixel_width, self.pixel_height, self.config.cell_size
        )
        cx, cy = grid_center(width, height)
        return FlickerField(
            width, height, cx, cy, config=self.flicker_config, rng=self._rng
        )

    def _transition(self, to_state: IntroState) -> bool:
        if (self._state, to_state) not in self._valid_transitions:
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.info(f"Intro transition: {old_state.name} -> {to_state.name}")

        if to_state in (IntroState.REVEALED, IntroState.SKIPPED):
            for listener in self._listeners:
                try:
                    listener(to_state)
                except Exception as e:
                    logger.error(f"Error in intro listener: {e}")
        return True

    def add_listener(self, callback: CompletionListener) -> None:
        """Add a listener called once the content is uncovered."""
        self._listeners.append(callback)

    def remove_listener(self, callback: CompletionListener) -> None:
        """Remove a completion listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def start(self, now_ms: float) -> bool:
        """Start the effect clock."""
        if not self._transition(IntroState.RUNNING):
            return False
        self._start_ms = now_ms
        self._elapsed_ms = 0.0
        self.overlay_opacity = 1.0
        return True

    def update(self, now_ms: float) -> Optional[FrameState]:
        """Advance to now_ms.

        Returns:
            The frame to draw, or None once there is nothing left to draw
        """
        self._apply_pending_resize(now_ms)

        if self._state == IntroState.RUNNING:
            self._elapsed_ms = now_ms - self._start_ms
            frame = self.field.tick(self._elapsed_ms)
            self._last_frame = frame
            if self.field.is_complete(self._elapsed_ms):
                self._fade_start_ms = now_ms
                self._transition(IntroState.FADING_OUT)
            return frame

        if self._state == IntroState.FADING_OUT:
            fade = (now_ms - self._fade_start_ms) / self.config.canvas_fade_ms
            self.overlay_opacity = max(0.0, 1.0 - fade)
            if self.overlay_opacity <= 0.0:
                self._transition(IntroState.REVEALED)
                return None
            # The field is done; keep showing its final frame under the fade
            return self._last_frame

        return None

    def skip(self) -> bool:
        """Drop the overlay immediately."""
        if not self._transition(IntroState.SKIPPED):
            return False
        self.overlay_opacity = 0.0
        return True

    def restart(self, now_ms: float) -> bool:
        """Reset the field and run the effect again from the start."""
        if self._state == IntroState.IDLE:
            return self.start(now_ms)
        if not self._transition(IntroState.RUNNING):
            return False
        self.field.reset()
        self._start_ms = now_ms
        self._elapsed_ms = 0.0
        self.overlay_opacity = 1.0
        return True

    def resize(self, pixel_width: int, pixel_height: int, now_ms: float) -> None:
        """Request a new surface size; applied after the debounce delay."""
        self._pending_size = (pixel_width, pixel_height)
        self._resize_at_ms = now_ms + self.config.resize_debounce_ms

    def _apply_pending_resize(self, now_ms: float) -> None:
        if self._pending_size is None or now_ms < self._resize_at_ms:
            return
        # Applied once the final fade is over
        if self._state == IntroState.FADING_OUT:
            return

        self.pixel_width, self.pixel_height = self._pending_size
        self._pending_size = None
        self.field = self._create_field()
        if self._state == IntroState.RUNNING:
            self._start_ms = now_ms
            self._elapsed_ms = 0.0
        logger.info(
            f"Intro resized to {self.pixel_width}x{self.pixel_height} "
            f"({self.field.width}x{self.field.height} cells)"
        )
