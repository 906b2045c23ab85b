"""Flickering leaves dissolve effect.

A solid overlay made of cells flickers between a dark and a light tone,
then cells stop flickering and fade to transparent, spreading outward
from a center point. Each cell gets a stop time from:

- its distance to the center, bent by a noise field
- a super-linear decay curve (center clears fast, edges linger)
- a one-off random jitter so equal-distance cells don't stop in lockstep

At query time, neighbours that already stopped pull a cell's stop time
earlier ("contagion"). Cells within the border band never stop and keep
framing the reveal.

Usage:
    field = FlickerField(width, height, width / 2, height / 2)

    # Each frame, per cell:
    view = field.get_cell_state(x, y, elapsed_ms)

    # Or the whole grid at once:
    frame = field.tick(elapsed_ms)

    if field.is_complete(elapsed_ms):
        # Stop drawing
"""

from dataclasses import dataclass
from typing import Optional
import logging
import math

import numpy as np
from numpy.typing import NDArray

from leaffall.animation.noise import noise_2d, noise_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlickerConfig:
    """Timing and shape constants for the effect."""

    total_duration_ms: float = 10000.0
    fade_out_duration_ms: float = 2000.0
    irregularity_factor: float = 0.3
    contagion_strength: float = 0.1
    natural_variation: float = 0.2
    border_thickness: int = 10

    flicker_period_min_ms: float = 50.0
    flicker_period_max_ms: float = 150.0
    noise_scale: float = 0.02
    irregularity_distance: float = 100.0
    decay_exponent: float = 2.5
    contagion_window_ms: float = 2000.0

    def __post_init__(self) -> None:
        if self.total_duration_ms <= 0 or self.fade_out_duration_ms <= 0:
            raise ValueError("Durations must be positive")
        for name in ("irregularity_factor", "contagion_strength", "natural_variation"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.border_thickness < 0:
            raise ValueError("border_thickness must be >= 0")
        if not 0 < self.flicker_period_min_ms <= self.flicker_period_max_ms:
            raise ValueError(
                "Flicker period range must satisfy 0 < min <= max, got "
                f"{self.flicker_period_min_ms}..{self.flicker_period_max_ms}"
            )

    @property
    def effect_duration_ms(self) -> float:
        """Time until the whole effect is over (stop window + last fade)."""
        return self.total_duration_ms + self.fade_out_duration_ms


@dataclass
class CellState:
    """Snapshot of one cell's state."""

    is_flickering: bool
    flicker_period_ms: float
    opacity: float
    scheduled_stop_ms: float
    last_toggle_ms: float
    color: int
    is_fading: bool
    fade_start_ms: float


@dataclass(frozen=True)
class CellView:
    """What a renderer needs to draw a cell."""

    color: int  # 0 = dark, 1 = light
    opacity: float  # 0 = invisible, 1 = fully covering
    is_active: bool


@dataclass
class FrameState:
    """Whole-grid state for one tick, arrays of shape (height, width)."""

    elapsed_ms: float
    color: NDArray[np.uint8]
    opacity: NDArray[np.float64]
    active: NDArray[np.bool_]


class FlickerField:
    """Per-cell state grid for the flickering leaves effect.

    Cell state lives in numpy arrays indexed [y, x]. Time passed to the
    update methods must be non-decreasing; coordinates must be inside
    the grid. Neither is checked.

    Neighbour influence is read from a snapshot of the flickering flags
    taken when a new elapsed value is first seen, so within a tick the
    result doesn't depend on the order cells are visited.
    """

    def __init__(
        self,
        width: int,
        height: int,
        center_x: float,
        center_y: float,
        config: Optional[FlickerConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.width = width
        self.height = height
        self.center_x = center_x
        self.center_y = center_y
        self.config = config or FlickerConfig()
        self._rng = rng if rng is not None else np.random.default_rng()

        self._max_distance = math.sqrt(width ** 2 + height ** 2) / 2
        self._neighbor_counts = self._count_neighbors()

        self.initialize_cells()

        logger.info(
            f"FlickerField created: {width}x{height}, center=({center_x}, {center_y})"
        )

    # ------------------------------------------------------------------
    # Initialization

    def initialize_cells(self) -> None:
        """(Re)allocate the whole cell grid."""
        shape = (self.height, self.width)
        cfg = self.config

        self._flickering = np.ones(shape, dtype=bool)
        self._fading = np.zeros(shape, dtype=bool)
        self._period = self._rng.uniform(
            cfg.flicker_period_min_ms, cfg.flicker_period_max_ms, size=shape
        )
        self._opacity = np.ones(shape, dtype=np.float64)
        self._last_toggle = np.zeros(shape, dtype=np.float64)
        self._color = self._rng.integers(0, 2, size=shape).astype(np.uint8)
        self._fade_start = np.zeros(shape, dtype=np.float64)

        ys, xs = np.mgrid[0:self.height, 0:self.width].astype(np.float64)
        noise = noise_field(self.width, self.height, cfg.noise_scale)
        jitter = self._rng.random(shape)
        stop = self._decay_schedule(xs, ys, noise, jitter)
        stop[self._border_mask()] = math.inf
        self._stop = stop

        self._tick_ms: Optional[float] = None
        self._snapshot = self._flickering.copy()

    def reset(self) -> None:
        """Restart the effect with fresh random rates and jitter."""
        self.initialize_cells()
        logger.info("FlickerField reset")

    def _border_mask(self) -> NDArray[np.bool_]:
        b = self.config.border_thickness
        mask = np.zeros((self.height, self.width), dtype=bool)
        if b > 0:
            mask[:b, :] = True
            mask[-b:, :] = True
            mask[:, :b] = True
            mask[:, -b:] = True
        return mask

    def _count_neighbors(self) -> NDArray[np.int64]:
        """Number of in-bounds neighbours of each cell (3..8 on big grids)."""
        padded = np.pad(np.ones((self.height, self.width), dtype=np.int64), 1)
        return self._sum_neighbors(padded)

    def _sum_neighbors(self, padded: NDArray) -> NDArray[np.int64]:
        h, w = self.height, self.width
        total = np.zeros((h, w), dtype=np.int64)
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                total += padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
        return total

    # ------------------------------------------------------------------
    # Scheduling

    def is_border(self, x: int, y: int) -> bool:
        """Check if a cell lies in the never-stopping border band."""
        b = self.config.border_thickness
        return x < b or x >= self.width - b or y < b or y >= self.height - b

    def schedule_stop_time(self, x: int, y: int) -> float:
        """Draw a stop time for one cell, in milliseconds.

        Border cells return +inf. Interior cells fall in
        [0, total_duration_ms]. Consumes one random draw for the jitter.
        """
        if self.is_border(x, y):
            return math.inf
        scale = self.config.noise_scale
        noise = noise_2d(x * scale, y * scale)
        return float(self._decay_schedule(float(x), float(y), noise, self._rng.random()))

    def _decay_schedule(self, x, y, noise, jitter):
        """Stop time from position, its noise sample and a uniform [0, 1) jitter.

        Elementwise, so it serves both a single cell and the whole grid.
        """
        cfg = self.config

        distance = np.sqrt((x - self.center_x) ** 2 + (y - self.center_y) ** 2)
        distance = distance + noise * cfg.irregularity_factor * cfg.irregularity_distance

        if self._max_distance > 0:
            t = np.clip(distance / self._max_distance, 0.0, 1.0)
        else:
            t = np.zeros_like(distance)

        curve = t ** cfg.decay_exponent
        variation = (jitter - 0.5) * cfg.natural_variation
        stop = (curve + variation) * cfg.total_duration_ms
        return np.clip(stop, 0.0, cfg.total_duration_ms)

    # ------------------------------------------------------------------
    # Per-tick update

    def _begin_tick(self, elapsed_ms: float) -> None:
        if elapsed_ms != self._tick_ms:
            self._tick_ms = elapsed_ms
            self._snapshot = self._flickering.copy()
            logger.debug(f"Tick at {elapsed_ms:.1f}ms")

    def neighbor_influence(self, x: int, y: int) -> float:
        """Fraction of the up-to-8 neighbours that have stopped flickering.

        Reads the start-of-tick snapshot. Returns 0 for a cell with no
        neighbours.
        """
        count = self._neighbor_counts[y, x]
        if count == 0:
            return 0.0
        y0, y1 = max(0, y - 1), min(self.height, y + 2)
        x0, x1 = max(0, x - 1), min(self.width, x + 2)
        stopped = np.count_nonzero(~self._snapshot[y0:y1, x0:x1])
        if not self._snapshot[y, x]:
            stopped -= 1
        return stopped / count

    def _influence_grid(self) -> NDArray[np.float64]:
        stopped = np.pad((~self._snapshot).astype(np.int64), 1)
        sums = self._sum_neighbors(stopped)
        counts = self._neighbor_counts
        return np.divide(
            sums, counts,
            out=np.zeros(sums.shape, dtype=np.float64),
            where=counts > 0,
        )

    def update_cell(self, x: int, y: int, elapsed_ms: float) -> CellState:
        """Advance one cell to elapsed_ms and return its new state."""
        cfg = self.config
        self._begin_tick(elapsed_ms)

        # 1. Stop check, pulled earlier by stopped neighbours
        if self._flickering[y, x]:
            pull = self.neighbor_influence(x, y) * cfg.contagion_strength * cfg.contagion_window_ms
            if elapsed_ms >= self._stop[y, x] - pull:
                self._flickering[y, x] = False
                self._fading[y, x] = True
                self._fade_start[y, x] = elapsed_ms

        # 2. Flicker
        if self._flickering[y, x]:
            if elapsed_ms - self._last_toggle[y, x] >= self._period[y, x]:
                self._color[y, x] = 1 - self._color[y, x]
                self._last_toggle[y, x] = elapsed_ms

        # 3. Fade
        if self._fading[y, x]:
            progress = (elapsed_ms - self._fade_start[y, x]) / cfg.fade_out_duration_ms
            self._opacity[y, x] = max(0.0, 1.0 - progress)

        return self.cell(x, y)

    def get_cell_state(self, x: int, y: int, elapsed_ms: float) -> CellView:
        """Update a cell and report what to draw. Call once per cell per frame."""
        state = self.update_cell(x, y, elapsed_ms)
        return CellView(
            color=state.color,
            opacity=state.opacity,
            is_active=state.is_flickering or state.opacity > 0,
        )

    def tick(self, elapsed_ms: float) -> FrameState:
        """Advance every cell to elapsed_ms at once.

        Same rules as update_cell applied to the whole grid.
        """
        cfg = self.config
        self._begin_tick(elapsed_ms)

        pull = self._influence_grid() * cfg.contagion_strength * cfg.contagion_window_ms
        stopping = self._flickering & (elapsed_ms >= self._stop - pull)
        if stopping.any():
            self._flickering[stopping] = False
            self._fading[stopping] = True
            self._fade_start[stopping] = elapsed_ms

        toggling = self._flickering & (elapsed_ms - self._last_toggle >= self._period)
        self._color[toggling] = 1 - self._color[toggling]
        self._last_toggle[toggling] = elapsed_ms

        fading = self._fading
        progress = (elapsed_ms - self._fade_start[fading]) / cfg.fade_out_duration_ms
        self._opacity[fading] = np.maximum(0.0, 1.0 - progress)

        return FrameState(
            elapsed_ms=elapsed_ms,
            color=self._color.copy(),
            opacity=self._opacity.copy(),
            active=self._flickering | (self._opacity > 0),
        )

    # ------------------------------------------------------------------
    # Queries

    def cell(self, x: int, y: int) -> CellState:
        """Current state of a cell, without advancing it."""
        return CellState(
            is_flickering=bool(self._flickering[y, x]),
            flicker_period_ms=float(self._period[y, x]),
            opacity=float(self._opacity[y, x]),
            scheduled_stop_ms=float(self._stop[y, x]),
            last_toggle_ms=float(self._last_toggle[y, x]),
            color=int(self._color[y, x]),
            is_fading=bool(self._fading[y, x]),
            fade_start_ms=float(self._fade_start[y, x]),
        )

    @property
    def scheduled_stop_times(self) -> NDArray[np.float64]:
        """Copy of every cell's scheduled stop time, shape (height, width)."""
        return self._stop.copy()

    def is_complete(self, elapsed_ms: float) -> bool:
        """Check if the effect is over. Border cells still flicker by then."""
        return elapsed_ms >= self.config.effect_duration_ms

    def get_progress(self, elapsed_ms: float) -> float:
        """Effect progress as a percentage, 0-100."""
        return min(100.0, 100.0 * elapsed_ms / self.config.effect_duration_ms)
