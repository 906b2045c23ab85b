"""
Simulator window using pygame.

Shows the flickering leaves intro on top of a placeholder page so the
effect can be tuned on a desktop.
"""

import pygame
import logging
from typing import Optional
from dataclasses import dataclass

import numpy as np

from leaffall.core.intro import IntroController, IntroConfig, IntroState
from leaffall.animation.flicker import FlickerConfig
from leaffall.graphics.overlay import OverlayPalette, fill_cover, render_overlay
from leaffall.graphics.primitives import Buffer, draw_rect, new_buffer

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    width: int = 960
    height: int = 600
    title: str = "LEAFFALL Simulator"
    fps: int = 60

    # Colors
    page_top: tuple[int, int, int] = (240, 236, 222)
    page_bottom: tuple[int, int, int] = (170, 196, 150)
    text_color: tuple[int, int, int] = (230, 230, 240)


def draw_page(width: int, height: int, config: WindowConfig) -> Buffer:
    """Placeholder content revealed by the intro."""
    buffer = new_buffer(width, height)

    t = np.linspace(0.0, 1.0, height)[:, np.newaxis]
    top = np.array(config.page_top, dtype=np.float32)
    bottom = np.array(config.page_bottom, dtype=np.float32)
    buffer[:, :] = (top * (1 - t) + bottom * t)[:, np.newaxis, :].astype(np.uint8)

    # Header bar and a few content blocks
    draw_rect(buffer, 0, 0, width, height // 10, (60, 90, 60))
    block_w = width // 4
    for i in range(3):
        x = width // 16 + i * (block_w + width // 16)
        draw_rect(buffer, x, height // 4, block_w, height // 2, (255, 255, 255), alpha=0.6)

    return buffer


class SimulatorWindow:
    """
    Desktop window running the intro.

    Keyboard Mapping:
        ESC / S: Skip intro
        R: Restart intro
        F1: Toggle debug overlay
        Q: Quit
    """

    def __init__(
        self,
        config: WindowConfig | None = None,
        intro_config: IntroConfig | None = None,
        flicker_config: FlickerConfig | None = None,
        palette: OverlayPalette | None = None,
        seed: Optional[int] = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.palette = palette or OverlayPalette()

        self.intro = IntroController(
            self.config.width,
            self.config.height,
            config=intro_config,
            flicker_config=flicker_config,
            rng=np.random.default_rng(seed),
        )
        self.intro.add_listener(self._on_intro_finished)

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._running = False
        self._show_debug = False
        self._page = draw_page(self.config.width, self.config.height, self.config)

        logger.info("SimulatorWindow created")

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            pygame.RESIZABLE,
        )
        self._clock = pygame.time.Clock()
        pygame.font.init()
        self._font = pygame.font.SysFont(None, 20)
        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _on_intro_finished(self, state: IntroState) -> None:
        logger.info(f"Intro finished ({state.name}), content revealed")

    def _handle_events(self) -> None:
        """Process pygame events."""
        now = pygame.time.get_ticks()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self.config.width, self.config.height = event.w, event.h
                self._page = draw_page(event.w, event.h, self.config)
                self.intro.resize(event.w, event.h, now)

            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_s):
                    self.intro.skip()
                elif event.key == pygame.K_r:
                    self.intro.restart(now)
                elif event.key == pygame.K_F1:
                    self._show_debug = not self._show_debug
                elif event.key == pygame.K_q:
                    self._running = False

    def _render(self) -> None:
        """Compose page and overlay for this frame."""
        now = pygame.time.get_ticks()
        buffer = self._page.copy()

        frame = self.intro.update(now)
        if frame is not None:
            render_overlay(
                buffer,
                frame,
                self.intro.config.cell_size,
                self.palette,
                overlay_opacity=self.intro.overlay_opacity,
            )
        elif self.intro.state == IntroState.IDLE:
            fill_cover(buffer, self.palette)

        surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
        self._screen.blit(surface, (0, 0))

        if self._show_debug:
            self._render_debug()

        pygame.display.flip()

    def _render_debug(self) -> None:
        """Draw state and progress text."""
        text = (
            f"{self.intro.state.name}  {self.intro.progress:5.1f}%  "
            f"{self._clock.get_fps():4.1f} fps"
        )
        surf = self._font.render(text, True, self.config.text_color)
        self._screen.blit(surf, (8, 8))

    def run(self) -> None:
        """Main loop, returns when the window is closed."""
        self._init_pygame()
        self._running = True
        self.intro.start(pygame.time.get_ticks())

        try:
            while self._running:
                self._handle_events()
                self._render()
                self._clock.tick(self.config.fps)
        finally:
            pygame.quit()
            logger.info("Simulator closed")
