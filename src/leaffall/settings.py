"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support,
e.g. ``LEAFFALL_EFFECT__TOTAL_DURATION_MS=8000``.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from leaffall.animation.flicker import FlickerConfig
from leaffall.core.intro import IntroConfig
from leaffall.graphics.overlay import OverlayPalette


class EffectSettings(BaseModel):
    """Flicker field tuning."""

    total_duration_ms: float = Field(default=10000.0, gt=0)
    fade_out_duration_ms: float = Field(default=2000.0, gt=0)
    irregularity_factor: float = Field(default=0.3, ge=0.0, le=1.0)
    contagion_strength: float = Field(default=0.1, ge=0.0, le=1.0)
    natural_variation: float = Field(default=0.2, ge=0.0, le=1.0)
    border_thickness: int = Field(default=10, ge=0)

    flicker_period_min_ms: float = Field(default=50.0, gt=0)
    flicker_period_max_ms: float = Field(default=150.0, gt=0)

    # Fixed seed for reproducible runs
    seed: Optional[int] = None

    def to_config(self) -> FlickerConfig:
        """Build the field configuration."""
        return FlickerConfig(
            total_duration_ms=self.total_duration_ms,
            fade_out_duration_ms=self.fade_out_duration_ms,
            irregularity_factor=self.irregularity_factor,
            contagion_strength=self.contagion_strength,
            natural_variation=self.natural_variation,
            border_thickness=self.border_thickness,
            flicker_period_min_ms=self.flicker_period_min_ms,
            flicker_period_max_ms=self.flicker_period_max_ms,
        )


class DisplaySettings(BaseModel):
    """Window and overlay rendering."""

    window_width: int = Field(default=960, gt=0)
    window_height: int = Field(default=600, gt=0)
    cell_size: int = Field(default=2, ge=1)
    fps: int = 60

    # Intro timing outside the field
    canvas_fade_ms: float = Field(default=1000.0, gt=0)
    resize_debounce_ms: float = Field(default=100.0, ge=0)

    # Overlay tones
    dark_color: tuple[int, int, int] = (20, 20, 20)
    light_color: tuple[int, int, int] = (100, 100, 100)
    cover_color: tuple[int, int, int] = (40, 40, 40)

    def to_intro_config(self) -> IntroConfig:
        """Build the intro controller configuration."""
        return IntroConfig(
            cell_size=self.cell_size,
            canvas_fade_ms=self.canvas_fade_ms,
            resize_debounce_ms=self.resize_debounce_ms,
        )

    def to_palette(self) -> OverlayPalette:
        """Build the overlay palette."""
        return OverlayPalette(
            dark=self.dark_color,
            light=self.light_color,
            cover=self.cover_color,
        )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="LEAFFALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Nested settings
    effect: EffectSettings = Field(default_factory=EffectSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
