"""Core intro flow for LEAFFALL."""

from leaffall.core.intro import IntroController, IntroConfig, IntroState

__all__ = [
    "IntroController",
    "IntroConfig",
    "IntroState",
]
