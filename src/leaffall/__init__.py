"""LEAFFALL - flickering leaves dissolve reveal effect."""

__version__ = "0.1.0"
