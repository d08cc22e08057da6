"""Swipe-based music discovery engine."""

__version__ = "0.1.0"
