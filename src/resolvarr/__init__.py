"""Resolve third-party video host pages into playable streams."""

__version__ = "0.1.0"
