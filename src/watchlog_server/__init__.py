"""Watchlog server: personal watch history with series progress and new-season alerts."""

__version__ = "0.1.0"
