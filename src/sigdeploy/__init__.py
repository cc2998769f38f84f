"""Roster-driven email signature deployment."""

__version__ = "0.1.0"
