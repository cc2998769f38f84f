"""Roster transport and parsing."""
