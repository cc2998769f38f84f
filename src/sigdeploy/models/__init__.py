"""Roster, signature and reconciler state models."""
