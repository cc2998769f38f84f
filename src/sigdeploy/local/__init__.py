"""Installed signature artifacts on the local machine."""
