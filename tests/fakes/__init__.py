"""Shared test doubles — re-export in-memory collaborators."""

from __future__ import annotations

from fakes.registry import FakeRegistry
from sigdeploy.bindings.memory_backend import MemoryBindingStore
from sigdeploy.roster.sources import MemoryRosterSource

IDENTITY = "jane.doe@acme.sk"

__all__ = ["IDENTITY", "FakeRegistry", "MemoryBindingStore", "MemoryRosterSource"]
