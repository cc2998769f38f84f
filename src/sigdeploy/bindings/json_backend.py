"""File-backed binding store for hosts without an Outlook profile registry.

File shape::

    {"profiles": {"Outlook": {"jane@acme.sk": {"new": "...", "reply": null}}}}
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from sigdeploy.bindings.memory_backend import MemoryBindingStore
from sigdeploy.core.exceptions import BindingUnavailable


class JsonBindingStore(MemoryBindingStore):
    """IBindingStore persisted to a JSON document after every change."""

    def __init__(self, path: Path, profile: str = "Outlook") -> None:
        self._path = path
        super().__init__(profile=profile, profiles=self._load())

    def _load(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise BindingUnavailable(f"Binding store {self._path} unreadable: {exc}") from exc
        return data.get("profiles", {})

    def _changed(self) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        payload = json.dumps({"profiles": self._profiles}, indent=2, sort_keys=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise BindingUnavailable(f"Binding store {self._path} not writable: {exc}") from exc
