"""Process privilege check used before mutating mail-client configuration."""

from __future__ import annotations

import ctypes
import os
import sys

from sigdeploy.core.exceptions import ElevationRequired


def is_elevated() -> bool:
    if sys.platform == "win32":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return os.geteuid() == 0


def require_elevation(operation: str) -> None:
    if not is_elevated():
        raise ElevationRequired(f"{operation} requires an elevated process")
