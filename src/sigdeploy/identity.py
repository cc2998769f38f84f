"""Resolve the identity (user principal name) of the local user."""

from __future__ import annotations

import getpass
import logging
import os
import subprocess
import sys

from sigdeploy.core.config import AppSettings
from sigdeploy.core.exceptions import UserNotFound

logger = logging.getLogger(__name__)

WHOAMI_TIMEOUT_S = 15


def _whoami_upn() -> str:
    try:
        result = subprocess.run(
            ["whoami", "/upn"],
            capture_output=True,
            text=True,
            timeout=WHOAMI_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("whoami /upn failed: %s", exc)
        return ""
    if result.returncode != 0:
        logger.debug("whoami /upn exited %d: %s", result.returncode, result.stderr.strip())
        return ""
    return result.stdout.strip()


def resolve_local_identity(settings: AppSettings) -> str:
    """Configured identity, else the Windows UPN, else ``user@USERDNSDOMAIN``."""
    if settings.local_identity:
        return settings.local_identity.strip()

    if sys.platform == "win32":
        upn = _whoami_upn()
        if upn:
            return upn

    domain = os.environ.get("USERDNSDOMAIN", "")
    try:
        user = getpass.getuser()
    except Exception as exc:  # getuser raises OSError or KeyError depending on platform
        raise UserNotFound("<unknown>") from exc
    if not domain:
        raise UserNotFound(user)
    return f"{user}@{domain.lower()}"
