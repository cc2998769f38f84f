"""Type aliases used across sigdeploy."""

from __future__ import annotations

Location = str
MailAddress = str
SignatureName = str
GlobPattern = str
