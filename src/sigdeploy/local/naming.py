"""Artifact naming convention — one encode/decode pair for every on-disk name.

  <prefix> <version> (<identity>).<ext>     content file per format
  <prefix> <version> (<identity>)_files     resource directory
  <prefix> <version> version.txt            version marker

A version token may contain inner spaces but no parentheses and nothing a
file name cannot hold; ``is_valid_version`` is the single gate for that.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from sigdeploy.models.signature import OutputFormat

FILES_SUFFIX = "_files"
MARKER_SUFFIX = " version.txt"

# path separators, Windows-reserved characters, parentheses and control chars
_VERSION_FORBIDDEN = re.compile(r'[\\/:*?"<>|()\x00-\x1f]')
_VERSION = r"[^()]+?"


def is_valid_version(token: str) -> bool:
    """True when ``token`` round-trips through the naming convention."""
    return (
        bool(token)
        and token == token.strip()
        and not token.endswith(".")
        and _VERSION_FORBIDDEN.search(token) is None
    )


class ArtifactKind(StrEnum):
    CONTENT = "content"
    RESOURCES = "resources"
    MARKER = "marker"


@dataclass(frozen=True)
class ArtifactName:
    """Decoded artifact name. ``identity`` is None for markers."""

    prefix: str
    version: str
    identity: Optional[str] = None
    kind: ArtifactKind = ArtifactKind.CONTENT
    fmt: Optional[OutputFormat] = None

    @classmethod
    def for_identity(cls, prefix: str, version: str, identity: str) -> ArtifactName:
        if not is_valid_version(version):
            raise ValueError(f"Version token {version!r} cannot be used in a file name")
        return cls(prefix=prefix, version=version, identity=identity)

    @property
    def base_name(self) -> str:
        """Signature name as registered with the mail client."""
        return f"{self.prefix} {self.version} ({self.identity})"

    @property
    def files_dir_name(self) -> str:
        return f"{self.base_name}{FILES_SUFFIX}"

    @property
    def marker_name(self) -> str:
        return f"{self.prefix} {self.version}{MARKER_SUFFIX}"

    def content_file_name(self, fmt: OutputFormat) -> str:
        return f"{self.base_name}.{fmt.value}"


def _patterns(prefix: str) -> tuple[re.Pattern[str], re.Pattern[str], re.Pattern[str]]:
    p = re.escape(prefix)
    exts = "|".join(re.escape(f.value) for f in OutputFormat)
    content = re.compile(
        rf"^{p} (?P<version>{_VERSION}) \((?P<identity>[^()]+)\)\.(?P<ext>{exts})$", re.IGNORECASE
    )
    resources = re.compile(rf"^{p} (?P<version>{_VERSION}) \((?P<identity>[^()]+)\){FILES_SUFFIX}$")
    marker = re.compile(rf"^{p} (?P<version>[^()]+){re.escape(MARKER_SUFFIX)}$")
    return content, resources, marker


def parse_artifact_name(name: str, prefix: str) -> Optional[ArtifactName]:
    """Decode a file/directory name; None when it is not ours."""
    content, resources, marker = _patterns(prefix)

    m = marker.match(name)
    if m and is_valid_version(m.group("version")):
        return ArtifactName(prefix, m.group("version"), kind=ArtifactKind.MARKER)
    m = resources.match(name)
    if m and is_valid_version(m.group("version")):
        return ArtifactName(prefix, m.group("version"), m.group("identity"), ArtifactKind.RESOURCES)
    m = content.match(name)
    if m and is_valid_version(m.group("version")):
        return ArtifactName(
            prefix,
            m.group("version"),
            m.group("identity"),
            ArtifactKind.CONTENT,
            OutputFormat(m.group("ext").lower()),
        )
    return None
