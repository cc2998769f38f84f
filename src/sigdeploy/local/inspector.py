"""Local state inspector — what is installed in the signatures directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sigdeploy.core.config import AppSettings
from sigdeploy.core.exceptions import BindingUnavailable, UnreadableMarker
from sigdeploy.core.protocols import IBindingStore
from sigdeploy.local.naming import ArtifactKind, ArtifactName, parse_artifact_name
from sigdeploy.models.signature import DefaultBindings, InstalledSignatureSet

logger = logging.getLogger(__name__)


class LocalStateInspector:
    """Read-only view of installed signature artifacts and bindings."""

    def __init__(self, settings: AppSettings, binding_store: IBindingStore) -> None:
        self._settings = settings
        self._bindings = binding_store
        self._dir = Path(settings.signature.signatures_dir)
        self._prefix = settings.signature.prefix

    def _entries(self) -> list[tuple[Path, ArtifactName]]:
        if not self._dir.is_dir():
            return []
        found = []
        for path in sorted(self._dir.iterdir()):
            name = parse_artifact_name(path.name, self._prefix)
            if name is not None:
                found.append((path, name))
        return found

    def find_installed_version_marker(self) -> Optional[Path]:
        """Locate the version marker; None means never installed."""
        markers = [p for p, n in self._entries() if n.kind is ArtifactKind.MARKER and p.is_file()]
        if not markers:
            return None
        if len(markers) > 1:
            logger.warning(
                "Found %d version markers for prefix %r, using the newest",
                len(markers), self._prefix,
            )
            markers.sort(key=lambda p: (p.stat().st_mtime, p.name))
        return markers[-1]

    def read_version_marker(self, marker: Path) -> str:
        try:
            return marker.read_text(encoding="utf-8-sig").strip()
        except (OSError, UnicodeDecodeError) as exc:
            raise UnreadableMarker(str(marker), str(exc)) from exc

    def enumerate_installed_artifacts(self) -> list[Path]:
        """Every file/dir named per the convention for the prefix, any version."""
        return [p for p, _n in self._entries()]

    def find_default_bindings(self, mail_identity: str) -> DefaultBindings:
        return self._bindings.find_default_bindings(mail_identity)

    def inspect(self, identity: str, mail_identity: str | None = None) -> InstalledSignatureSet:
        """Snapshot of the installed set; unreadable marker reads as not installed."""
        snapshot = InstalledSignatureSet(identity=identity)
        marker = self.find_installed_version_marker()
        if marker is not None:
            snapshot.marker_path = marker
            try:
                snapshot.version = self.read_version_marker(marker) or None
            except UnreadableMarker as exc:
                logger.warning("%s", exc)

        wanted = identity.casefold()
        for path, name in self._entries():
            if name.identity is None or name.identity.casefold() != wanted:
                continue
            if name.kind is ArtifactKind.RESOURCES:
                snapshot.resource_dirs.append(path)
            else:
                snapshot.content_files.append(path)

        if mail_identity:
            try:
                snapshot.bindings = self.find_default_bindings(mail_identity)
            except BindingUnavailable as exc:
                logger.info("No default bindings for %s: %s", mail_identity, exc)
        return snapshot
