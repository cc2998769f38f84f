"""Signature lifecycle reconciler.

Per identity the installed set moves through::

    ABSENT --install--> INSTALLED(v) --roster bump--> STALE(v, w) --install--> INSTALLED(w)
       ^                                                                          |
       +-------------------------------- uninstall -------------------------------+

Install always replaces the whole set: every artifact carrying the prefix is
removed (marker first), fresh content is written, and the marker is written
last. An interrupted run therefore leaves either the old complete set or no
marker at all, and the next run reinstalls.
"""

from __future__ import annotations

import glob
import logging
import shutil
from pathlib import Path
from typing import Optional

from sigdeploy.core.config import AppSettings
from sigdeploy.core.exceptions import ArtifactWriteError, BindingUnavailable, UnreadableMarker
from sigdeploy.core.protocols import IBindingStore
from sigdeploy.local.inspector import LocalStateInspector
from sigdeploy.local.naming import ArtifactKind, ArtifactName, parse_artifact_name
from sigdeploy.models.roster import RosterRecord, RosterVersion
from sigdeploy.models.signature import BindingSlot, RenderedSignature, TemplateSet
from sigdeploy.models.state import (
    DetectionResult,
    InstallReport,
    SignatureState,
    UninstallReport,
    Verdict,
)
from sigdeploy.rendering.renderer import render_signature

logger = logging.getLogger(__name__)

_VERDICTS = {
    SignatureState.ABSENT: Verdict.NON_COMPLIANT_REINSTALL,
    SignatureState.INSTALLED: Verdict.COMPLIANT,
    SignatureState.STALE: Verdict.NON_COMPLIANT_UPDATE,
}


def _classify(installed: Optional[str], desired: RosterVersion) -> SignatureState:
    if installed is None:
        return SignatureState.ABSENT
    if installed == desired.token:
        return SignatureState.INSTALLED
    return SignatureState.STALE


class SignatureReconciler:
    """Drives install / update / uninstall / detect for the local user."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        inspector: LocalStateInspector,
        binding_store: IBindingStore,
    ) -> None:
        self._settings = settings
        self._inspector = inspector
        self._bindings = binding_store
        self._prefix = settings.signature.prefix
        self._dir = Path(settings.signature.signatures_dir)

    # ------------------------------------------------------------------
    # Read-only
    # ------------------------------------------------------------------

    def installed_version(self) -> Optional[str]:
        """Installed version token, or None when absent or unreadable."""
        marker = self._inspector.find_installed_version_marker()
        if marker is None:
            return None
        try:
            return self._inspector.read_version_marker(marker) or None
        except UnreadableMarker as exc:
            logger.warning("%s; treating signature as absent", exc)
            return None

    def current_state(self, desired: RosterVersion) -> SignatureState:
        return _classify(self.installed_version(), desired)

    def detect(
        self,
        desired: RosterVersion,
        identity: str | None = None,
        mail_identity: str | None = None,
        full_inventory: bool = False,
    ) -> DetectionResult:
        """Compare installed and desired versions without touching anything."""
        installed = self.installed_version()
        state = _classify(installed, desired)
        verdict = _VERDICTS[state]

        logger.info(
            "Installed version %s, roster version %s: %s",
            installed or "<none>", desired.token, verdict.value,
        )

        snapshot = None
        if full_inventory and identity:
            snapshot = self._inspector.inspect(identity, mail_identity)
            for path in snapshot.content_files + snapshot.resource_dirs:
                logger.info("Artifact present: %s", path.name)
            if snapshot.bindings is not None:
                logger.info(
                    "Bindings for %s: new=%r reply=%r",
                    snapshot.bindings.mail_identity, snapshot.bindings.new, snapshot.bindings.reply,
                )

        return DetectionResult(
            verdict=verdict,
            state=state,
            desired_version=desired.token,
            installed_version=installed,
            installed=snapshot,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def install(
        self, record: RosterRecord, version: RosterVersion, templates: TemplateSet
    ) -> InstallReport:
        """Replace whatever is installed with the desired set for ``record``.

        Raises:
            ArtifactWriteError: removing old or writing new artifacts failed.
        """
        artifact = ArtifactName.for_identity(self._prefix, version.token, record.identity)
        rendered = render_signature(
            record, templates, artifact, self._settings.signature.encodings
        )

        report = InstallReport(
            identity=record.identity,
            version=version.token,
            previous_version=self.installed_version(),
        )
        logger.info(
            "Installing %r for %s (previous: %s)",
            artifact.base_name, record.identity, report.previous_version or "<none>",
        )

        report.removed = self._remove_all(record.identity)
        report.written = self._write(rendered, artifact, record.identity)
        report.marker_path = self._write_marker(artifact, record.identity)

        mail_identity = record.mail_address or record.identity
        for slot, wanted in (
            (BindingSlot.NEW, record.set_as_new_default),
            (BindingSlot.REPLY, record.set_as_reply_default),
        ):
            if not wanted:
                self._clear_slot(slot, record.identity, report.cleared, report.binding_warnings)
                continue
            try:
                self._bindings.set_default(slot, mail_identity, artifact.base_name)
            except BindingUnavailable as exc:
                logger.warning("Default %s signature not set for %s: %s", slot.value, mail_identity, exc)
                report.binding_warnings.append(str(exc))
            else:
                logger.info("Bound %r as %s default for %s", artifact.base_name, slot.value, mail_identity)
                report.bound.append(slot)

        return report

    def uninstall(self, identity: str) -> UninstallReport:
        """Remove every artifact with the prefix and clear matching bindings.

        Safe to repeat: a second run finds nothing and succeeds.
        """
        report = UninstallReport(identity=identity)
        report.removed = self._remove_all(identity)
        if not report.removed:
            logger.info("No signature artifacts with prefix %r found", self._prefix)

        for slot in (BindingSlot.NEW, BindingSlot.REPLY):
            self._clear_slot(slot, identity, report.cleared, report.binding_warnings)
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _clear_slot(
        self,
        slot: BindingSlot,
        identity: str,
        cleared: dict[BindingSlot, int],
        warnings: list[str],
    ) -> None:
        """Clear any default in ``slot`` naming one of our signatures for ``identity``."""
        pattern = f"{glob.escape(self._prefix)} *({glob.escape(identity)})"
        try:
            count = self._bindings.clear_if_matches(slot, pattern)
        except BindingUnavailable as exc:
            logger.warning("Cannot clear %s default for %s: %s", slot.value, identity, exc)
            warnings.append(str(exc))
            return
        cleared[slot] = count
        if count:
            logger.info("Cleared %d %s default binding(s) matching %r", count, slot.value, pattern)
        else:
            logger.info("No %s default binding matches %r", slot.value, pattern)

    def _remove_all(self, identity: str) -> list[Path]:
        """Delete all prefix artifacts, markers first."""
        paths = self._inspector.enumerate_installed_artifacts()
        paths.sort(key=lambda p: (not self._is_marker(p), p.name))
        removed = []
        for path in paths:
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink(missing_ok=True)
            except OSError as exc:
                raise ArtifactWriteError(identity, str(path), str(exc)) from exc
            logger.debug("Removed %s", path.name)
            removed.append(path)
        return removed

    def _is_marker(self, path: Path) -> bool:
        name = parse_artifact_name(path.name, self._prefix)
        return name is not None and name.kind is ArtifactKind.MARKER

    def _write(
        self, rendered: RenderedSignature, artifact: ArtifactName, identity: str
    ) -> list[Path]:
        written = []
        target = self._dir
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactWriteError(identity, str(target), str(exc)) from exc

        for fmt, blob in rendered.content.items():
            written.append(self._write_bytes(target / artifact.content_file_name(fmt), blob, identity))

        if rendered.resources:
            files_dir = target / artifact.files_dir_name
            for rel, blob in sorted(rendered.resources.items()):
                written.append(self._write_bytes(files_dir / rel, blob, identity))
        return written

    def _write_marker(self, artifact: ArtifactName, identity: str) -> Path:
        return self._write_bytes(
            self._dir / artifact.marker_name, artifact.version.encode("utf-8"), identity
        )

    @staticmethod
    def _write_bytes(path: Path, data: bytes, identity: str) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise ArtifactWriteError(identity, str(path), str(exc)) from exc
        logger.debug("Wrote %s (%d bytes)", path, len(data))
        return path
