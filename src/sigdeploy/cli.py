"""Command-line entry point.

Usage:
    sigdeploy detect    [--roster LOCATION] [--debug]
    sigdeploy install   [--roster LOCATION] [--debug]
    sigdeploy uninstall [--debug]

Exit codes: 0 compliant / success, 1 non-compliant / any failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from sigdeploy.bindings import MemoryBindingStore, create_binding_store
from sigdeploy.core.config import AppSettings
from sigdeploy.core.exceptions import BindingUnavailable, SigDeployError, UserNotFound
from sigdeploy.core.protocols import IBindingStore, IRosterSource
from sigdeploy.core.transcript import LOGGER_NAME, configure_logging
from sigdeploy.elevation import require_elevation
from sigdeploy.identity import resolve_local_identity
from sigdeploy.local.inspector import LocalStateInspector
from sigdeploy.models.roster import Roster
from sigdeploy.reconciler import SignatureReconciler
from sigdeploy.rendering.templates import load_template_set
from sigdeploy.roster.parser import parse_roster
from sigdeploy.roster.sources import create_roster_source

logger = logging.getLogger(LOGGER_NAME)

EXIT_OK = 0
EXIT_FAILED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sigdeploy", description="Deploy roster-driven email signatures")
    parser.add_argument("--debug", action="store_true", help="Verbose output and full diagnostic inventory")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("detect", "Report whether the installed signature matches the roster version"),
        ("install", "Install or update the signature for the local user"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--roster", default=None, help="Roster location (path, s3:// or https:// URL)")

    sub.add_parser("uninstall", help="Remove all signature artifacts and default bindings")
    return parser


class Runner:
    """Wires collaborators for one run and maps outcomes to exit codes."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        roster_source: IRosterSource | None = None,
        binding_store: IBindingStore | None = None,
        debug: bool = False,
    ) -> None:
        self._settings = settings
        self._roster_source = roster_source
        self._debug = debug or settings.debug
        self._bindings = binding_store if binding_store is not None else self._default_bindings()
        self._inspector = LocalStateInspector(settings, self._bindings)
        self._reconciler = SignatureReconciler(
            settings=settings, inspector=self._inspector, binding_store=self._bindings,
        )

    def _default_bindings(self) -> IBindingStore:
        try:
            return create_binding_store(self._settings)
        except BindingUnavailable as exc:
            logger.warning("Mail-client bindings unavailable, signatures will not be set as default: %s", exc)
            return MemoryBindingStore(profile=self._settings.mail.profile or "Outlook")

    def _load_roster(self, location: str | None) -> Roster:
        location = location or self._settings.roster.location
        source = self._roster_source or create_roster_source(self._settings, location)
        logger.info("Fetching roster from %s", location)
        return parse_roster(source.fetch(location), self._settings)

    def detect(self, location: str | None = None) -> int:
        identity = None
        try:
            identity = resolve_local_identity(self._settings)
            roster = self._load_roster(location)
            record = roster.find(identity)
            if record is None:
                raise UserNotFound(identity)
            result = self._reconciler.detect(
                roster.version,
                identity=identity,
                mail_identity=record.mail_address or identity,
                full_inventory=self._debug,
            )
        except SigDeployError as exc:
            logger.error("Detection failed for %s: %s", identity or "<unknown>", exc)
            if self._debug:
                for path in self._inspector.enumerate_installed_artifacts():
                    logger.debug("Artifact present: %s", path.name)
            return EXIT_FAILED
        return result.verdict.exit_code

    def install(self, location: str | None = None) -> int:
        identity = None
        try:
            if self._settings.require_elevation:
                require_elevation("install")
            identity = resolve_local_identity(self._settings)
            roster = self._load_roster(location)
            record = roster.find(identity)
            if record is None:
                raise UserNotFound(identity)
            sig = self._settings.signature
            templates = load_template_set(sig.templates_dir, sig.template_name, sig.formats)
            report = self._reconciler.install(record, roster.version, templates)
        except UserNotFound as exc:
            logger.error("%s; user is not eligible for a signature", exc)
            return EXIT_FAILED
        except SigDeployError as exc:
            logger.error("Install failed for %s: %s", identity or "<unknown>", exc)
            return EXIT_FAILED
        logger.info(
            "Installed version %s for %s (%d files, bound: %s)",
            report.version, report.identity, len(report.written),
            ", ".join(s.value for s in report.bound) or "none",
        )
        return EXIT_OK

    def uninstall(self) -> int:
        identity = None
        try:
            if self._settings.require_elevation:
                require_elevation("uninstall")
            identity = resolve_local_identity(self._settings)
            report = self._reconciler.uninstall(identity)
        except SigDeployError as exc:
            logger.error("Uninstall failed for %s: %s", identity or "<unknown>", exc)
            return EXIT_FAILED
        logger.info("Uninstalled %d artifact(s) for %s", len(report.removed), report.identity)
        return EXIT_OK


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: AppSettings | None = None,
    roster_source: IRosterSource | None = None,
    binding_store: IBindingStore | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    if settings is None:
        settings = AppSettings()
    debug = args.debug or settings.debug
    configure_logging(settings.log_level, settings.transcript_path, debug=debug)

    runner = Runner(settings, roster_source=roster_source, binding_store=binding_store, debug=debug)
    if args.command == "detect":
        code = runner.detect(args.roster)
    elif args.command == "install":
        code = runner.install(args.roster)
    else:
        code = runner.uninstall()

    logger.info("%s finished with exit code %d", args.command, code)
    return code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
