"""Reconciler state, verdict and run-report models."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from sigdeploy.models.signature import BindingSlot, InstalledSignatureSet


class SignatureState(StrEnum):
    ABSENT = "ABSENT"
    INSTALLED = "INSTALLED"
    STALE = "STALE"
    UNINSTALLED = "UNINSTALLED"


class Verdict(StrEnum):
    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT_REINSTALL = "NON_COMPLIANT_REINSTALL"
    NON_COMPLIANT_UPDATE = "NON_COMPLIANT_UPDATE"

    @property
    def exit_code(self) -> int:
        return 0 if self is Verdict.COMPLIANT else 1


class DetectionResult(BaseModel):
    """Outcome of the read-only compliance probe."""

    verdict: Verdict
    state: SignatureState
    desired_version: str
    installed_version: Optional[str] = None
    installed: Optional[InstalledSignatureSet] = None


class InstallReport(BaseModel):
    """What an install/update transition did."""

    identity: str
    version: str
    previous_version: Optional[str] = None
    removed: list[Path] = Field(default_factory=list)
    written: list[Path] = Field(default_factory=list)
    marker_path: Optional[Path] = None
    bound: list[BindingSlot] = Field(default_factory=list)
    cleared: dict[BindingSlot, int] = Field(default_factory=dict)
    binding_warnings: list[str] = Field(default_factory=list)

    @property
    def state(self) -> SignatureState:
        return SignatureState.INSTALLED


class UninstallReport(BaseModel):
    """What an uninstall transition did."""

    identity: str
    removed: list[Path] = Field(default_factory=list)
    cleared: dict[BindingSlot, int] = Field(default_factory=dict)
    binding_warnings: list[str] = Field(default_factory=list)

    @property
    def state(self) -> SignatureState:
        return SignatureState.UNINSTALLED
