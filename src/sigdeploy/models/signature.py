"""Signature content, artifact and mail-client binding models."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class OutputFormat(StrEnum):
    """Signature content formats understood by the mail client."""

    HTM = "htm"
    RTF = "rtf"
    TXT = "txt"

    @property
    def legacy_encoding(self) -> bool:
        """True for formats stored in an 8-bit code page."""
        return self is OutputFormat.RTF


class BindingSlot(StrEnum):
    NEW = "new"
    REPLY = "reply"


class DefaultBindings(BaseModel):
    """Default-signature names bound to one mail account."""

    mail_identity: str
    profile: str = ""
    new: Optional[str] = None
    reply: Optional[str] = None


class TemplateSet(BaseModel):
    """Raw templates per format plus static resources (name -> bytes)."""

    model_config = {"frozen": True}

    templates: dict[OutputFormat, str]
    resources: dict[str, bytes] = Field(default_factory=dict)


class RenderedSignature(BaseModel):
    """Final encoded content for one identity and version."""

    model_config = {"frozen": True}

    base_name: str
    files_dir_name: str
    content: dict[OutputFormat, bytes]
    resources: dict[str, bytes] = Field(default_factory=dict)


class InstalledSignatureSet(BaseModel):
    """Snapshot of what is installed locally for one identity."""

    identity: str
    marker_path: Optional[Path] = None
    version: Optional[str] = None
    content_files: list[Path] = Field(default_factory=list)
    resource_dirs: list[Path] = Field(default_factory=list)
    bindings: Optional[DefaultBindings] = None

    @property
    def installed(self) -> bool:
        return self.version is not None
