"""Application configuration using pydantic-settings with grouped env prefixes.

All settings objects are frozen: one instance is built per run and handed to
every component instead of being read from module-level globals.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

ROSTER_COLUMNS: tuple[str, ...] = (
    "identity",
    "displayName",
    "givenName",
    "surname",
    "mailAddress",
    "jobTitle",
    "department",
    "office",
    "streetAddress",
    "city",
    "postalCode",
    "country",
    "telephoneNumber",
    "mobilePhone",
    "webPage",
    "companyName",
    "setAsNewDefault",
    "setAsReplyDefault",
)


def _default_signatures_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata) / "Microsoft" / "Signatures"
    return Path.home() / ".sigdeploy" / "Signatures"


class RosterConfig(BaseSettings):
    """Roster location and sheet layout."""

    model_config = {"env_prefix": "SIGDEPLOY_ROSTER_", "frozen": True}

    location: str = ""  # s3://bucket/key, https://..., or a local path
    version_cell: str = "A1"
    data_start_row: int = 3  # row 2 holds the (untrusted) header
    http_timeout: float = 30.0
    s3_region: str = "eu-central-1"
    s3_endpoint_url: str | None = None  # LocalStack override


class SignatureConfig(BaseSettings):
    """Signature naming, layout and rendering configuration."""

    model_config = {"env_prefix": "SIGDEPLOY_SIGNATURE_", "frozen": True}

    prefix: str = "Company"
    fallback_country: str = "Slovakia"
    columns: tuple[str, ...] = ROSTER_COLUMNS
    signatures_dir: Path = _default_signatures_dir()
    templates_dir: Path = Path("templates")
    template_name: str = "signature"
    formats: tuple[Literal["htm", "rtf", "txt"], ...] = ("htm", "rtf", "txt")
    encodings: dict[str, str] = {"htm": "utf-8", "rtf": "cp1252", "txt": "utf-8"}


class MailClientConfig(BaseSettings):
    """Mail-client default-signature binding store."""

    model_config = {"env_prefix": "SIGDEPLOY_MAIL_", "frozen": True}

    backend: Literal["registry", "json", "memory"] = "registry"
    store_path: Path = Path("bindings.json")  # json backend only
    profile: str = ""  # empty: the client's default profile
    office_version: str = "16.0"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "SIGDEPLOY_", "frozen": True}

    log_level: str = "INFO"
    debug: bool = False
    transcript_path: Path | None = None
    local_identity: str = ""
    require_elevation: bool = False

    roster: RosterConfig = RosterConfig()
    signature: SignatureConfig = SignatureConfig()
    mail: MailClientConfig = MailClientConfig()
