"""Roster models — one record per identity plus the global version token.

Field aliases are the camelCase column names; templates reference fields by
alias (``%displayName%``), Python code by attribute name.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from sigdeploy.rendering.phone import format_mobile


class RosterRecord(BaseModel):
    """Single user's signature data."""

    model_config = {"frozen": True, "populate_by_name": True, "str_strip_whitespace": True}

    # --- Identity ---
    identity: str = Field(alias="identity")
    display_name: str = Field("", alias="displayName")
    given_name: str = Field("", alias="givenName")
    surname: str = Field("", alias="surname")
    mail_address: str = Field("", alias="mailAddress")

    # --- Organization ---
    job_title: str = Field("", alias="jobTitle")
    department: str = Field("", alias="department")
    office: str = Field("", alias="office")
    company_name: str = Field("", alias="companyName")  # suffix-normalized

    # --- Address ---
    street_address: str = Field("", alias="streetAddress")
    city: str = Field("", alias="city")
    postal_code: str = Field("", alias="postalCode")
    country: str = Field("", alias="country")  # fallback applied by the parser

    # --- Contact ---
    telephone_number: str = Field("", alias="telephoneNumber")
    mobile_phone: str = Field("", alias="mobilePhone")  # raw, pre-formatting
    web_page: str = Field("", alias="webPage")

    # --- Mail-client defaults ---
    set_as_new_default: bool = Field(False, alias="setAsNewDefault")
    set_as_reply_default: bool = Field(False, alias="setAsReplyDefault")

    @property
    def mobile_padded(self) -> str:
        return format_mobile(self.mobile_phone)

    def placeholders(self) -> dict[str, str]:
        """Template values keyed by placeholder name (without ``%``)."""
        values = {
            name: _as_text(value)
            for name, value in self.model_dump(by_alias=True).items()
        }
        values["Mobile_padded"] = self.mobile_padded
        return values


def _as_text(value: object) -> str:
    if isinstance(value, bool):
        return "True" if value else "False"
    return str(value)


class RosterVersion(BaseModel):
    """Authoritative version token published with the roster."""

    model_config = {"frozen": True}

    token: str

    def __str__(self) -> str:
        return self.token


class Roster(BaseModel):
    """Parsed roster: version plus records in sheet order."""

    model_config = {"frozen": True}

    version: RosterVersion
    records: tuple[RosterRecord, ...]

    def find(self, identity: str) -> Optional[RosterRecord]:
        """Case-insensitive exact lookup; None means "not eligible"."""
        wanted = identity.strip().casefold()
        for record in self.records:
            if record.identity.casefold() == wanted:
                return record
        return None
