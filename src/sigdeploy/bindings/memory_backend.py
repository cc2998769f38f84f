"""In-memory binding store — dict-backed IBindingStore for tests and dry runs."""

from __future__ import annotations

import fnmatch
import logging
from typing import Optional

from sigdeploy.core.exceptions import BindingUnavailable
from sigdeploy.models.signature import BindingSlot, DefaultBindings

logger = logging.getLogger(__name__)

# profile -> account address -> slot -> signature name
ProfileMap = dict[str, dict[str, dict[str, Optional[str]]]]


class MemoryBindingStore:
    """Dict-backed IBindingStore scoped to one active mail profile."""

    def __init__(self, profile: str = "Outlook", profiles: ProfileMap | None = None) -> None:
        self._profile = profile
        self._profiles: ProfileMap = profiles if profiles is not None else {}

    @property
    def profile(self) -> str:
        return self._profile

    def add_account(self, mail_identity: str, profile: str | None = None) -> None:
        accounts = self._profiles.setdefault(profile or self._profile, {})
        accounts.setdefault(mail_identity, {BindingSlot.NEW.value: None, BindingSlot.REPLY.value: None})

    # ---- IBindingStore methods ----

    def set_default(self, slot: BindingSlot, mail_identity: str, signature_name: str) -> None:
        account = self._account(mail_identity)
        account[slot.value] = signature_name
        self._changed()

    def clear_if_matches(self, slot: BindingSlot, pattern: str) -> int:
        cleared = 0
        for address, account in self._accounts().items():
            value = account.get(slot.value)
            if value and fnmatch.fnmatchcase(value.casefold(), pattern.casefold()):
                account[slot.value] = None
                cleared += 1
                logger.debug("Cleared %s binding %r on %s", slot.value, value, address)
        if cleared:
            self._changed()
        return cleared

    def find_default_bindings(self, mail_identity: str) -> DefaultBindings:
        account = self._account(mail_identity)
        return DefaultBindings(
            mail_identity=mail_identity,
            profile=self._profile,
            new=account.get(BindingSlot.NEW.value),
            reply=account.get(BindingSlot.REPLY.value),
        )

    # ---- internals ----

    def _accounts(self) -> dict[str, dict[str, Optional[str]]]:
        accounts = self._profiles.get(self._profile)
        if accounts is None:
            raise BindingUnavailable(f"Mail profile {self._profile!r} not found")
        return accounts

    def _account(self, mail_identity: str) -> dict[str, Optional[str]]:
        wanted = mail_identity.casefold()
        for address, account in self._accounts().items():
            if address.casefold() == wanted:
                return account
        raise BindingUnavailable(
            f"No account {mail_identity!r} in mail profile {self._profile!r}"
        )

    def _changed(self) -> None:
        """Hook for persistent subclasses."""
