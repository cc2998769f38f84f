"""Outlook profile registry backend implementing IBindingStore (Windows only).

Accounts live under
``HKCU\\Software\\Microsoft\\Office\\<ver>\\Outlook\\Profiles\\<profile>\\<MAPI key>\\<nnnnnnnn>``
with the default signatures in ``New Signature`` and ``Reply-Forward Signature``.
"""

from __future__ import annotations

import fnmatch
import logging
from typing import Any, Iterator, Optional

from sigdeploy.core.exceptions import BindingUnavailable
from sigdeploy.models.signature import BindingSlot, DefaultBindings

logger = logging.getLogger(__name__)

ACCOUNTS_KEY = "9375CFF0413111d3B88A00104B2A6676"
SLOT_VALUES = {
    BindingSlot.NEW: "New Signature",
    BindingSlot.REPLY: "Reply-Forward Signature",
}
_ADDRESS_VALUES = ("Account Name", "Email")


def _decode(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-16-le", errors="ignore").rstrip("\x00")
    return str(value or "")


def _encode(text: str) -> bytes:
    return (text + "\x00").encode("utf-16-le")


class RegistryBindingStore:
    """Production IBindingStore backed by the Outlook profile registry."""

    def __init__(self, office_version: str = "16.0", profile: str = "") -> None:
        try:
            import winreg
        except ImportError as exc:
            raise BindingUnavailable("Outlook profile registry requires Windows") from exc
        self._winreg = winreg
        self._outlook_key = rf"Software\Microsoft\Office\{office_version}\Outlook"
        self._profile = profile or self._default_profile()

    @property
    def profile(self) -> str:
        return self._profile

    # ---- IBindingStore methods ----

    def set_default(self, slot: BindingSlot, mail_identity: str, signature_name: str) -> None:
        winreg = self._winreg
        subkey = self._find_account(mail_identity)
        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, subkey, 0, winreg.KEY_SET_VALUE) as key:
                winreg.SetValueEx(key, SLOT_VALUES[slot], 0, winreg.REG_BINARY, _encode(signature_name))
        except OSError as exc:
            raise BindingUnavailable(f"Cannot write {SLOT_VALUES[slot]} for {mail_identity!r}: {exc}") from exc

    def clear_if_matches(self, slot: BindingSlot, pattern: str) -> int:
        winreg = self._winreg
        cleared = 0
        for subkey, _address in self._accounts():
            current = self._read(subkey, SLOT_VALUES[slot])
            if not current or not fnmatch.fnmatchcase(current.casefold(), pattern.casefold()):
                continue
            try:
                with winreg.OpenKey(winreg.HKEY_CURRENT_USER, subkey, 0, winreg.KEY_SET_VALUE) as key:
                    winreg.DeleteValue(key, SLOT_VALUES[slot])
            except OSError as exc:
                raise BindingUnavailable(f"Cannot clear {SLOT_VALUES[slot]} in {subkey}: {exc}") from exc
            logger.debug("Cleared %s %r in %s", SLOT_VALUES[slot], current, subkey)
            cleared += 1
        return cleared

    def find_default_bindings(self, mail_identity: str) -> DefaultBindings:
        subkey = self._find_account(mail_identity)
        return DefaultBindings(
            mail_identity=mail_identity,
            profile=self._profile,
            new=self._read(subkey, SLOT_VALUES[BindingSlot.NEW]) or None,
            reply=self._read(subkey, SLOT_VALUES[BindingSlot.REPLY]) or None,
        )

    # ---- internals ----

    def _default_profile(self) -> str:
        profile = self._read(self._outlook_key, "DefaultProfile")
        if not profile:
            raise BindingUnavailable("No default Outlook profile configured")
        return profile

    def _read(self, subkey: str, name: str) -> Optional[str]:
        winreg = self._winreg
        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, subkey) as key:
                value, _kind = winreg.QueryValueEx(key, name)
        except OSError:
            return None
        return _decode(value)

    def _accounts(self) -> Iterator[tuple[str, str]]:
        winreg = self._winreg
        root = rf"{self._outlook_key}\Profiles\{self._profile}\{ACCOUNTS_KEY}"
        try:
            key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, root)
        except OSError as exc:
            raise BindingUnavailable(f"Mail profile {self._profile!r} not found") from exc
        with key:
            index = 0
            while True:
                try:
                    name = winreg.EnumKey(key, index)
                except OSError:
                    break
                index += 1
                subkey = rf"{root}\{name}"
                for value_name in _ADDRESS_VALUES:
                    address = self._read(subkey, value_name)
                    if address:
                        yield subkey, address
                        break

    def _find_account(self, mail_identity: str) -> str:
        wanted = mail_identity.casefold()
        for subkey, address in self._accounts():
            if address.casefold() == wanted:
                return subkey
        raise BindingUnavailable(
            f"No account {mail_identity!r} in mail profile {self._profile!r}"
        )
