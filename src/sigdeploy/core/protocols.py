"""Protocol interfaces for the sigdeploy collaborators.

The reconciler talks to the roster transport and to the mail client only
through these Protocols. Structural typing means the in-memory fakes used in
tests need no inheritance.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sigdeploy.core.types import GlobPattern, Location, MailAddress, SignatureName
from sigdeploy.models.signature import BindingSlot, DefaultBindings


# ---------------------------------------------------------------------------
# Roster transport
# ---------------------------------------------------------------------------

@runtime_checkable
class IRosterSource(Protocol):
    """Fetch raw tabular roster bytes given a location handle."""

    def fetch(self, location: Location) -> bytes: ...


# ---------------------------------------------------------------------------
# Mail-client default-signature bindings
# ---------------------------------------------------------------------------

@runtime_checkable
class IBindingStore(Protocol):
    """Mail-profile scoped default-signature associations."""

    def set_default(
        self, slot: BindingSlot, mail_identity: MailAddress, signature_name: SignatureName
    ) -> None: ...

    def clear_if_matches(self, slot: BindingSlot, pattern: GlobPattern) -> int: ...

    def find_default_bindings(self, mail_identity: MailAddress) -> DefaultBindings: ...
