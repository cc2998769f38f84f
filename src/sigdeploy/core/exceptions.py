"""sigdeploy exception hierarchy."""

from __future__ import annotations


class SigDeployError(Exception):
    """Base exception for all sigdeploy errors."""


# --- Roster source -----------------------------------------------------------

class SourceUnavailable(SigDeployError):
    """Fetch or transport of an external resource failed."""


class RosterUnavailable(SourceUnavailable):
    """The roster could not be fetched from its location."""

    def __init__(self, location: str, message: str) -> None:
        self.location = location
        super().__init__(f"Roster unavailable at {location!r}: {message}")


# --- Roster content ----------------------------------------------------------

class MalformedRoster(SigDeployError):
    """The roster violates its layout contract."""


class MalformedVersionCell(MalformedRoster):
    """The version cell is missing or lacks the required prefix."""

    def __init__(self, cell: str, value: object) -> None:
        self.cell = cell
        self.value = value
        super().__init__(f"Version cell {cell} is malformed: {value!r}")


class EmptyRoster(MalformedRoster):
    """The roster has no data rows."""


class TruncatedRow(MalformedRoster):
    """A data row has fewer fields than the column contract requires."""

    def __init__(self, row_number: int, found: int, expected: int) -> None:
        self.row_number = row_number
        self.found = found
        self.expected = expected
        super().__init__(
            f"Row {row_number} is truncated: {found} fields, expected {expected}"
        )


class DuplicateIdentity(MalformedRoster):
    """Two roster rows share the same identity."""

    def __init__(self, identity: str, row_number: int) -> None:
        self.identity = identity
        self.row_number = row_number
        super().__init__(f"Duplicate identity {identity!r} at row {row_number}")


class UserNotFound(SigDeployError):
    """No roster record matches the local identity."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"No roster record for identity {identity!r}")


# --- Local state -------------------------------------------------------------

class LocalStateError(SigDeployError):
    """Local signature artifacts could not be read or written."""


class LocalStateUnreadable(LocalStateError):
    """Local signature state could not be read."""


class UnreadableMarker(LocalStateUnreadable):
    """The version marker exists but could not be read."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Version marker {path!r} unreadable: {message}")


class ArtifactWriteError(LocalStateError):
    """Removing or writing a signature artifact failed."""

    def __init__(self, identity: str, path: str, message: str) -> None:
        self.identity = identity
        self.path = path
        super().__init__(f"Artifact {path!r} for {identity!r} failed: {message}")


# --- Mail client -------------------------------------------------------------

class BindingUnavailable(SigDeployError):
    """No mail profile or matching account to bind a signature to."""


class ElevationRequired(SigDeployError):
    """The operation needs a privilege the process does not hold."""
