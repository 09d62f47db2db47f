"""Error taxonomy for ShoreSquad.

None of these are fatal to the application. Each one is raised by an adapter
at the edge of the system and absorbed by the component that owns that edge,
which narrows functionality instead of halting.
"""

from __future__ import annotations


class ShoreSquadError(Exception):
    """Base class for all ShoreSquad errors."""


class UserInputMismatch(ShoreSquadError):
    """An operation referenced an id that is not in the current state."""

    def __init__(self, kind: str, item_id: object) -> None:
        super().__init__(f"Unknown {kind} id: {item_id!r}")
        self.kind = kind
        self.item_id = item_id


class StorageError(ShoreSquadError):
    """A key-value storage backend failed to read or write."""


class MapInitializationError(ShoreSquadError):
    """The underlying map widget could not be constructed."""


class GeolocationError(ShoreSquadError):
    """The position could not be acquired."""


class GeolocationDenied(GeolocationError):
    """The user (or the browser) refused the position request."""
