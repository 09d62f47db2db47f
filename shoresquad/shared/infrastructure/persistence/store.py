"""Load and save the durable snapshot of the application state."""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import ValidationError

from shoresquad.shared.core.errors import StorageError
from shoresquad.shared.domain.models import AppSnapshot

from .kv_storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "shoreSquadData"


def scoped_storage_key(base: str, scope: Optional[str]) -> str:
    """Slot key for one browser session: ``"shoreSquadData:<scope>"``."""
    return f"{base}:{scope}" if scope else base


class PersistentStore:
    """Snapshot persistence over a key-value slot.

    Nothing here raises: a missing slot loads as ``None``, corrupt data loads
    as ``None`` with a warning, and a failed save returns ``False``. The
    in-memory state stays authoritative either way. The most recent warning
    is kept in ``last_warning`` so callers can surface it.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self.last_warning: Optional[str] = None

    def load(self) -> Optional[AppSnapshot]:
        self.last_warning = None
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            return self._warn(f"Could not read saved data: {e}")

        if raw is None:
            logger.debug(f"No saved data under '{self.key}'")
            return None

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            # Digit-limit and nesting-depth failures are not JSONDecodeErrors
            return self._warn(f"Saved data is not valid JSON, ignoring it: {e}")

        if not isinstance(data, dict):
            return self._warn("Saved data is not an object, ignoring it")

        try:
            snapshot = AppSnapshot.model_validate(data)
        except ValidationError as e:
            return self._warn(f"Saved data failed validation, ignoring it: {e.error_count()} error(s)")

        logger.info(f"Data loaded from storage slot '{self.key}'")
        return snapshot

    def save(self, snapshot: AppSnapshot) -> bool:
        try:
            self.storage.set(self.key, snapshot.to_json())
        except StorageError as e:
            self._warn(f"Could not save data: {e}")
            return False
        logger.info(f"Data saved to storage slot '{self.key}'")
        return True

    def clear(self) -> bool:
        try:
            self.storage.delete(self.key)
        except StorageError as e:
            self._warn(f"Could not clear saved data: {e}")
            return False
        return True

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.last_warning = message
        return None
