"""ShoreSquad package."""

from .app import AppState, AppStateController, MapSyncEngine
from .shared.core.event_bus import EventBus

__version__ = "0.3.0"

__all__ = ["AppState", "AppStateController", "EventBus", "MapSyncEngine"]
