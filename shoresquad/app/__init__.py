"""ShoreSquad application core: state, controller, map sync and view."""

from .controllers.app_controller import AppStateController
from .map_sync import MapSyncEngine
from .state.app_state import AppState
from .view import LogView, NotificationView, ViewModel, render

__all__ = [
    "AppState",
    "AppStateController",
    "LogView",
    "MapSyncEngine",
    "NotificationView",
    "ViewModel",
    "render",
]
