"""State container for a ShoreSquad session.

Architecture:
- AppState: aggregate root (crews, cleanups, stats, user location)
- AppStateController (app.controllers): the only writer
"""

from .app_state import AppState

__all__ = ["AppState"]
