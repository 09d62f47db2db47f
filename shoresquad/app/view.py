"""Pure render boundary: AppState in, ViewModel out.

The presentation layer only ever sees a :class:`ViewModel`; it never touches
AppState directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from shoresquad.shared.domain.models import Cleanup, Coordinate, Crew, ForecastDay, Stats

from .state.app_state import AppState


@dataclass(frozen=True)
class NotificationView:
    id: int
    message: str
    severity: str
    phase: str  # "visible" or "exiting"


@dataclass(frozen=True)
class LogView:
    message: str
    level: str
    ts: float


@dataclass(frozen=True)
class ViewModel:
    crews: Tuple[Crew, ...]
    cleanups: Tuple[Cleanup, ...]
    stats: Stats
    notifications: Tuple[NotificationView, ...]
    forecast: Tuple[ForecastDay, ...]
    user_location: Optional[Coordinate]
    map_available: bool
    selected_cleanup_id: Optional[str] = None
    logs: Tuple[LogView, ...] = ()


def render(state: AppState, now: Optional[float] = None) -> ViewModel:
    """Build the read-only view of ``state`` at time ``now``."""
    queue = state.notifications
    if now is None:
        now = queue.now()
    active = queue.active(now)

    return ViewModel(
        crews=state.crews,
        cleanups=state.cleanups,
        stats=state.stats,
        notifications=tuple(
            NotificationView(id=n.id, message=n.message, severity=n.severity, phase=n.phase(now))
            for n in active
        ),
        forecast=state.forecast,
        user_location=state.user_location,
        map_available=state.map_engine.available,
        selected_cleanup_id=state.selected_cleanup_id,
        logs=tuple(
            LogView(
                message=str(entry.get("message", "")),
                level=str(entry.get("level", "info")),
                ts=float(entry.get("ts") or 0.0),
            )
            for entry in state.logs
        ),
    )
