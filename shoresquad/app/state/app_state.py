"""Application State.

The aggregate root for one running ShoreSquad session. Only
:class:`~shoresquad.app.controllers.app_controller.AppStateController` writes
to it; everything else reads it or goes through the controller.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, Optional, Tuple

from shoresquad.shared.domain.models import AppSnapshot, Cleanup, Coordinate, Crew, ForecastDay, Stats
from shoresquad.shared.domain.notifications import NotificationQueue
from shoresquad.shared.domain.seed import SeedData
from shoresquad.shared.domain.stats import StatsAggregator

from ..map_sync import MapSyncEngine

MAX_LOG_ENTRIES = 50


class AppState:
    """Crews, cleanups, user location, derived stats and the live collaborators.

    ``stats`` is only ever assigned by :meth:`recompute_stats`. The map engine
    and the notification queue are runtime handles and are never serialized.
    """

    def __init__(self, notifications: NotificationQueue, map_engine: MapSyncEngine) -> None:
        self.crews: Tuple[Crew, ...] = ()
        self.cleanups: Tuple[Cleanup, ...] = ()
        self.forecast: Tuple[ForecastDay, ...] = ()
        self.user_location: Optional[Coordinate] = None
        self.selected_cleanup_id: Optional[str] = None
        self.stats: Stats = Stats()
        # logs.event payloads, newest last
        self.logs: Deque[Dict[str, Any]] = deque(maxlen=MAX_LOG_ENTRIES)

        self.notifications = notifications
        self.map_engine = map_engine

    def recompute_stats(self) -> Stats:
        self.stats = StatsAggregator.compute(self.crews, self.cleanups)
        return self.stats

    def find_crew(self, crew_id: object) -> Optional[Crew]:
        key = str(crew_id)
        return next((c for c in self.crews if c.id == key), None)

    def find_cleanup(self, cleanup_id: object) -> Optional[Cleanup]:
        key = str(cleanup_id)
        return next((c for c in self.cleanups if c.id == key), None)

    def snapshot(self) -> AppSnapshot:
        """The durable portion of the state."""
        return AppSnapshot(
            crews=self.crews,
            cleanups=self.cleanups,
            stats=self.stats,
            user_location=self.user_location,
        )

    def apply_snapshot(self, snapshot: Optional[AppSnapshot], defaults: SeedData) -> None:
        """Overlay a loaded snapshot on the seed defaults.

        Fields missing from the snapshot keep their defaults. Stored stats are
        ignored; callers recompute them.
        """
        self.crews = tuple(defaults.crews)
        self.cleanups = tuple(defaults.cleanups)
        self.forecast = tuple(defaults.forecast)
        self.user_location = None
        self.selected_cleanup_id = None

        if snapshot is None:
            return
        if snapshot.crews is not None:
            self.crews = snapshot.crews
        if snapshot.cleanups is not None:
            self.cleanups = snapshot.cleanups
        if snapshot.user_location is not None:
            self.user_location = snapshot.user_location
