"""Shared fixtures for the ShoreSquad test suite."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from shoresquad.app.controllers.app_controller import AppStateController
from shoresquad.app.map_sync import MapSyncEngine
from shoresquad.shared.domain.models import Cleanup, Coordinate, Crew
from shoresquad.shared.domain.notifications import NotificationQueue
from shoresquad.shared.domain.seed import SeedData, load_seed
from shoresquad.shared.infrastructure.persistence import MemoryStorage, PersistentStore

SAN_DIEGO = (32.7157, -117.1611)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingMapWidget:
    """In-memory map widget that records what the engine asked for."""

    def __init__(self) -> None:
        self.markers: Dict[int, Tuple[Tuple[float, float], Any, Optional[str]]] = {}
        self.viewport: Optional[Tuple[Tuple[float, float], int]] = None
        self.created = 0
        self.removed = 0
        self._next_handle = 0

    def create_viewport(self, center, zoom) -> None:
        self.viewport = (tuple(center), zoom)

    def create_marker(self, coord, icon, popup=None) -> int:
        self._next_handle += 1
        self.created += 1
        self.markers[self._next_handle] = (tuple(coord), icon, popup)
        return self._next_handle

    def remove_marker(self, handle) -> None:
        self.removed += 1
        del self.markers[handle]

    def set_view(self, coord, zoom) -> None:
        self.viewport = (tuple(coord), zoom)


def make_cleanup(cleanup_id: str, plastic_target: float = 10, lat: float = 32.75, lng: float = -117.25) -> Cleanup:
    return Cleanup(
        id=cleanup_id,
        name=f"Cleanup {cleanup_id}",
        location=Coordinate(lat=lat, lng=lng),
        date="Jan 1, 2026",
        crew_size=5,
        weather="20°C, Sunny",
        plastic_target=plastic_target,
    )


def make_crew(crew_id: str, members: int = 1, completed: int = 0) -> Crew:
    return Crew(id=crew_id, name=f"Crew {crew_id}", members=members, completed_cleanups=completed)


@pytest.fixture
def seed() -> SeedData:
    return load_seed()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def widget() -> RecordingMapWidget:
    return RecordingMapWidget()


@pytest.fixture
def controller(seed, clock, storage, widget) -> AppStateController:
    engine = MapSyncEngine(lambda: widget, center=SAN_DIEGO, zoom=11, focus_zoom=14)
    queue = NotificationQueue(clock=clock, auto_expire=False)
    return AppStateController(
        store=PersistentStore(storage),
        seed=seed,
        map_engine=engine,
        notifications=queue,
    )


@pytest.fixture
def rendered(controller) -> List[Any]:
    """Every ViewModel the controller renders, in order."""
    views: List[Any] = []
    controller.add_render_hook(views.append)
    return views
