"""Map widget capability set consumed by the map sync engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Optional, Protocol, Tuple

LatLng = Tuple[float, float]


class MarkerIcon(str, Enum):
    CLEANUP = "cleanup"
    USER = "user"


@dataclass(frozen=True)
class Viewport:
    center: LatLng
    zoom: int


class MapWidget(Protocol):
    """What the engine needs from a mapping library."""

    def create_viewport(self, center: LatLng, zoom: int) -> None: ...

    def create_marker(self, coord: LatLng, icon: MarkerIcon, popup: Optional[str] = None) -> Hashable: ...

    def remove_marker(self, handle: Any) -> None: ...

    def set_view(self, coord: LatLng, zoom: int) -> None: ...


class NullMapWidget:
    """No-op stand-in used when the real widget cannot be constructed."""

    def create_viewport(self, center: LatLng, zoom: int) -> None:
        return None

    def create_marker(self, coord: LatLng, icon: MarkerIcon, popup: Optional[str] = None) -> None:
        return None

    def remove_marker(self, handle: Any) -> None:
        return None

    def set_view(self, coord: LatLng, zoom: int) -> None:
        return None
