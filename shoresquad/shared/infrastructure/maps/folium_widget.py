"""Folium-backed map widget.

Markers are kept as plain specs keyed by an integer handle; ``build_map()``
turns the current viewport and marker set into a fresh ``folium.Map`` for the
presentation layer (``st_folium`` in the sandbox page).
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import folium

from shoresquad.shared.core.errors import MapInitializationError

from .widget import LatLng, MarkerIcon, Viewport

logger = logging.getLogger(__name__)

DEFAULT_TILES = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_ATTRIBUTION = "© OpenStreetMap contributors"

CLEANUP_BADGE_HTML = (
    '<div style="background: linear-gradient(135deg, #0077BE, #00D4D4); color: white;'
    " padding: 8px; border-radius: 50%; width: 32px; height: 32px; display: flex;"
    " align-items: center; justify-content: center; font-weight: bold;"
    ' box-shadow: 0 2px 8px rgba(0, 0, 0, 0.2);">🌊</div>'
)


@dataclass(frozen=True)
class MarkerSpec:
    coord: LatLng
    icon: MarkerIcon
    popup: Optional[str] = None


class FoliumMapWidget:
    def __init__(
        self,
        tiles: str = DEFAULT_TILES,
        attribution: str = DEFAULT_ATTRIBUTION,
        max_zoom: int = 19,
    ) -> None:
        self.tiles = tiles
        self.attribution = attribution
        self.max_zoom = max_zoom
        self.viewport: Optional[Viewport] = None
        self.markers: Dict[int, MarkerSpec] = {}
        self._handles = itertools.count(1)

    def create_viewport(self, center: LatLng, zoom: int) -> None:
        if not 0 <= zoom <= self.max_zoom:
            raise MapInitializationError(f"Zoom {zoom} outside 0..{self.max_zoom}")
        self.viewport = Viewport(center=tuple(center), zoom=zoom)
        try:
            # Fail now rather than on first render if folium rejects the setup
            self.build_map()
        except (ValueError, TypeError) as e:
            self.viewport = None
            raise MapInitializationError(f"folium could not build the map: {e}") from e

    def create_marker(self, coord: LatLng, icon: MarkerIcon, popup: Optional[str] = None) -> int:
        handle = next(self._handles)
        self.markers[handle] = MarkerSpec(coord=tuple(coord), icon=MarkerIcon(icon), popup=popup)
        return handle

    def remove_marker(self, handle: int) -> None:
        self.markers.pop(handle, None)

    def set_view(self, coord: LatLng, zoom: int) -> None:
        self.viewport = Viewport(center=tuple(coord), zoom=min(zoom, self.max_zoom))

    def build_map(self) -> folium.Map:
        if self.viewport is None:
            raise MapInitializationError("create_viewport() has not been called")

        fmap = folium.Map(
            location=list(self.viewport.center),
            zoom_start=self.viewport.zoom,
            max_zoom=self.max_zoom,
            tiles=None,
        )
        folium.TileLayer(
            tiles=self.tiles,
            attr=self.attribution,
            max_zoom=self.max_zoom,
        ).add_to(fmap)

        for spec in self.markers.values():
            self._marker_element(spec).add_to(fmap)
        return fmap

    def _marker_element(self, spec: MarkerSpec):
        popup = folium.Popup(spec.popup) if spec.popup else None
        if spec.icon is MarkerIcon.USER:
            return folium.CircleMarker(
                location=list(spec.coord),
                radius=8,
                fill=True,
                fill_color="#00D4D4",
                color="#0077BE",
                weight=2,
                opacity=1,
                fill_opacity=0.8,
                popup=popup,
            )
        return folium.Marker(
            location=list(spec.coord),
            icon=folium.DivIcon(
                html=CLEANUP_BADGE_HTML,
                icon_size=(32, 32),
                class_name="cleanup-marker",
            ),
            popup=popup,
        )
