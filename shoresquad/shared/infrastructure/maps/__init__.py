"""Map widget adapters."""

from .folium_widget import FoliumMapWidget
from .widget import LatLng, MapWidget, MarkerIcon, NullMapWidget, Viewport

__all__ = [
    "FoliumMapWidget",
    "LatLng",
    "MapWidget",
    "MarkerIcon",
    "NullMapWidget",
    "Viewport",
]
