"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (storage, map widget, geolocation).
"""

# Persistence
from shoresquad.shared.infrastructure.persistence import (
    DuckDBStorage,
    KeyValueStorage,
    MemoryStorage,
    PersistentStore,
)

# Maps
from shoresquad.shared.infrastructure.maps import (
    FoliumMapWidget,
    MapWidget,
    MarkerIcon,
    NullMapWidget,
)

# Geolocation
from shoresquad.shared.infrastructure.geolocation import (
    BrowserGeolocationProvider,
    GeolocationProvider,
    StaticGeolocationProvider,
)

__all__ = [
    # Persistence
    "DuckDBStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PersistentStore",
    # Maps
    "FoliumMapWidget",
    "MapWidget",
    "MarkerIcon",
    "NullMapWidget",
    # Geolocation
    "BrowserGeolocationProvider",
    "GeolocationProvider",
    "StaticGeolocationProvider",
]
