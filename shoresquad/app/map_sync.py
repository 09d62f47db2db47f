"""Keeps the rendered map markers in step with the cleanup collection."""

from __future__ import annotations

import html
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from shoresquad.shared.domain.models import Cleanup, Coordinate
from shoresquad.shared.infrastructure.maps.widget import (
    LatLng,
    MapWidget,
    MarkerIcon,
    NullMapWidget,
    Viewport,
)

logger = logging.getLogger(__name__)

WidgetFactory = Callable[[], MapWidget]


def cleanup_popup(cleanup: Cleanup) -> str:
    return (
        f"<strong>{html.escape(cleanup.name)}</strong><br>"
        f"📅 {html.escape(cleanup.date)}<br>"
        f"👥 {cleanup.crew_size} crew members"
    )


class MapSyncEngine:
    """Owns the map viewport and the marker set.

    Invariants:
    - exactly one cleanup marker per cleanup id passed to the last
      ``reconcile`` call
    - at most one user-location marker

    If the widget factory raises, the engine logs the failure and runs on a
    :class:`NullMapWidget`; every operation still works and ``available`` is
    False.
    """

    def __init__(
        self,
        widget_factory: Optional[WidgetFactory],
        center: LatLng,
        zoom: int = 11,
        focus_zoom: int = 14,
    ) -> None:
        self.focus_zoom = focus_zoom
        self.viewport = Viewport(center=tuple(center), zoom=zoom)
        self.available = False
        self.init_error: Optional[str] = None
        self._markers: Dict[str, Tuple[Cleanup, Any]] = {}
        self._user_marker: Any = None
        self._user_location: Optional[Coordinate] = None
        self.widget: MapWidget = self._init_widget(widget_factory)

    def _init_widget(self, widget_factory: Optional[WidgetFactory]) -> MapWidget:
        if widget_factory is None:
            self.init_error = "No map widget configured"
            logger.info("Map disabled: no widget configured")
            return NullMapWidget()
        try:
            widget = widget_factory()
            widget.create_viewport(self.viewport.center, self.viewport.zoom)
        except Exception as e:
            self.init_error = str(e)
            logger.error(f"Map initialization error: {e}", exc_info=True)
            return NullMapWidget()

        self.available = True
        logger.info("Map initialized")
        return widget

    # --- Read-only views ---

    def marker_ids(self) -> Tuple[str, ...]:
        return tuple(self._markers)

    def marker_handle(self, cleanup_id: str) -> Any:
        entry = self._markers.get(str(cleanup_id))
        return entry[1] if entry else None

    @property
    def has_user_marker(self) -> bool:
        return self._user_location is not None

    @property
    def user_location(self) -> Optional[Coordinate]:
        return self._user_location

    # --- Sync operations ---

    def reconcile(self, cleanups: Iterable[Cleanup]) -> Tuple[List[str], List[str]]:
        """Bring the marker set into line with ``cleanups``.

        Returns the ids whose markers were added and removed. A second call
        with the same collection returns two empty lists.
        """
        incoming: Dict[str, Cleanup] = {}
        for cleanup in cleanups:
            if cleanup.id in incoming:
                logger.warning(f"Duplicate cleanup id {cleanup.id!r}; keeping the last one")
            incoming[cleanup.id] = cleanup

        removed: List[str] = []
        for cleanup_id, (current, handle) in list(self._markers.items()):
            if incoming.get(cleanup_id) != current:
                self.widget.remove_marker(handle)
                del self._markers[cleanup_id]
                removed.append(cleanup_id)

        added: List[str] = []
        for cleanup_id, cleanup in incoming.items():
            if cleanup_id in self._markers:
                continue
            handle = self.widget.create_marker(
                cleanup.location.as_pair(), MarkerIcon.CLEANUP, cleanup_popup(cleanup)
            )
            self._markers[cleanup_id] = (cleanup, handle)
            added.append(cleanup_id)

        if added or removed:
            logger.debug(f"Reconciled markers: +{len(added)} -{len(removed)}")
        return added, removed

    def set_user_location(self, coord: Coordinate) -> None:
        """Create or replace the single user-location marker."""
        if self._user_location is not None:
            self.widget.remove_marker(self._user_marker)
        self._user_marker = self.widget.create_marker(
            coord.as_pair(), MarkerIcon.USER, "📍 Your Location"
        )
        self._user_location = coord

    def clear_user_location(self) -> None:
        if self._user_location is not None:
            self.widget.remove_marker(self._user_marker)
        self._user_marker = None
        self._user_location = None

    def focus(self, cleanup_id: str) -> bool:
        """Recenter on a cleanup. Unknown ids are logged and ignored."""
        entry = self._markers.get(str(cleanup_id))
        if entry is None:
            logger.warning(f"Cannot focus unknown cleanup {cleanup_id!r}")
            return False

        cleanup = entry[0]
        self.viewport = Viewport(center=cleanup.location.as_pair(), zoom=self.focus_zoom)
        self.widget.set_view(self.viewport.center, self.viewport.zoom)
        return True
