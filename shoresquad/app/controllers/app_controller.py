"""Application State Controller.

The single writer of :class:`AppState`. Every public operation runs its whole
sequence before returning:

    mutate -> recompute stats -> reconcile map (if cleanups changed)
           -> persist (optional) -> render hooks -> EventBus publish

so a render hook never sees stats derived from an older collection. Unknown
ids, storage failures, map failures and geolocation failures are logged,
published as ``logs.event`` warnings and otherwise ignored.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional

from shoresquad.shared.core import events
from shoresquad.shared.core.configuration import SystemConfig
from shoresquad.shared.core.errors import GeolocationDenied, GeolocationError, UserInputMismatch
from shoresquad.shared.core.event_bus import EventBus, EventPayload
from shoresquad.shared.domain.models import Cleanup, Coordinate, Crew
from shoresquad.shared.domain.notifications import Notification, NotificationQueue
from shoresquad.shared.domain.seed import SeedData, load_seed
from shoresquad.shared.infrastructure.geolocation import GeolocationProvider
from shoresquad.shared.infrastructure.maps import FoliumMapWidget
from shoresquad.shared.infrastructure.persistence import (
    DuckDBStorage,
    KeyValueStorage,
    MemoryStorage,
    PersistentStore,
    scoped_storage_key,
)

from ..map_sync import MapSyncEngine, WidgetFactory
from ..state.app_state import AppState
from ..view import ViewModel, render

logger = logging.getLogger(__name__)

RenderHook = Callable[[ViewModel], None]


class AppStateController:
    """Owns one AppState and exposes the operations the UI may trigger.

    Collaborators are injected, so several controllers can live side by side
    (one per browser session, or one per test).
    """

    def __init__(
        self,
        store: PersistentStore,
        seed: SeedData,
        map_engine: Optional[MapSyncEngine] = None,
        notifications: Optional[NotificationQueue] = None,
        event_bus: Optional[EventBus] = None,
        geolocation: Optional[GeolocationProvider] = None,
        autosave: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.seed = seed
        self.bus = event_bus or EventBus()
        self.geolocation = geolocation
        self.autosave = autosave

        if notifications is None:
            notifications = NotificationQueue(clock=clock)
        if notifications.on_expire is None:
            notifications.on_expire = self._handle_expired

        if map_engine is None:
            map_engine = MapSyncEngine(None, center=(0.0, 0.0))

        self._state = AppState(notifications, map_engine)
        self._render_hooks: List[RenderHook] = []
        self._initialized = False

    @classmethod
    def from_config(
        cls,
        config: SystemConfig,
        widget_factory: Optional[WidgetFactory] = None,
        geolocation: Optional[GeolocationProvider] = None,
        event_bus: Optional[EventBus] = None,
        storage: Optional[KeyValueStorage] = None,
        auto_expire: bool = True,
        storage_scope: Optional[str] = None,
    ) -> "AppStateController":
        """Wire a controller from configuration.

        ``widget_factory`` defaults to a folium widget built from ``config.map``.
        Pass ``auto_expire=False`` when the caller drives expiry with ``tick()``
        instead of a long-lived event loop. ``storage_scope`` gives the
        controller its own slot (one per browser session) inside a shared
        backend.
        """
        if storage is None:
            if config.storage.backend == "memory":
                storage = MemoryStorage()
            else:
                storage = DuckDBStorage(config.storage.db_path)

        try:
            seed = load_seed(config.seed.path)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load seed {config.seed.path!r}, using packaged seed: {e}")
            seed = load_seed()

        if widget_factory is None:
            map_config = config.map

            def folium_factory() -> FoliumMapWidget:
                return FoliumMapWidget(
                    tiles=map_config.tile_url,
                    attribution=map_config.attribution,
                    max_zoom=map_config.max_zoom,
                )

            widget_factory = folium_factory

        map_engine = MapSyncEngine(
            widget_factory,
            center=(config.map.default_lat, config.map.default_lng),
            zoom=config.map.default_zoom,
            focus_zoom=config.map.focus_zoom,
        )
        notifications = NotificationQueue(
            visible_seconds=config.notifications.visible_seconds,
            exit_seconds=config.notifications.exit_seconds,
            max_items=config.notifications.max_items,
            auto_expire=auto_expire,
        )
        return cls(
            store=PersistentStore(storage, key=scoped_storage_key(config.storage.key, storage_scope)),
            seed=seed,
            map_engine=map_engine,
            notifications=notifications,
            event_bus=event_bus,
            geolocation=geolocation,
            autosave=config.storage.autosave,
        )

    # --- Read access ---

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def map_engine(self) -> MapSyncEngine:
        return self._state.map_engine

    @property
    def notifications(self) -> NotificationQueue:
        return self._state.notifications

    @property
    def initialized(self) -> bool:
        return self._initialized

    def view(self, now: Optional[float] = None) -> ViewModel:
        return render(self._state, now)

    def add_render_hook(self, hook: RenderHook) -> None:
        if hook not in self._render_hooks:
            self._render_hooks.append(hook)

    def remove_render_hook(self, hook: RenderHook) -> None:
        if hook in self._render_hooks:
            self._render_hooks.remove(hook)

    # --- Public Actions ---

    async def initialize(self) -> None:
        """Load saved state (or seed data), compute stats, first reconcile.

        Calling it again is a no-op.
        """
        if self._initialized:
            return

        await self.bus.subscribe(events.TOPIC_LOGS_EVENT, self._handle_log_event)

        snapshot = self.store.load()
        if self.store.last_warning:
            await self._push_log(self.store.last_warning, "warning")

        self._state.apply_snapshot(snapshot, self.seed)
        source = "saved data" if snapshot is not None else "seed data"
        logger.info(
            f"State initialized from {source}: {len(self._state.crews)} crews, "
            f"{len(self._state.cleanups)} cleanups"
        )

        if not self.map_engine.available and self.map_engine.init_error:
            await self._push_log(f"Map unavailable: {self.map_engine.init_error}", "warning")
        if self._state.user_location is not None:
            self.map_engine.set_user_location(self._state.user_location)

        self._initialized = True
        await self._commit("initialize", cleanups_changed=True, persist=False)

    async def replace_collections(
        self,
        crews: Optional[Iterable[Crew]] = None,
        cleanups: Optional[Iterable[Cleanup]] = None,
        persist: bool = True,
    ) -> None:
        """Replace the crew and/or cleanup collection wholesale."""
        cleanups_changed = False
        if crews is not None:
            self._state.crews = tuple(crews)
        if cleanups is not None:
            new_cleanups = tuple(cleanups)
            cleanups_changed = new_cleanups != self._state.cleanups
            self._state.cleanups = new_cleanups
            selected = self._state.selected_cleanup_id
            if selected is not None and self._state.find_cleanup(selected) is None:
                self._state.selected_cleanup_id = None

        await self._commit("replace_collections", cleanups_changed=cleanups_changed, persist=persist)

    async def join_crew(self, crew_id: str) -> bool:
        """Join a crew.

        Joining is presentation-only: the member count is left untouched.
        """
        crew = self._state.find_crew(crew_id)
        if crew is None:
            await self._report_mismatch(UserInputMismatch("crew", crew_id))
            return False

        self._enqueue(f"✨ You joined {crew.name}! Welcome aboard!", "success")
        await self.bus.publish(
            events.TOPIC_CREW_JOINED,
            events.create_crew_joined_event(crew.id, crew.name),
        )
        await self._commit("join_crew", cleanups_changed=False, persist=self.autosave)
        return True

    async def select_cleanup(self, cleanup_id: str) -> bool:
        """Focus the map on a cleanup and announce the selection."""
        cleanup = self._state.find_cleanup(cleanup_id)
        if cleanup is None:
            await self._report_mismatch(UserInputMismatch("cleanup", cleanup_id))
            return False

        focused = self.map_engine.focus(cleanup.id) and self.map_engine.available
        self._state.selected_cleanup_id = cleanup.id
        self._enqueue(f"Selected: {cleanup.name}", "info")
        await self.bus.publish(
            events.TOPIC_CLEANUP_SELECTED,
            events.create_cleanup_selected_event(cleanup.id, focused),
        )
        self._render("select_cleanup")
        return True

    async def locate_user(self) -> Optional[Coordinate]:
        """Ask the geolocation provider once. Failures are never retried."""
        if self.geolocation is None:
            await self._push_log("Geolocation is not supported", "warning")
            return None

        try:
            coord = await self.geolocation.get_current_position()
        except GeolocationDenied as e:
            await self._push_log(f"Geolocation permission denied: {e}", "warning")
            return None
        except GeolocationError as e:
            await self._push_log(f"Geolocation error: {e}", "warning")
            return None

        self._state.user_location = coord
        self.map_engine.set_user_location(coord)
        logger.info(f"User location detected: {coord.lat}, {coord.lng}")
        await self.bus.publish(
            events.TOPIC_USER_LOCATED,
            events.create_user_located_event(coord.lat, coord.lng),
        )
        await self._commit("locate_user", cleanups_changed=False, persist=self.autosave)
        return coord

    async def notify(self, message: str, severity: str = "info") -> Notification:
        """Show a free-form notification (call-to-action buttons and the like)."""
        notification = self._enqueue(message, severity)
        await self.bus.publish(
            events.TOPIC_NOTIFICATION_CREATED,
            events.create_notification_event(notification.id, message, severity),
        )
        self._render("notify")
        return notification

    async def reset(self) -> None:
        """Forget saved data and return to the seed collections."""
        self.store.clear()
        self._state.apply_snapshot(None, self.seed)
        self.map_engine.clear_user_location()
        await self._commit("reset", cleanups_changed=True, persist=False)

    def save(self) -> bool:
        return self.store.save(self._state.snapshot())

    def tick(self, now: Optional[float] = None) -> List[Notification]:
        """Expire notifications; re-render when any were removed."""
        expired = self.notifications.tick(now)
        if expired:
            self._render("notification.expired", now)
        return expired

    async def shutdown(self) -> None:
        self.notifications.stop()
        await self.bus.wait_until_idle()

    # --- Internals ---

    async def _commit(self, reason: str, cleanups_changed: bool, persist: bool) -> None:
        """Recompute, reconcile, persist and render, in that order."""
        stats = self._state.recompute_stats()
        if cleanups_changed:
            self.map_engine.reconcile(self._state.cleanups)
        if persist and not self.save():
            await self._push_log(self.store.last_warning or "Could not save data", "warning")
        self._render(reason)
        await self.bus.publish(
            events.TOPIC_STATE_CHANGED,
            events.create_state_changed_event(reason, stats.model_dump()),
        )

    def _enqueue(self, message: str, severity: str) -> Notification:
        return self.notifications.enqueue(message, severity)

    def _render(self, reason: str, now: Optional[float] = None) -> None:
        if not self._render_hooks:
            return
        view_model = render(self._state, now)
        for hook in list(self._render_hooks):
            try:
                hook(view_model)
            except Exception:
                logger.exception(f"Render hook failed after '{reason}'")

    async def _handle_log_event(self, payload: EventPayload) -> None:
        """Keep log events so the page can show them."""
        if payload:
            self._state.logs.append(payload)

    def _handle_expired(self, expired: List[Notification]) -> None:
        logger.debug(f"{len(expired)} notification(s) expired")
        self._render("notification.expired")

    async def _report_mismatch(self, error: UserInputMismatch) -> None:
        await self._push_log(str(error), "warning")

    async def _push_log(self, message: str, level: events.LogLevel = "info") -> None:
        if level in ("warning", "error"):
            logger.warning(message)
        else:
            logger.info(message)
        await self.bus.publish(events.TOPIC_LOGS_EVENT, events.create_logs_event(message, level))
