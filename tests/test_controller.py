import json

import pytest

from shoresquad.app.controllers.app_controller import AppStateController
from shoresquad.shared.core import events
from shoresquad.shared.core.configuration import SystemConfig
from shoresquad.shared.core.errors import StorageError
from shoresquad.shared.domain.models import Coordinate, Stats
from shoresquad.shared.infrastructure.geolocation import StaticGeolocationProvider
from shoresquad.shared.infrastructure.maps import MarkerIcon
from shoresquad.shared.infrastructure.persistence import (
    DEFAULT_STORAGE_KEY,
    DuckDBStorage,
    MemoryStorage,
    PersistentStore,
)

from .conftest import make_cleanup, make_crew

SEED_STATS = Stats(total_crew=60, total_cleanups=25, plastic_collected=272, beaches_clean=3)


async def collect(bus, topic):
    received = []

    async def handler(payload):
        received.append(payload)

    await bus.subscribe(topic, handler)
    return received


@pytest.mark.asyncio
async def test_initialize_uses_seed_when_nothing_saved(controller, widget, rendered):
    await controller.initialize()

    assert controller.state.stats == SEED_STATS
    assert set(controller.map_engine.marker_ids()) == {"1", "2", "3"}
    assert len(widget.markers) == 3
    assert rendered[-1].stats == SEED_STATS
    assert [f.day for f in rendered[-1].forecast] == ["Today", "Tomorrow", "Dec 10"]


@pytest.mark.asyncio
async def test_initialize_is_idempotent(controller, widget):
    await controller.initialize()
    await controller.initialize()

    assert widget.created == 3
    assert controller.initialized


@pytest.mark.asyncio
async def test_initialize_merges_partial_snapshot(controller, storage):
    storage.set(DEFAULT_STORAGE_KEY, json.dumps(
        {"crews": [{"id": "9", "name": "Solo Surfers", "members": 2, "cleanups": 1}]}
    ))

    await controller.initialize()

    assert [c.name for c in controller.state.crews] == ["Solo Surfers"]
    assert [c.id for c in controller.state.cleanups] == ["1", "2", "3"]
    assert controller.state.stats == Stats(
        total_crew=2, total_cleanups=1, plastic_collected=272, beaches_clean=3
    )


@pytest.mark.asyncio
async def test_initialize_ignores_stored_stats(controller, storage):
    storage.set(DEFAULT_STORAGE_KEY, json.dumps({"stats": {"totalCrew": 9999}}))

    await controller.initialize()

    assert controller.state.stats == SEED_STATS


@pytest.mark.asyncio
async def test_initialize_restores_user_marker(controller, storage, widget):
    storage.set(DEFAULT_STORAGE_KEY, json.dumps({"userLocation": {"lat": 32.7, "lng": -117.2}}))

    await controller.initialize()

    assert controller.state.user_location == Coordinate(lat=32.7, lng=-117.2)
    assert controller.map_engine.has_user_marker


@pytest.mark.asyncio
async def test_corrupt_storage_falls_back_to_seed_with_warning(controller, storage):
    storage.set(DEFAULT_STORAGE_KEY, "{definitely not json")
    logs = await collect(controller.bus, events.TOPIC_LOGS_EVENT)

    await controller.initialize()
    await controller.bus.wait_until_idle()

    assert controller.state.stats == SEED_STATS
    assert any(entry["level"] == "warning" for entry in logs)


@pytest.mark.asyncio
async def test_select_unknown_cleanup_changes_nothing(controller, widget, rendered):
    await controller.initialize()
    stats_before = controller.state.stats
    markers_before = dict(widget.markers)
    viewport_before = widget.viewport
    renders_before = len(rendered)

    result = await controller.select_cleanup("unknown-id")

    assert result is False
    assert controller.state.stats == stats_before
    assert widget.markers == markers_before
    assert widget.viewport == viewport_before
    assert controller.state.selected_cleanup_id is None
    assert len(controller.notifications) == 0
    assert len(rendered) == renders_before


@pytest.mark.asyncio
async def test_select_cleanup_focuses_and_notifies(controller, widget, rendered):
    await controller.initialize()

    assert await controller.select_cleanup(2) is True

    assert widget.viewport == ((32.8007, -117.2467), 14)
    [notification] = rendered[-1].notifications
    assert notification.message == "Selected: Pacific Beach Eco Day"
    assert notification.severity == "info"
    assert rendered[-1].selected_cleanup_id == "2"


@pytest.mark.asyncio
async def test_select_cleanup_without_map_still_notifies(seed):
    controller = AppStateController(store=_memory_store(), seed=seed)
    selected = await collect(controller.bus, events.TOPIC_CLEANUP_SELECTED)
    await controller.initialize()

    assert await controller.select_cleanup("1") is True
    await controller.bus.wait_until_idle()

    assert [n.message for n in controller.notifications] == ["Selected: Mission Beach Cleanup"]
    assert selected == [{"cleanup_id": "1", "focused": False}]
    await controller.shutdown()


@pytest.mark.asyncio
async def test_join_crew_notifies_and_saves_without_changing_members(controller, storage):
    await controller.initialize()

    assert await controller.join_crew("1") is True

    [notification] = list(controller.notifications)
    assert notification.severity == "success"
    assert "Ocean Warriors" in notification.message
    assert controller.state.find_crew("1").members == 24
    assert controller.state.stats == SEED_STATS
    saved = json.loads(storage.get(DEFAULT_STORAGE_KEY))
    assert len(saved["crews"]) == 3


@pytest.mark.asyncio
async def test_join_unknown_crew_is_a_no_op(controller, storage):
    await controller.initialize()

    assert await controller.join_crew("nope") is False
    assert len(controller.notifications) == 0
    assert storage.get(DEFAULT_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_replace_collections_recomputes_before_render(controller, widget, rendered):
    await controller.initialize()

    await controller.replace_collections(
        crews=[make_crew("a", members=3, completed=2)],
        cleanups=[make_cleanup("x", plastic_target=40)],
    )

    view = rendered[-1]
    assert view.stats == Stats(total_crew=3, total_cleanups=2, plastic_collected=40, beaches_clean=1)
    assert controller.map_engine.marker_ids() == ("x",)
    assert len(widget.markers) == 1


@pytest.mark.asyncio
async def test_replace_crews_only_does_not_touch_markers(controller, widget):
    await controller.initialize()

    await controller.replace_collections(crews=[])

    assert controller.state.stats.total_crew == 0
    assert widget.created == 3
    assert widget.removed == 0


@pytest.mark.asyncio
async def test_replace_collections_drops_stale_selection(controller):
    await controller.initialize()
    await controller.select_cleanup("3")

    await controller.replace_collections(cleanups=[make_cleanup("x")])

    assert controller.state.selected_cleanup_id is None


@pytest.mark.asyncio
async def test_state_changed_event_carries_fresh_stats(controller):
    changes = await collect(controller.bus, events.TOPIC_STATE_CHANGED)

    await controller.initialize()
    await controller.bus.wait_until_idle()

    assert changes[-1]["reason"] == "initialize"
    assert changes[-1]["stats"]["total_crew"] == 60


@pytest.mark.asyncio
async def test_locate_user_places_single_marker(controller, widget, storage):
    await controller.initialize()
    controller.geolocation = StaticGeolocationProvider(Coordinate(lat=32.75, lng=-117.2))

    coord = await controller.locate_user()
    await controller.locate_user()

    assert coord == Coordinate(lat=32.75, lng=-117.2)
    assert controller.state.user_location == coord
    user_markers = [m for m in widget.markers.values() if m[1] is MarkerIcon.USER]
    assert len(user_markers) == 1
    assert json.loads(storage.get(DEFAULT_STORAGE_KEY))["userLocation"] == {"lat": 32.75, "lng": -117.2}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "provider",
    [None, StaticGeolocationProvider(denied=True), StaticGeolocationProvider()],
)
async def test_locate_user_failure_is_a_warning(controller, widget, provider):
    await controller.initialize()
    controller.geolocation = provider
    logs = await collect(controller.bus, events.TOPIC_LOGS_EVENT)

    assert await controller.locate_user() is None
    await controller.bus.wait_until_idle()

    assert controller.state.user_location is None
    assert not controller.map_engine.has_user_marker
    assert [entry["level"] for entry in logs] == ["warning"]


@pytest.mark.asyncio
async def test_save_failure_keeps_in_memory_state(seed):
    class FullStorage(MemoryStorage):
        def set(self, key, value):
            raise StorageError("quota exceeded")

    controller = AppStateController(store=_memory_store(FullStorage()), seed=seed)
    logs = await collect(controller.bus, events.TOPIC_LOGS_EVENT)
    await controller.initialize()

    assert await controller.join_crew("2") is True
    await controller.bus.wait_until_idle()

    assert len(controller.notifications) == 1
    assert any("quota exceeded" in entry["message"] for entry in logs)
    await controller.shutdown()


@pytest.mark.asyncio
async def test_reset_restores_seed_and_clears_storage(controller, storage):
    await controller.initialize()
    controller.geolocation = StaticGeolocationProvider(Coordinate(lat=1, lng=1))
    await controller.locate_user()
    await controller.replace_collections(crews=[], cleanups=[])

    await controller.reset()

    assert controller.state.stats == SEED_STATS
    assert controller.state.user_location is None
    assert not controller.map_engine.has_user_marker
    assert storage.get(DEFAULT_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_notify_and_tick_rerender(controller, clock, rendered):
    await controller.initialize()
    await controller.notify("Let's save the ocean! 🌊", "success")
    assert len(rendered[-1].notifications) == 1

    clock.advance(1.0)
    assert controller.tick() == []

    clock.advance(controller.notifications.display_duration)
    assert len(controller.tick()) == 1
    assert rendered[-1].notifications == ()


@pytest.mark.asyncio
async def test_failing_render_hook_does_not_break_mutation(controller, rendered):
    def broken(view):
        raise RuntimeError("template error")

    controller.add_render_hook(broken)
    await controller.initialize()

    assert controller.state.stats == SEED_STATS
    assert rendered[-1].stats == SEED_STATS

    controller.remove_render_hook(broken)


@pytest.mark.asyncio
async def test_independent_controllers_do_not_share_state(seed):
    first = AppStateController(store=_memory_store(), seed=seed)
    second = AppStateController(store=_memory_store(), seed=seed)
    await first.initialize()
    await second.initialize()

    await first.replace_collections(cleanups=[])

    assert first.state.stats.beaches_clean == 0
    assert second.state.stats.beaches_clean == 3


@pytest.mark.asyncio
async def test_from_config_with_memory_backend():
    config = SystemConfig(storage={"backend": "memory"})
    controller = AppStateController.from_config(config, auto_expire=False)

    await controller.initialize()

    assert controller.map_engine.available
    assert controller.state.stats == SEED_STATS
    assert controller.map_engine.viewport.zoom == 11


@pytest.mark.asyncio
async def test_from_config_falls_back_to_packaged_seed(tmp_path):
    config = SystemConfig(storage={"backend": "memory"}, seed={"path": str(tmp_path / "missing.yaml")})
    controller = AppStateController.from_config(config, auto_expire=False)

    await controller.initialize()

    assert len(controller.state.cleanups) == 3


def _memory_store(storage=None):
    return PersistentStore(storage if storage is not None else MemoryStorage())


@pytest.mark.asyncio
async def test_sessions_sharing_a_backend_keep_separate_slots():
    shared = DuckDBStorage(":memory:")
    config = SystemConfig()
    first = AppStateController.from_config(
        config,
        storage=shared,
        storage_scope="first",
        auto_expire=False,
        geolocation=StaticGeolocationProvider(Coordinate(lat=10.5, lng=20.5)),
    )
    await first.initialize()
    await first.locate_user()

    second = AppStateController.from_config(config, storage=shared, storage_scope="second", auto_expire=False)
    await second.initialize()
    reopened = AppStateController.from_config(config, storage=shared, storage_scope="first", auto_expire=False)
    await reopened.initialize()

    assert second.state.user_location is None
    assert not second.map_engine.has_user_marker
    assert reopened.state.user_location == Coordinate(lat=10.5, lng=20.5)
    assert shared.get("shoreSquadData:first") is not None
    shared.close()


@pytest.mark.asyncio
async def test_warnings_reach_the_view(controller):
    await controller.initialize()
    controller.geolocation = StaticGeolocationProvider(denied=True)

    await controller.locate_user()
    await controller.bus.wait_until_idle()

    [entry] = controller.view().logs
    assert entry.level == "warning"
    assert "denied" in entry.message


@pytest.mark.asyncio
async def test_corrupt_storage_warning_reaches_the_view(controller, storage):
    storage.set(DEFAULT_STORAGE_KEY, "[" * 200000)

    await controller.initialize()
    await controller.bus.wait_until_idle()

    assert controller.state.stats == SEED_STATS
    assert [entry.level for entry in controller.view().logs] == ["warning"]
