"""Canonical event definitions for ShoreSquad."""

from __future__ import annotations

import time
from typing import Any, Dict, Literal

from .event_bus import EventPayload

# Event Topics
TOPIC_LOGS_EVENT = "logs.event"
TOPIC_STATE_CHANGED = "state.changed"
TOPIC_NOTIFICATION_CREATED = "notification.created"
TOPIC_CREW_JOINED = "crew.joined"
TOPIC_CLEANUP_SELECTED = "cleanup.selected"
TOPIC_USER_LOCATED = "user.located"

LogLevel = Literal["info", "warning", "error", "success"]


def create_logs_event(
    message: str,
    level: LogLevel = "info",
    topic: str | None = None,
) -> EventPayload:
    """Create a Log event."""
    return {
        "message": message,
        "level": level,
        "topic": topic,
        "ts": time.time(),
    }


def create_state_changed_event(reason: str, stats: Dict[str, Any]) -> EventPayload:
    """Create a state changed event.

    Args:
        reason: The operation that completed (``initialize``, ``join_crew``...)
        stats: The freshly recomputed stats, serialized
    """
    return {
        "reason": reason,
        "stats": stats,
    }


def create_notification_event(notification_id: int, message: str, severity: str) -> EventPayload:
    return {
        "id": notification_id,
        "message": message,
        "severity": severity,
    }


def create_crew_joined_event(crew_id: str, crew_name: str) -> EventPayload:
    return {
        "crew_id": crew_id,
        "crew_name": crew_name,
    }


def create_cleanup_selected_event(cleanup_id: str, focused: bool) -> EventPayload:
    """Create a cleanup selected event.

    ``focused`` is False when the map was unavailable and only the
    notification was shown.
    """
    return {
        "cleanup_id": cleanup_id,
        "focused": focused,
    }


def create_user_located_event(lat: float, lng: float) -> EventPayload:
    return {
        "lat": lat,
        "lng": lng,
    }
