"""Transient notifications with time-boxed display.

Each notification is shown for ``visible_seconds``, then plays an exit
transition for ``exit_seconds`` and is removed. Expiry is driven either by an
explicit ``tick(now)`` or by a background asyncio task that sleeps until the
next deadline and finishes once the queue is empty.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, List, Optional, Tuple

from .models import SEVERITIES, Severity

logger = logging.getLogger(__name__)

VISIBLE_SECONDS = 3.0
EXIT_SECONDS = 0.3
MAX_ITEMS = 20

Clock = Callable[[], float]
ExpiryCallback = Callable[[List["Notification"]], None]


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    severity: Severity
    created_at: float
    exit_at: float  # Start of the exit transition
    expires_at: float  # Removed from the queue at this instant

    def phase(self, now: float) -> str:
        if now < self.exit_at:
            return "visible"
        if now < self.expires_at:
            return "exiting"
        return "expired"

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class NotificationQueue:
    """Holds zero or more live notifications, oldest first."""

    def __init__(
        self,
        visible_seconds: float = VISIBLE_SECONDS,
        exit_seconds: float = EXIT_SECONDS,
        max_items: int = MAX_ITEMS,
        clock: Clock = time.monotonic,
        on_expire: Optional[ExpiryCallback] = None,
        auto_expire: bool = True,
    ) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.visible_seconds = visible_seconds
        self.exit_seconds = exit_seconds
        self.max_items = max_items
        self._clock = clock
        self.on_expire = on_expire
        self._auto_expire = auto_expire
        self._items: Deque[Notification] = deque()
        self._ids = itertools.count(1)
        self._task: Optional[asyncio.Task] = None

    def now(self) -> float:
        return self._clock()

    @property
    def display_duration(self) -> float:
        return self.visible_seconds + self.exit_seconds

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Notification]:
        return iter(tuple(self._items))

    def enqueue(self, message: str, severity: str = "info", now: Optional[float] = None) -> Notification:
        """Append a notification stamped with ``now`` (the clock by default)."""
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity {severity!r}; expected one of {SEVERITIES}")

        created_at = self._clock() if now is None else now
        notification = Notification(
            id=next(self._ids),
            message=message,
            severity=severity,  # type: ignore[arg-type]
            created_at=created_at,
            exit_at=created_at + self.visible_seconds,
            expires_at=created_at + self.display_duration,
        )

        if len(self._items) >= self.max_items:
            dropped = self._items.popleft()
            logger.debug(f"Notification queue full, dropped #{dropped.id}")
        self._items.append(notification)
        logger.info(f"[{severity.upper()}] {message}")

        if self._auto_expire:
            self.start()
        return notification

    def tick(self, now: Optional[float] = None) -> List[Notification]:
        """Remove and return every notification that has fully expired."""
        now = self._clock() if now is None else now
        expired = [n for n in self._items if n.is_expired(now)]
        if expired:
            self._items = deque(n for n in self._items if not n.is_expired(now))
        return expired

    def active(self, now: Optional[float] = None) -> Tuple[Notification, ...]:
        now = self._clock() if now is None else now
        return tuple(n for n in self._items if not n.is_expired(now))

    def clear(self) -> None:
        self._items.clear()
        self.stop()

    # --- Expiry timer ---

    @property
    def timer_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the expiry task if a loop is running and the queue is non-empty."""
        if self.timer_running or not self._items:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: expiry is left to explicit tick() calls
            return
        self._task = loop.create_task(self._run_expiry())

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_expiry(self) -> None:
        while self._items:
            next_deadline = min(n.expires_at for n in self._items)
            await asyncio.sleep(max(0.0, next_deadline - self._clock()))
            expired = self.tick()
            if expired and self.on_expire is not None:
                try:
                    self.on_expire(expired)
                except Exception:
                    logger.exception("Notification expiry callback failed")
