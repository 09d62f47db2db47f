"""
Shared Domain Module
====================

Crews, cleanups, derived statistics, notifications and seed data.
"""

from shoresquad.shared.domain.models import (
    AppSnapshot,
    Cleanup,
    Coordinate,
    Crew,
    ForecastDay,
    Severity,
    Stats,
)
from shoresquad.shared.domain.notifications import Notification, NotificationQueue
from shoresquad.shared.domain.seed import SeedData, load_seed
from shoresquad.shared.domain.stats import StatsAggregator, compute_stats

__all__ = [
    # Models
    "AppSnapshot",
    "Cleanup",
    "Coordinate",
    "Crew",
    "ForecastDay",
    "Severity",
    "Stats",
    # Stats
    "StatsAggregator",
    "compute_stats",
    # Notifications
    "Notification",
    "NotificationQueue",
    # Seed
    "SeedData",
    "load_seed",
]
