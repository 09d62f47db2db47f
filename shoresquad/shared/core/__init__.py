"""
Shared Core Module
==================

Event system, configuration, logging and the error taxonomy.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Errors
from .errors import (
    GeolocationDenied,
    GeolocationError,
    MapInitializationError,
    ShoreSquadError,
    StorageError,
    UserInputMismatch,
)

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
)
from .logging_config import configure_logging

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Errors
    "ShoreSquadError",
    "UserInputMismatch",
    "StorageError",
    "MapInitializationError",
    "GeolocationError",
    "GeolocationDenied",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
    "configure_logging",
]
