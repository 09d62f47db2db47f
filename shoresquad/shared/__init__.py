"""
ShoreSquad Shared Kernel
========================

Architecture:
- core: EventBus, configuration, logging, errors
- infrastructure: Technical adapters (storage, map widget, geolocation)
- domain: Crews, cleanups, stats, notifications, seed data
"""
