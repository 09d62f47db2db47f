"""
Shared Config Module
====================

- seed.yaml: starting crews, cleanups and forecast
- settings/: YAML configuration files (defaults, project, user)
"""
