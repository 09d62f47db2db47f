"""
Configuration Management System for ShoreSquad

This module provides a centralized configuration system that supports a 4-tier
precedence hierarchy: environment → project → user → system defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class MapConfig(BaseModel):
    """Map viewport and tile configuration"""
    model_config = ConfigDict(extra='forbid')

    # San Diego beaches
    default_lat: float = Field(default=32.7157, ge=-90.0, le=90.0, description="Initial viewport latitude")
    default_lng: float = Field(default=-117.1611, ge=-180.0, le=180.0, description="Initial viewport longitude")
    default_zoom: int = Field(default=11, ge=0, le=19, description="Initial viewport zoom")
    focus_zoom: int = Field(default=14, ge=0, le=19, description="Zoom used when a cleanup is selected")
    max_zoom: int = Field(default=19, ge=1, le=19)

    tile_url: str = Field(
        default="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        description="Tile layer URL template",
    )
    attribution: str = Field(default="© OpenStreetMap contributors")


class NotificationConfig(BaseModel):
    """Transient notification timing"""
    model_config = ConfigDict(extra='forbid')

    visible_seconds: float = Field(default=3.0, gt=0.0, le=60.0)
    exit_seconds: float = Field(default=0.3, ge=0.0, le=5.0, description="Exit transition length")
    max_items: int = Field(default=20, ge=1, le=500, description="Oldest notifications are dropped past this")


class StorageConfig(BaseModel):
    """Durable key-value storage"""
    model_config = ConfigDict(extra='forbid')

    backend: Literal["duckdb", "memory"] = Field(default="duckdb")
    db_path: str = Field(default="data/db/shoresquad.duckdb", description="DuckDB file path")
    key: str = Field(default="shoreSquadData", min_length=1, description="Storage slot key")
    autosave: bool = Field(default=True, description="Persist after join/locate operations")


class SeedConfig(BaseModel):
    """Seed collections used when nothing has been persisted yet"""
    model_config = ConfigDict(extra='forbid')

    path: Optional[str] = Field(default=None, description="YAML seed file; packaged seed when empty")


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    map: MapConfig = Field(default_factory=MapConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)

    schema_version: int = Field(default=1, description="Configuration schema version")


# env var -> (section, key, converter)
ENV_OVERRIDES = {
    'SHORESQUAD_STORAGE_BACKEND': ('storage', 'backend', str),
    'SHORESQUAD_DB_PATH': ('storage', 'db_path', str),
    'SHORESQUAD_STORAGE_KEY': ('storage', 'key', str),
    'SHORESQUAD_SEED_PATH': ('seed', 'path', str),
    'SHORESQUAD_MAP_ZOOM': ('map', 'default_zoom', int),
    'SHORESQUAD_FOCUS_ZOOM': ('map', 'focus_zoom', int),
    'SHORESQUAD_NOTIFICATION_MAX_ITEMS': ('notifications', 'max_items', int),
}


class ConfigManager:
    """Centralized configuration manager with 4-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else SETTINGS_DIR
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None
        self._project_config: Optional[Dict[str, Any]] = None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {file_path}: top level is not a mapping")
            return {}
        return data

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except OSError as e:
            logger.error(f"Failed to save {file_path}: {e}")
            return False

    def _load_system_defaults(self) -> SystemConfig:
        """Load system default configuration"""
        if self._system_config is None:
            defaults_dict = self._load_yaml_file(self.config_dir / "defaults.yaml")
            try:
                self._system_config = SystemConfig(**defaults_dict)
            except ValidationError as e:
                logger.warning(f"System defaults validation failed: {e}")
                self._system_config = SystemConfig()

        return self._system_config

    def _load_user_config(self) -> Dict[str, Any]:
        """Load user-level configuration"""
        if self._user_config is None:
            self._user_config = self._load_yaml_file(self.config_dir / "user.yaml")
        return self._user_config

    def _load_project_config(self) -> Dict[str, Any]:
        """Load project-specific configuration"""
        if self._project_config is None:
            self._project_config = self._load_yaml_file(self.config_dir / "project.yaml")
        return self._project_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → project → user → system"""
        merged = self._load_system_defaults().model_dump()
        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._load_project_config())
        self._deep_merge(merged, self._get_env_overrides())
        return merged

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Deep merge configuration dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, (section, config_key, convert) in ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value is None:
                continue
            try:
                converted = convert(value)
            except ValueError:
                logger.warning(f"Ignoring {env_key}={value!r}: not a valid {convert.__name__}")
                continue
            overrides.setdefault(section, {})[config_key] = converted

        return overrides

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return SystemConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}")
            logger.warning(f"Configuration validation failed, using defaults: {e}")
            return SystemConfig()

    def save_project_config(self, config_updates: Dict[str, Any]) -> bool:
        """Save project-specific configuration updates"""
        project_path = self.config_dir / "project.yaml"

        existing_config = self._load_yaml_file(project_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(project_path, existing_config)
        if success:
            self._project_config = None

        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None
        self._project_config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get global configuration manager instance"""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
    """Get current system configuration"""
    return get_config_manager().get_config(validation_level)
