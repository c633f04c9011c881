"""
Configuration Management System for the storefront client state layer

This module provides a centralized configuration system that supports a 4-tier
precedence hierarchy: environment → project → user → system defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class SessionConfig(BaseModel):
    """Auth session settings"""
    model_config = ConfigDict(extra='forbid')

    default_ttl_seconds: float = Field(default=3600.0, gt=0, le=60 * 60 * 24 * 30, description="Session lifetime granted on login")
    sign_in_route: str = Field(default="/buyer/sign-in", description="Where the session-expired prompt sends the user")


class CartConfig(BaseModel):
    """Cart totals settings"""
    model_config = ConfigDict(extra='forbid')

    tax_rate: float = Field(default=0.18, ge=0.0, le=1.0, description="GST rate applied to the subtotal")
    currency: str = Field(default="INR", description="Display currency")


class NotificationConfig(BaseModel):
    """Toast queue settings"""
    model_config = ConfigDict(extra='forbid')

    toast_duration_seconds: float = Field(default=5.0, ge=0.0, le=120.0, description="Default toast display time, 0 keeps toasts until dismissed")


class NetworkConfig(BaseModel):
    """Network status banner settings"""
    model_config = ConfigDict(extra='forbid')

    error_banner_seconds: float = Field(default=5.0, gt=0.0, le=60.0, description="Transient network error banner duration")


class StorageConfig(BaseModel):
    """Local key-value storage settings"""
    model_config = ConfigDict(extra='forbid')

    db_path: str = Field(default=":memory:", description="DuckDB file backing local storage")
    auth_key: str = Field(default="auth-storage")
    cart_key: str = Field(default="cart-storage")
    wishlist_key: str = Field(default="wishlist-storage")


class LoggingConfig(BaseModel):
    """Logging Configuration"""
    model_config = ConfigDict(extra='forbid')

    level: str = Field(default="DEBUG", description="File handler log level")
    log_file: str = Field(default="data/logs/storefront.log", description="Rotating log file path")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    backup_count: int = Field(default=5, ge=0, le=50)


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    session: SessionConfig = Field(default_factory=SessionConfig)
    cart: CartConfig = Field(default_factory=CartConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Metadata
    schema_version: int = Field(default=1, description="Configuration schema version")


# env var -> (section, key, converter)
ENV_OVERRIDES = {
    'SESSION_TTL_SECONDS': ('session', 'default_ttl_seconds', float),
    'CART_TAX_RATE': ('cart', 'tax_rate', float),
    'CART_CURRENCY': ('cart', 'currency', str),
    'TOAST_DURATION_SECONDS': ('notifications', 'toast_duration_seconds', float),
    'NETWORK_ERROR_BANNER_SECONDS': ('network', 'error_banner_seconds', float),
    'STOREFRONT_DB_PATH': ('storage', 'db_path', str),
    'LOG_LEVEL': ('logging', 'level', str),
    'LOG_FILE': ('logging', 'log_file', str),
}


class ConfigManager:
    """Centralized configuration manager with 4-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.cwd() / "config"
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None
        self._project_config: Optional[Dict[str, Any]] = None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
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
                overrides.setdefault(section, {})[config_key] = convert(value)
            except ValueError:
                logger.warning(f"Ignoring invalid value for {env_key}: {value!r}")
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
            # Clear cached project config to force reload
            self._project_config = None

        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None
        self._project_config = None


def get_config(
    config_dir: Optional[Path] = None,
    validation_level: ValidationLevel = ValidationLevel.STRICT,
) -> SystemConfig:
    """Load configuration from ``config_dir`` (defaults to ./config)."""
    return ConfigManager(config_dir).get_config(validation_level)
