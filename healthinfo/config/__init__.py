"""Configuration package for runtime settings, logging and startup validation."""

from .logging import config_configure_logging
from .settings import HealthSettings, SettingsLoadError, config_load_settings

__all__ = ["HealthSettings", "SettingsLoadError", "config_configure_logging", "config_load_settings"]
