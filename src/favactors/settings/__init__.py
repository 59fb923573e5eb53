"""User settings for favactors."""

from .manager import SettingsManager, default_data_dir, default_settings_path
from .schema import DEFAULT_SETTINGS, SETTINGS_SCHEMA

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_SCHEMA",
    "SettingsManager",
    "default_data_dir",
    "default_settings_path",
]
