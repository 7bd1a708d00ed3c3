"""Configuration management."""

from .settings import DataSourceSettings, ScrollSettings, Settings, SettingsManager

__all__ = ["DataSourceSettings", "ScrollSettings", "Settings", "SettingsManager"]
