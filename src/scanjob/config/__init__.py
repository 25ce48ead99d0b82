"""Scanjob configuration loading."""

from scanjob.config.settings import (
    AntivirusConfiguration,
    AntivirusSettings,
    ConfigError,
    ScanJobConfig,
    SchedulerSettings,
    SettingsAntivirusConfiguration,
    load_config,
)

__all__ = [
    "AntivirusConfiguration",
    "AntivirusSettings",
    "ConfigError",
    "ScanJobConfig",
    "SchedulerSettings",
    "SettingsAntivirusConfiguration",
    "load_config",
]
