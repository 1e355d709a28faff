"""Configuration module."""

from scheduled.config.schema import SchedulerSettings
from scheduled.config.loader import load_settings, save_settings
from scheduled.config.runtime import SchedulerConfig

__all__ = [
    "SchedulerSettings",
    "SchedulerConfig",
    "load_settings",
    "save_settings",
]
