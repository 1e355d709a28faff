"""Settings loader for scheduled."""

import json
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from scheduled.config.schema import SchedulerSettings


def load_settings(config_path: Optional[Path] = None) -> SchedulerSettings:
    """
    Load settings from a JSON file.

    Args:
        config_path: Optional path to a JSON settings file. Without it, or when
                     the file does not exist, settings come from the
                     environment and defaults.

    Returns:
        SchedulerSettings object.
    """
    if config_path is None or not config_path.exists():
        return SchedulerSettings()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        settings = SchedulerSettings(**data)
        logger.info(f"Loaded settings from {config_path}")
        return settings
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        logger.warning(f"Invalid settings file: {e}. Using defaults.")

    return SchedulerSettings()


def save_settings(settings: SchedulerSettings, config_path: Path) -> None:
    """Save settings to a JSON file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(settings.model_dump(), f, indent=2, ensure_ascii=False)

    logger.info(f"Saved settings to {config_path}")
