"""Configuration package."""

from lifeplan.config.settings import EngineSettings, get_settings

__all__ = [
    "EngineSettings",
    "get_settings",
]
