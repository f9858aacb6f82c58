"""Application configuration."""

from .settings import GenerationSettings, Settings, get_settings

__all__ = ["GenerationSettings", "Settings", "get_settings"]
