"""Runtime configuration helpers."""

from app.config.settings import EngineSettings, resolve_engine_settings

__all__ = [
    "EngineSettings",
    "resolve_engine_settings",
]
