"""Process-wide AI provider settings."""

from snapql.global_settings.store import GlobalSettingsStore

__all__ = ["GlobalSettingsStore"]
