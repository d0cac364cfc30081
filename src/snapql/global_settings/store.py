"""Global settings persistence - AI provider credentials and model selection.

The document lives at <root>/settings.json. Older releases kept the connection
string and query history in the same file, so writes merge into whatever is
on disk instead of replacing it.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError
from snapql_models import AIProvider, GlobalSettings

from snapql.storage import StorageLayout, read_json, write_json

logger = logging.getLogger(__name__)


class GlobalSettingsStore:
    """Read-merge-write access to the global settings document."""

    def __init__(self, layout: StorageLayout):
        self.layout = layout

    def read(self) -> GlobalSettings:
        """Load global settings.

        A missing, unparseable or invalid document is replaced with the
        defaults, which are persisted before returning.
        """
        path = self.layout.settings_path
        try:
            data = read_json(path)
            return GlobalSettings.model_validate(data)
        except FileNotFoundError:
            logger.info(f"No global settings at {path}, writing defaults")
        except (ValueError, ValidationError) as e:
            logger.warning(f"Resetting invalid global settings at {path}: {e}")

        settings = GlobalSettings()
        write_json(path, settings.to_document())
        return settings

    def write(self, updates: dict[str, Any] | None = None, **fields: Any) -> GlobalSettings:
        """Merge fields into the stored document.

        Keys may be field names (openai_key) or on-disk aliases (openAiKey).
        Keys not supplied, including legacy ones this model does not know
        about, keep their stored values.
        """
        supplied = {**(updates or {}), **fields}
        changes = GlobalSettings.model_validate(
            {**self.read().to_document(), **_aliased(supplied)}
        )
        changed_keys = {_alias_of(key) for key in supplied}

        existing = self._read_raw()
        document = changes.to_document()
        merged = {**existing, **{k: v for k, v in document.items() if k in changed_keys}}
        for key in changed_keys:
            if key not in document:
                # Cleared to None
                merged.pop(key, None)
        merged.setdefault("aiProvider", document["aiProvider"])

        write_json(self.layout.settings_path, merged)
        return GlobalSettings.model_validate(merged)

    def _read_raw(self) -> dict[str, Any]:
        try:
            data = read_json(self.layout.settings_path)
        except (FileNotFoundError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    # =========================================================================
    # Typed accessors
    # =========================================================================

    def get_ai_provider(self) -> AIProvider:
        return self.read().ai_provider

    def set_ai_provider(self, ai_provider: AIProvider | str) -> None:
        self.write(ai_provider=AIProvider(ai_provider))

    def get_openai_key(self) -> str | None:
        return self.read().openai_key

    def set_openai_key(self, openai_key: str) -> None:
        self.write(openai_key=openai_key)

    def get_openai_base_url(self) -> str | None:
        return self.read().openai_base_url

    def set_openai_base_url(self, openai_base_url: str) -> None:
        self.write(openai_base_url=openai_base_url)

    def get_openai_model(self) -> str | None:
        return self.read().openai_model

    def set_openai_model(self, openai_model: str) -> None:
        self.write(openai_model=openai_model)

    def get_claude_api_key(self) -> str | None:
        return self.read().claude_api_key

    def set_claude_api_key(self, claude_api_key: str) -> None:
        self.write(claude_api_key=claude_api_key)

    def get_claude_model(self) -> str | None:
        return self.read().claude_model

    def set_claude_model(self, claude_model: str) -> None:
        self.write(claude_model=claude_model)


def _alias_of(key: str) -> str:
    field = GlobalSettings.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key


def _aliased(values: dict[str, Any]) -> dict[str, Any]:
    return {_alias_of(key): value for key, value in values.items()}
