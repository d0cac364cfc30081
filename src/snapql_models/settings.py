"""Persisted settings documents: global AI settings and per-connection settings."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class AIProvider(str, Enum):
    """LLM provider used for query generation."""

    OPENAI = "openai"
    CLAUDE = "claude"


class GlobalSettings(BaseModel):
    """Global settings document (settings.json at the root)."""

    model_config = {"populate_by_name": True}

    ai_provider: AIProvider = Field(default=AIProvider.OPENAI, alias="aiProvider")
    openai_key: str | None = Field(default=None, alias="openAiKey")
    openai_base_url: str | None = Field(default=None, alias="openAiBaseUrl")
    openai_model: str | None = Field(default=None, alias="openAiModel")
    claude_api_key: str | None = Field(default=None, alias="claudeApiKey")
    claude_model: str | None = Field(default=None, alias="claudeModel")

    @field_validator("ai_provider", mode="before")
    @classmethod
    def _default_provider(cls, value):
        # A document with the key present but null still gets the default
        return AIProvider.OPENAI if value is None else value

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ConnectionSettings(BaseModel):
    """Per-connection settings document (connections/<name>/settings.json)."""

    model_config = {"populate_by_name": True}

    connection_string: str = Field(
        ..., alias="connectionString", description="Dialect-prefixed database URI"
    )
    prompt_extension: str | None = Field(
        default=None,
        alias="promptExtension",
        description="Extra context appended to the generation prompt",
    )

    def normalized(self) -> "ConnectionSettings":
        """Return a copy with a blank prompt extension stored as absent.

        Non-blank text is kept exactly as given.
        """
        extension = self.prompt_extension
        if extension is not None and not extension.strip():
            extension = None
        return self.model_copy(update={"prompt_extension": extension})

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def normalize_prompt_extension(value: str | None) -> str | None:
    """Trim a prompt extension; empty or whitespace-only becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
