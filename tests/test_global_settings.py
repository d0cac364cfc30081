"""Tests for the global AI settings document."""

import json

import pytest
from snapql_models import AIProvider

from snapql.global_settings import GlobalSettingsStore


@pytest.fixture
def store(layout):
    return GlobalSettingsStore(layout)


def read_doc(layout) -> dict:
    return json.loads(layout.settings_path.read_text())


class TestRead:
    def test_missing_document_gets_defaults(self, store, layout):
        settings = store.read()

        assert settings.ai_provider == AIProvider.OPENAI
        assert settings.openai_key is None
        assert read_doc(layout) == {"aiProvider": "openai"}

    def test_invalid_document_healed(self, store, layout):
        layout.root.mkdir(parents=True)
        layout.settings_path.write_text("not json at all")

        assert store.read().ai_provider == AIProvider.OPENAI
        assert read_doc(layout) == {"aiProvider": "openai"}

    def test_null_provider_reads_as_openai(self, store, layout):
        layout.root.mkdir(parents=True)
        layout.settings_path.write_text(json.dumps({"aiProvider": None}))

        assert store.get_ai_provider() == AIProvider.OPENAI

    def test_reads_aliased_keys(self, store, layout):
        layout.root.mkdir(parents=True)
        layout.settings_path.write_text(
            json.dumps({"aiProvider": "claude", "claudeApiKey": "sk-ant", "claudeModel": "m"})
        )

        settings = store.read()
        assert settings.ai_provider == AIProvider.CLAUDE
        assert settings.claude_api_key == "sk-ant"
        assert settings.claude_model == "m"


class TestWrite:
    def test_write_merges(self, store, layout):
        store.write(openai_key="sk-1")
        store.write(openai_model="gpt-4o-mini")

        doc = read_doc(layout)
        assert doc["openAiKey"] == "sk-1"
        assert doc["openAiModel"] == "gpt-4o-mini"
        assert doc["aiProvider"] == "openai"

    def test_write_accepts_aliases(self, store):
        store.write({"openAiBaseUrl": "http://localhost:11434/v1"})
        assert store.get_openai_base_url() == "http://localhost:11434/v1"

    def test_legacy_keys_preserved(self, store, layout):
        layout.root.mkdir(parents=True)
        layout.settings_path.write_text(
            json.dumps({"connectionString": "postgres://u@h/d", "promptExtension": "hint"})
        )

        store.set_ai_provider("claude")

        doc = read_doc(layout)
        assert doc["connectionString"] == "postgres://u@h/d"
        assert doc["promptExtension"] == "hint"
        assert doc["aiProvider"] == "claude"

    def test_clearing_removes_key(self, store, layout):
        store.write(openai_key="sk-1")
        store.write(openai_key=None)

        assert "openAiKey" not in read_doc(layout)
        assert store.get_openai_key() is None

    def test_typed_accessors(self, store):
        store.set_claude_api_key("sk-ant")
        store.set_claude_model("claude-sonnet-4-0")
        store.set_openai_model("gpt-4o")

        assert store.get_claude_api_key() == "sk-ant"
        assert store.get_claude_model() == "claude-sonnet-4-0"
        assert store.get_openai_model() == "gpt-4o"

    def test_invalid_provider_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_ai_provider("gemini")
