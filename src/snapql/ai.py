"""Natural-language query generation.

The core only supplies context: dialect, the rendered schema text, the
user's current query and the connection's prompt extension. The provider
returns the SQL plus optional chart axes.
"""

import logging

from pydantic_ai import Agent
from pydantic_ai.models import Model
from snapql_models import AIProvider, GlobalSettings, QueryResponse

from snapql.config import Settings
from snapql.db.connection import Dialect

logger = logging.getLogger(__name__)


class QueryGenerationError(Exception):
    """The provider call failed or returned unusable output."""

    pass


class MissingCredentialsError(QueryGenerationError):
    """No API key is configured for the selected provider."""

    pass


def build_system_prompt(
    dialect: Dialect,
    schema_text: str,
    existing_query: str = "",
    prompt_extension: str | None = None,
) -> str:
    """Build the system prompt for query generation."""
    lines = [
        f"You are a SQL ({dialect.value}) and data visualization expert. Your job is to "
        "help the user write or modify a SQL query to retrieve the data they need. "
        "The table schema is as follows:",
        "",
        schema_text,
        "",
        "Only retrieval queries are allowed.",
    ]

    existing = (existing_query or "").strip()
    if existing:
        lines += ["", f"The user's existing query is: {existing}"]

    extension = (prompt_extension or "").strip()
    if extension:
        lines += ["", f"Extra information: {extension}"]

    lines += ["", "Format the query in a way that is easy to read and understand."]
    if dialect == Dialect.POSTGRES:
        lines.append(f"Wrap table names in double quotes, e.g. {dialect.quote_identifier('users')}.")
    else:
        lines.append(f"Wrap table names in backticks, e.g. {dialect.quote_identifier('users')}.")
    lines.append(
        "If the query results can be effectively visualized using a graph, specify which "
        "column should be used for the x-axis (domain) and which column(s) should be used "
        "for the y-axis (range)."
    )
    return "\n".join(lines)


def build_model(global_settings: GlobalSettings, settings: Settings) -> Model:
    """Create the provider model selected in the global settings.

    Raises:
        MissingCredentialsError: If the selected provider has no API key
    """
    if global_settings.ai_provider == AIProvider.CLAUDE:
        if not global_settings.claude_api_key:
            raise MissingCredentialsError("Claude API key is not set")

        from pydantic_ai.models.anthropic import AnthropicModel
        from pydantic_ai.providers.anthropic import AnthropicProvider

        return AnthropicModel(
            global_settings.claude_model or settings.default_claude_model,
            provider=AnthropicProvider(api_key=global_settings.claude_api_key),
        )

    if not global_settings.openai_key:
        raise MissingCredentialsError("OpenAI API key is not set")

    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    return OpenAIChatModel(
        global_settings.openai_model or settings.default_openai_model,
        provider=OpenAIProvider(
            api_key=global_settings.openai_key,
            base_url=global_settings.openai_base_url or None,
        ),
    )


async def generate_query(
    model: Model,
    dialect: Dialect,
    schema_text: str,
    user_prompt: str,
    existing_query: str = "",
    prompt_extension: str | None = None,
) -> QueryResponse:
    """Ask the model for a query answering `user_prompt`.

    Raises:
        QueryGenerationError: If the provider call fails
    """
    system_prompt = build_system_prompt(dialect, schema_text, existing_query, prompt_extension)
    logger.debug(f"System prompt: {system_prompt}")

    agent = Agent(model, system_prompt=system_prompt, output_type=QueryResponse)
    try:
        result = await agent.run(user_prompt)
    except Exception as e:
        logger.error(f"Query generation failed: {e}")
        raise QueryGenerationError(f"Failed to generate query: {e}") from e
    return result.output
