"""Query execution and generation result models."""

from typing import Any

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """Rows returned by a single statement."""

    columns: list[str] = Field(default_factory=list, description="Column names in order")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Rows as dicts")

    @property
    def row_count(self) -> int:
        return len(self.rows)


class QueryResponse(BaseModel):
    """Structured output of query generation."""

    query: str = Field(..., description="The generated SQL query")
    graph_x_column: str | None = Field(
        default=None, description="Column to use for the x-axis (domain), if chartable"
    )
    graph_y_columns: list[str] | None = Field(
        default=None, description="Columns to use for the y-axis (range), if chartable"
    )


class Envelope(BaseModel):
    """Result wrapper for operations whose errors are rendered inline."""

    error: str | None = None
    data: Any = None

    @classmethod
    def ok(cls, data: Any) -> "Envelope":
        return cls(error=None, data=data)

    @classmethod
    def fail(cls, error: str) -> "Envelope":
        return cls(error=error, data=None)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
