"""Query history and favorites entry models (history.json / favorites.json)."""

from typing import Any

from pydantic import BaseModel, Field


class GraphSpec(BaseModel):
    """Chart axes attached to a query result."""

    model_config = {"populate_by_name": True}

    x_column: str = Field(..., alias="graphXColumn", description="Column for the x-axis")
    y_columns: list[str] = Field(
        ..., alias="graphYColumns", min_length=1, description="Columns for the y-axis"
    )


class QueryEntry(BaseModel):
    """A recorded query run.

    Used for both history and favorites. The id is unique within its owning
    collection only.
    """

    model_config = {"populate_by_name": True}

    id: str = Field(..., description="Entry ID, unique within its collection")
    query: str = Field(..., description="SQL text that was run")
    results: list[Any] = Field(default_factory=list, description="Result rows")
    graph: GraphSpec | None = Field(default=None, description="Optional chart axes")
    timestamp: str = Field(..., description="ISO-8601 instant of the run")

    def to_document(self) -> dict:
        """Serialize for the on-disk JSON document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


HistoryEntry = QueryEntry
FavoriteEntry = QueryEntry
