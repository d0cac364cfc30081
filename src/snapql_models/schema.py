"""Introspected schema models. Derived on every call, never persisted."""

from pydantic import BaseModel, Field


class ColumnInfo(BaseModel):
    """A single column of an introspected table."""

    column_name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Catalog data type")
    is_nullable: bool = Field(default=True)
    is_primary_key: bool = Field(default=False)
    is_unique: bool = Field(default=False)
    default_value: str | None = Field(default=None, description="Column default expression")
    max_length: int | None = Field(default=None, description="Character maximum length")


class TableSchema(BaseModel):
    """A base table and its columns in ordinal order."""

    table_name: str = Field(..., description="Table name")
    columns: list[ColumnInfo] = Field(default_factory=list)

    def get_column(self, column_name: str) -> ColumnInfo | None:
        """Get column by name."""
        for column in self.columns:
            if column.column_name == column_name:
                return column
        return None

    @property
    def primary_key(self) -> list[str]:
        return [c.column_name for c in self.columns if c.is_primary_key]
