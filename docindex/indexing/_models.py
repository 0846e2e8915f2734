from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import field_validator

from docindex.core import DataModel


class FieldType(str, Enum):
    """Common Elasticsearch field types.

    Any other type string is passed to the engine unchanged.
    """

    TEXT = "text"
    KEYWORD = "keyword"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    NESTED = "nested"
    GEO_POINT = "geo_point"


class Document(DataModel):
    """Document to index."""

    id: str
    """Document identifier, unique within its source."""

    source: str
    """Logical index name."""

    body: dict[str, Any] = {}
    """Field values."""


class Field(DataModel):
    """Field declared for an index."""

    name: str
    """Field name."""

    options: dict[str, Any] = {}
    """Field options, e.g. type."""


class IndexConfig(DataModel):
    """Logical index config."""

    fields: list[Field] = []
    """Declared fields, in order."""

    @field_validator("fields", mode="before")
    @classmethod
    def _convert_fields(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return [
                {"name": name, "options": options or {}}
                for name, options in value.items()
            ]
        return value


class PageMeta(DataModel):
    """Paging metadata."""

    current: int = 0
    """Current page, zero based."""

    total_pages: int = 0
    """Number of pages."""

    total_results: int = 0
    """Total documents in the index."""

    size: int = 0
    """Page size."""


class PageResult(DataModel):
    """Page of documents."""

    documents: list[Document] = []
    """Documents in the page."""

    meta: PageMeta
    """Paging metadata."""


class BulkError(DataModel):
    """Bulk item failure."""

    id: str | None = None
    """Document identifier."""

    type: str | None = None
    """Engine error type."""

    reason: str | None = None
    """Engine error reason."""


class BulkResult(DataModel):
    """Outcome of one bulk call."""

    index: str | None = None
    """Physical index the batch targeted."""

    ids: list[str] = []
    """Identifiers accepted by the engine."""

    errors: list[BulkError] = []
    """Items rejected by the engine."""

    @property
    def succeeded(self) -> bool:
        return len(self.errors) == 0

    def get_reasons(self) -> list[str]:
        return [str(error.reason) for error in self.errors]
