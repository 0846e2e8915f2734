from __future__ import annotations

from datetime import date, datetime
from typing import Any

from docindex.core import DataModel

from ._models import Document

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


class DocumentBuilder:
    """Converts documents to engine bodies and back.

    The identifier and source are written into the body under
    ``id_field`` and ``source_field`` so that they are searchable, and
    removed again when a document is rebuilt from a hit.
    """

    id_field: str | None
    source_field: str | None

    def __init__(
        self,
        id_field: str | None = "record_id",
        source_field: str | None = "record_base_class",
    ):
        self.id_field = id_field
        self.source_field = source_field

    def normalise_document(self, document: Document) -> dict[str, Any]:
        body = {
            key: self.normalise_value(value)
            for key, value in document.body.items()
        }
        if self.id_field:
            body[self.id_field] = document.id
        if self.source_field:
            body[self.source_field] = document.source
        return body

    def normalise_value(self, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.strftime(DATETIME_FORMAT)
        if isinstance(value, date):
            return value.strftime(DATE_FORMAT)
        if isinstance(value, DataModel):
            return self.normalise_value(value.to_dict())
        if isinstance(value, dict):
            return {k: self.normalise_value(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set)):
            return [self.normalise_value(v) for v in value]
        return value

    def create_from_dict(
        self,
        id: str,
        source: str,
        data: dict[str, Any] | None,
    ) -> Document:
        body = dict(data or {})
        for field in (self.id_field, self.source_field):
            if field:
                body.pop(field, None)
        return Document(id=id, source=source, body=body)
