from __future__ import annotations

from typing import Any, Iterable

from docindex.core.exceptions import InvalidFieldError

from ._models import Document, Field, FieldType

DEFAULT_FIELD_TYPE = FieldType.TEXT.value
DATE_FORMAT = "yyyy-MM-dd HH:mm:ss||yyyy-MM-dd||epoch_millis"
INVALID_FIELD_CHARS = [
    "#",
    "\\",
    "/",
    "*",
    "?",
    '"',
    "<",
    ">",
    "|",
    " ",
    ",",
    ":",
]


class IndexNameResolver:
    """Maps logical index names to per-environment physical names.

    A logical name that itself starts with ``<variant>_`` cannot be
    recovered exactly: ``unresolve`` strips the prefix once.
    """

    variant: str

    def __init__(self, variant: str | None = None):
        self.variant = variant or ""

    def resolve(self, index: str) -> str:
        if self.variant:
            return f"{self.variant}_{index}"
        return index

    def unresolve(self, index: str) -> str:
        prefix = f"{self.variant}_"
        if self.variant and index.startswith(prefix):
            return index[len(prefix) :]
        return index


class MappingHelper:
    @staticmethod
    def convert_field(field: Field) -> dict[str, Any]:
        type = field.options.get("type") or DEFAULT_FIELD_TYPE
        if isinstance(type, FieldType):
            type = type.value
        config: dict[str, Any] = {"type": type}
        if type == FieldType.DATE.value:
            config["format"] = DATE_FORMAT
        return config

    @staticmethod
    def convert_fields(fields: Iterable[Field]) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for field in fields:
            properties[field.name] = MappingHelper.convert_field(field)
        return properties


class FieldValidator:
    @staticmethod
    def validate(field: str) -> None:
        if field.startswith("_"):
            raise InvalidFieldError(
                f'Field "{field}" begins with an underscore '
                "which is not allowed in Elasticsearch",
                field=field,
            )
        for char in INVALID_FIELD_CHARS:
            if char in field:
                raise InvalidFieldError(
                    f'Field "{field}" contains invalid character "{char}" '
                    "which is not allowed in Elasticsearch",
                    field=field,
                )

    @staticmethod
    def is_valid(field: str) -> bool:
        try:
            FieldValidator.validate(field)
        except InvalidFieldError:
            return False
        return True


class Helper:
    @staticmethod
    def get_documents(documents: Iterable[Any] | None) -> list[Document]:
        if not documents:
            return []
        return [
            document
            for document in documents
            if isinstance(document, Document)
        ]

    @staticmethod
    def group_documents(
        documents: Iterable[Any],
        resolver: IndexNameResolver,
    ) -> dict[str, list[Document]]:
        grouped: dict[str, list[Document]] = {}
        for document in Helper.get_documents(documents):
            index = resolver.resolve(document.source)
            grouped.setdefault(index, []).append(document)
        return grouped

    @staticmethod
    def get_total_pages(total: int, size: int) -> int:
        if size <= 0:
            return 0
        return -(-total // size)
