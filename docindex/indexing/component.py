from __future__ import annotations

from typing import Any

from docindex.core import Component, Response, operation

from ._builder import DocumentBuilder
from ._configuration import IndexConfiguration
from ._helper import FieldValidator, IndexNameResolver
from ._models import Document, PageResult


class IndexingService(Component):
    configuration: IndexConfiguration
    builder: DocumentBuilder

    def __init__(
        self,
        configuration: IndexConfiguration | dict | None = None,
        builder: DocumentBuilder | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            configuration:
                Index configuration with the index variant
                and the fields of each logical index.
            builder:
                Document builder used to convert documents
                to and from engine bodies.
        """
        if isinstance(configuration, dict):
            configuration = IndexConfiguration.from_dict(configuration)
        self.configuration = configuration or IndexConfiguration()
        self.builder = builder or DocumentBuilder()
        super().__init__(**kwargs)

    def environmentize_index(self, index: str) -> str:
        """Get the physical index name for a logical index.

        Args:
            index:
                Logical index name.

        Returns:
            Index name prefixed with the index variant, if any.
        """
        return IndexNameResolver(
            self.configuration.get_index_variant()
        ).resolve(index)

    def validate_field(self, field: str) -> None:
        """Validate a field name.

        Args:
            field:
                Field name.

        Raises:
            InvalidFieldError:
                Field name is not allowed by the engine.
        """
        FieldValidator.validate(field)

    @operation()
    def add_document(
        self,
        document: Document,
        **kwargs: Any,
    ) -> Response[str | None]:
        """Index a single document, creating its index if needed.

        Args:
            document:
                Document to index.

        Returns:
            Identifier of the indexed document.
        """
        raise NotImplementedError

    @operation()
    def add_documents(
        self,
        documents: list[Any],
        **kwargs: Any,
    ) -> Response[list[str]]:
        """Index documents in bulk, one bulk call per index.

        Args:
            documents:
                Documents to index. Values that are not
                documents are skipped.

        Returns:
            Identifiers of the indexed documents.

        Raises:
            IndexingServiceError:
                A bulk call failed or reported item errors.
        """
        raise NotImplementedError

    @operation()
    def remove_document(
        self,
        document: Document,
        **kwargs: Any,
    ) -> Response[str | None]:
        """Remove a single document.

        Args:
            document:
                Document to remove.

        Returns:
            Identifier of the removed document.
        """
        raise NotImplementedError

    @operation()
    def remove_documents(
        self,
        documents: list[Any],
        **kwargs: Any,
    ) -> Response[list[str]]:
        """Remove documents in bulk, one bulk call per index.

        Args:
            documents:
                Documents to remove.

        Returns:
            Identifiers of the removed documents.
        """
        raise NotImplementedError

    @operation()
    def remove_all_documents(
        self,
        index: str,
        **kwargs: Any,
    ) -> Response[int]:
        """Remove every document from a logical index.

        Args:
            index:
                Logical index name.

        Returns:
            Number of deleted documents.
        """
        raise NotImplementedError

    @operation()
    def get_document(
        self,
        id: str,
        **kwargs: Any,
    ) -> Response[Document | None]:
        """Get a document by id from any index.

        Args:
            id:
                Document identifier.

        Returns:
            Document, or None if not found.
        """
        raise NotImplementedError

    @operation()
    def get_documents(
        self,
        ids: list[str],
        **kwargs: Any,
    ) -> Response[list[Document]]:
        """Get documents by id from any index.

        Args:
            ids:
                Document identifiers.

        Returns:
            Documents found.
        """
        raise NotImplementedError

    @operation()
    def list_documents(
        self,
        index: str,
        page_size: int | None = None,
        current_page: int = 0,
        **kwargs: Any,
    ) -> Response[PageResult]:
        """List a page of documents in a logical index.

        Args:
            index:
                Logical index name.
            page_size:
                Page size, defaults to 10.
            current_page:
                Zero based page number.

        Returns:
            Page result.
        """
        raise NotImplementedError

    @operation()
    def get_document_total(
        self,
        index: str,
        **kwargs: Any,
    ) -> Response[int]:
        """Get the number of documents in a logical index.

        Args:
            index:
                Logical index name.

        Returns:
            Document count.
        """
        raise NotImplementedError

    @operation()
    def configure(
        self,
        **kwargs: Any,
    ) -> Response[dict[str, bool]]:
        """Create every configured index and update its mapping.

        Returns:
            Success flag keyed by logical index name.

        Raises:
            IndexConfigurationError:
                An index could not be created or mapped.
        """
        raise NotImplementedError

    @operation()
    def get_max_document_size(
        self,
        **kwargs: Any,
    ) -> Response[int]:
        """Get the advisory maximum document size in bytes."""
        raise NotImplementedError

    @operation()
    def get_external_url(
        self,
        **kwargs: Any,
    ) -> Response[str | None]:
        raise NotImplementedError

    @operation()
    def get_external_url_description(
        self,
        **kwargs: Any,
    ) -> Response[str | None]:
        raise NotImplementedError

    @operation()
    def get_documentation_url(
        self,
        **kwargs: Any,
    ) -> Response[str | None]:
        raise NotImplementedError

    @operation()
    def close(
        self,
        **kwargs: Any,
    ) -> Response[None]:
        """Close the engine client."""
        raise NotImplementedError
