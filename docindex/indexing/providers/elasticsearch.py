"""
Elasticsearch.
"""

from __future__ import annotations

__all__ = ["Elasticsearch"]

from typing import Any

from elasticsearch import ApiError
from elasticsearch import Elasticsearch as SyncElasticsearch
from elasticsearch import TransportError

from docindex.core import Context, Provider, Response, get_logger
from docindex.core.exceptions import (
    IndexConfigurationError,
    IndexingServiceError,
)

from .._builder import DocumentBuilder
from .._configuration import IndexConfiguration
from .._helper import FieldValidator, Helper, IndexNameResolver, MappingHelper
from .._models import (
    BulkError,
    BulkResult,
    Document,
    Field,
    PageMeta,
    PageResult,
)

DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_DOCUMENT_SIZE = 102400
DOCUMENTATION_URL = "https://www.elastic.co/elasticsearch/"

EngineError = (ApiError, TransportError)

logger = get_logger(__name__)


class Elasticsearch(Provider):
    hosts: str | list[str] | None
    cloud_id: str | None
    api_key: str | list[str] | None
    basic_auth: str | list[str] | None
    bearer_auth: str | None
    headers: dict[str, str] | None
    verify_certs: bool | None
    ca_certs: str | None
    request_timeout: float | None

    configuration: IndexConfiguration | None
    builder: DocumentBuilder | None
    number_of_shards: int
    number_of_replicas: int
    max_document_size: int
    nparams: dict[str, Any]

    _client: SyncElasticsearch
    _init: bool

    def __init__(
        self,
        hosts: str | list[str] | None = None,
        cloud_id: str | None = None,
        api_key: str | list[str] | None = None,
        basic_auth: str | list[str] | None = None,
        bearer_auth: str | None = None,
        headers: dict[str, str] | None = None,
        verify_certs: bool | None = None,
        ca_certs: str | None = None,
        request_timeout: float | None = None,
        configuration: IndexConfiguration | None = None,
        builder: DocumentBuilder | None = None,
        number_of_shards: int = 1,
        number_of_replicas: int = 0,
        max_document_size: int = DEFAULT_MAX_DOCUMENT_SIZE,
        client: SyncElasticsearch | None = None,
        nparams: dict[str, Any] = dict(),
        **kwargs,
    ):
        """Initialize.

        Args:
            hosts:
                Elasticsearch hosts.
            cloud_id:
                Elasticsearch cloud id.
            api_key:
                Elasticsearch api key.
            basic_auth:
                Elasticsearch basic auth as [username, password].
            bearer_auth:
                Elasticsearch bearer auth.
            headers:
                Elasticsearch http headers.
            verify_certs:
                Elasticsearch verify certs.
            ca_certs:
                Elasticsearch ca certs.
            request_timeout:
                Request timeout in seconds.
            configuration:
                Index configuration. Defaults to the
                configuration of the bound component.
            builder:
                Document builder. Defaults to the
                builder of the bound component.
            number_of_shards:
                Shards for indexes created on demand.
            number_of_replicas:
                Replicas for indexes created on demand.
            max_document_size:
                Advisory maximum document size in bytes.
            client:
                Prebuilt Elasticsearch client.
            nparams:
                Native parameters to Elasticsearch client.
        """
        self.hosts = hosts
        self.cloud_id = cloud_id
        self.api_key = api_key
        self.basic_auth = basic_auth
        self.bearer_auth = bearer_auth
        self.headers = headers
        self.verify_certs = verify_certs
        self.ca_certs = ca_certs
        self.request_timeout = request_timeout

        self.configuration = configuration
        self.builder = builder
        self.number_of_shards = number_of_shards
        self.number_of_replicas = number_of_replicas
        self.max_document_size = max_document_size
        self.nparams = nparams

        self._init = False
        if client is not None:
            self._client = client
            self._init = True

    @property
    def client(self) -> SyncElasticsearch:
        if not self._init:
            self._client = SyncElasticsearch(**self._get_client_params())
            self._init = True
        return self._client

    def __setup__(self, context: Context | None = None) -> None:
        _ = self.client

    def _get_client_params(self) -> dict:
        def _add_if_not_none(key, value):
            return {key: value} if value is not None else {}

        def _convert_if_list(value):
            return tuple(value) if isinstance(value, list) else value

        args = {
            **_add_if_not_none("hosts", self.hosts),
            **_add_if_not_none("cloud_id", self.cloud_id),
            **_add_if_not_none("api_key", _convert_if_list(self.api_key)),
            **_add_if_not_none(
                "basic_auth", _convert_if_list(self.basic_auth)
            ),
            **_add_if_not_none("bearer_auth", self.bearer_auth),
            **_add_if_not_none("headers", self.headers),
            **_add_if_not_none("verify_certs", self.verify_certs),
            **_add_if_not_none("ca_certs", self.ca_certs),
            **_add_if_not_none("request_timeout", self.request_timeout),
        }

        if self.nparams is not None:
            args.update(self.nparams)

        return args

    def _get_configuration(self) -> IndexConfiguration:
        if self.configuration is not None:
            return self.configuration
        component = getattr(self, "__component__", None)
        configuration = getattr(component, "configuration", None)
        return configuration or IndexConfiguration()

    def _get_builder(self) -> DocumentBuilder:
        if self.builder is not None:
            return self.builder
        component = getattr(self, "__component__", None)
        builder = getattr(component, "builder", None)
        return builder or DocumentBuilder()

    def _get_resolver(self) -> IndexNameResolver:
        # Variant is read on every call.
        return IndexNameResolver(self._get_configuration().get_index_variant())

    def _get_result_converter(self) -> ResultConverter:
        return ResultConverter(
            resolver=self._get_resolver(),
            builder=self._get_builder(),
        )

    def _has_index(self, index: str) -> bool:
        return bool(self.client.indices.exists(index=index))

    def find_or_make_index(self, index: str) -> bool:
        """Create the index if it does not exist.

        Returns:
            A value indicating whether the index was created.
        """
        try:
            if self._has_index(index):
                return False
            args = OperationConverter.convert_create_index(
                index=index,
                number_of_shards=self.number_of_shards,
                number_of_replicas=self.number_of_replicas,
            )
            self.client.indices.create(**args)
        except ApiError as e:
            if e.error == "resource_already_exists_exception":
                return False
            raise IndexConfigurationError(
                f'Failed to create index "{index}": {e}', index=index
            ) from e
        except TransportError as e:
            raise IndexConfigurationError(
                f'Failed to create index "{index}": {e}', index=index
            ) from e
        logger.info("Created index %s", index)
        return True

    def update_index_mapping(self, index: str, fields: list[Field]) -> None:
        for field in fields:
            FieldValidator.validate(field.name)
        args = OperationConverter.convert_put_mapping(index, fields)
        try:
            self.client.indices.put_mapping(**args)
        except EngineError as e:
            raise IndexConfigurationError(
                f'Failed to update mapping of index "{index}": {e}',
                index=index,
            ) from e
        logger.info(
            "Updated mapping of index %s with %d fields", index, len(fields)
        )

    def add_document(
        self,
        document: Document,
        **kwargs: Any,
    ) -> Response[str | None]:
        index = self._get_resolver().resolve(document.source)
        self.find_or_make_index(index)
        args = OperationConverter.convert_index(
            index=index,
            document=document,
            builder=self._get_builder(),
        )
        try:
            resp = self.client.index(**args)
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to index document with ID "{document.id}": {e}'
            ) from e
        return Response(result=resp.get("_id"), native=dict(result=resp))

    def add_documents(
        self,
        documents: list[Any],
        **kwargs: Any,
    ) -> Response[list[str]]:
        if not documents:
            return Response(result=[])
        grouped = Helper.group_documents(documents, self._get_resolver())
        builder = self._get_builder()
        ids: list[str] = []
        native: list = []
        for index, group in grouped.items():
            self.find_or_make_index(index)
            args = OperationConverter.convert_bulk_index(index, group, builder)
            result, resp = self._run_bulk(args, "index", index, len(group))
            ids.extend(result.ids)
            native.append(resp)
        return Response(result=ids, native=dict(result=native))

    def remove_document(
        self,
        document: Document,
        **kwargs: Any,
    ) -> Response[str | None]:
        index = self._get_resolver().resolve(document.source)
        args = OperationConverter.convert_delete(index=index, id=document.id)
        try:
            resp = self.client.delete(**args)
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to remove document with ID "{document.id}": {e}'
            ) from e
        return Response(result=resp.get("_id"), native=dict(result=resp))

    def remove_documents(
        self,
        documents: list[Any],
        **kwargs: Any,
    ) -> Response[list[str]]:
        if not documents:
            return Response(result=[])
        grouped = Helper.group_documents(documents, self._get_resolver())
        ids: list[str] = []
        native: list = []
        for index, group in grouped.items():
            args = OperationConverter.convert_bulk_delete(index, group)
            result, resp = self._run_bulk(args, "delete", index, len(group))
            ids.extend(result.ids)
            native.append(resp)
        return Response(result=ids, native=dict(result=native))

    def _run_bulk(
        self,
        args: dict,
        action: str,
        index: str,
        count: int,
    ) -> tuple[BulkResult, Any]:
        logger.debug(
            "Bulk %s of %d documents in %s",
            action,
            count,
            index,
        )
        try:
            resp = self.client.bulk(**args)
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to bulk {action} documents in index "{index}": {e}'
            ) from e
        result = ResultConverter.convert_bulk(resp, action=action, index=index)
        if not result.succeeded:
            logger.warning(
                "Bulk %s in %s rejected %d of %d items",
                action,
                index,
                len(result.errors),
                count,
            )
            raise IndexingServiceError(
                f"Bulk {action} failed with errors: "
                f"{', '.join(result.get_reasons())}",
                result=result,
            )
        return result, resp

    def remove_all_documents(
        self,
        index: str,
        **kwargs: Any,
    ) -> Response[int]:
        nindex = self._get_resolver().resolve(index)
        try:
            if not self._has_index(nindex):
                return Response(result=0)
            resp = self.client.delete_by_query(
                **OperationConverter.convert_delete_all(nindex)
            )
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to remove all documents from index "{nindex}": {e}'
            ) from e
        return Response(
            result=resp.get("deleted", 0), native=dict(result=resp)
        )

    def get_document(
        self,
        id: str,
        **kwargs: Any,
    ) -> Response[Document | None]:
        try:
            resp = self.client.search(
                **OperationConverter.convert_get_document(id)
            )
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to get document with ID "{id}": {e}'
            ) from e
        documents = self._get_result_converter().convert_hits(resp)
        result = documents[0] if documents else None
        return Response(result=result, native=dict(result=resp))

    def get_documents(
        self,
        ids: list[str],
        **kwargs: Any,
    ) -> Response[list[Document]]:
        if not ids:
            return Response(result=[])
        try:
            resp = self.client.search(
                **OperationConverter.convert_get_documents(ids)
            )
        except EngineError as e:
            raise IndexingServiceError(f"Failed to get documents: {e}") from e
        documents = self._get_result_converter().convert_hits(resp)
        return Response(result=documents, native=dict(result=resp))

    def list_documents(
        self,
        index: str,
        page_size: int | None = None,
        current_page: int = 0,
        **kwargs: Any,
    ) -> Response[PageResult]:
        nindex = self._get_resolver().resolve(index)
        try:
            if not self._has_index(nindex):
                return Response(
                    result=PageResult(
                        documents=[],
                        meta=PageMeta(
                            current=current_page,
                            size=page_size or 0,
                        ),
                    )
                )
            size = page_size if page_size is not None else DEFAULT_PAGE_SIZE
            resp = self.client.search(
                **OperationConverter.convert_list(
                    nindex, size=size, offset=current_page * size
                )
            )
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to list documents from index "{nindex}": {e}'
            ) from e
        result = self._get_result_converter().convert_page(
            resp,
            index=index,
            size=size,
            current=current_page,
        )
        return Response(result=result, native=dict(result=resp))

    def get_document_total(
        self,
        index: str,
        **kwargs: Any,
    ) -> Response[int]:
        nindex = self._get_resolver().resolve(index)
        try:
            if not self._has_index(nindex):
                return Response(result=0)
            resp = self.client.search(
                **OperationConverter.convert_total(nindex)
            )
        except EngineError as e:
            raise IndexingServiceError(
                f'Failed to get document total from index "{nindex}": {e}'
            ) from e
        return Response(
            result=ResultConverter.convert_total(resp),
            native=dict(result=resp),
        )

    def configure(
        self,
        **kwargs: Any,
    ) -> Response[dict[str, bool]]:
        configuration = self._get_configuration()
        resolver = self._get_resolver()
        results: dict[str, bool] = {}
        for index in configuration.get_indexes():
            nindex = resolver.resolve(index)
            fields = configuration.get_fields_for_index(index)
            for field in fields:
                FieldValidator.validate(field.name)
            try:
                self.find_or_make_index(nindex)
                self.update_index_mapping(nindex, fields)
            except IndexConfigurationError as e:
                raise IndexConfigurationError(
                    f'Failed to configure index "{index}": {e}', index=index
                ) from e
            results[index] = True
        return Response(result=results)

    def get_max_document_size(
        self,
        **kwargs: Any,
    ) -> Response[int]:
        return Response(result=self.max_document_size)

    def get_external_url(
        self,
        **kwargs: Any,
    ) -> Response[str | None]:
        return Response(result=None)

    def get_external_url_description(
        self,
        **kwargs: Any,
    ) -> Response[str | None]:
        return Response(result=None)

    def get_documentation_url(
        self,
        **kwargs: Any,
    ) -> Response[str | None]:
        return Response(result=DOCUMENTATION_URL)

    def close(
        self,
        **kwargs: Any,
    ) -> Response[None]:
        if self._init:
            self.client.close()
            self._init = False
        return Response(result=None)


class OperationConverter:
    @staticmethod
    def convert_create_index(
        index: str,
        number_of_shards: int = 1,
        number_of_replicas: int = 0,
    ) -> dict:
        return {
            "index": index,
            "settings": {
                "number_of_shards": number_of_shards,
                "number_of_replicas": number_of_replicas,
            },
        }

    @staticmethod
    def convert_put_mapping(index: str, fields: list[Field]) -> dict:
        return {
            "index": index,
            "properties": MappingHelper.convert_fields(fields),
        }

    @staticmethod
    def convert_index(
        index: str,
        document: Document,
        builder: DocumentBuilder,
    ) -> dict:
        return {
            "index": index,
            "id": document.id,
            "document": builder.normalise_document(document),
        }

    @staticmethod
    def convert_delete(index: str, id: str) -> dict:
        return {"index": index, "id": id}

    @staticmethod
    def convert_bulk_index(
        index: str,
        documents: list[Document],
        builder: DocumentBuilder,
    ) -> dict:
        operations: list[dict] = []
        for document in documents:
            operations.append({"index": {"_index": index, "_id": document.id}})
            operations.append(builder.normalise_document(document))
        return {"operations": operations}

    @staticmethod
    def convert_bulk_delete(index: str, documents: list[Document]) -> dict:
        operations = [
            {"delete": {"_index": index, "_id": document.id}}
            for document in documents
        ]
        return {"operations": operations}

    @staticmethod
    def convert_delete_all(index: str) -> dict:
        return {"index": index, "query": {"match_all": {}}}

    @staticmethod
    def convert_get_document(id: str) -> dict:
        return {"query": {"term": {"_id": id}}}

    @staticmethod
    def convert_get_documents(ids: list[str]) -> dict:
        return {"query": {"terms": {"_id": list(ids)}}, "size": len(ids)}

    @staticmethod
    def convert_list(index: str, size: int, offset: int) -> dict:
        return {
            "index": index,
            "query": {"match_all": {}},
            "from_": offset,
            "size": size,
            "track_total_hits": True,
        }

    @staticmethod
    def convert_total(index: str) -> dict:
        return {
            "index": index,
            "query": {"match_all": {}},
            "size": 0,
            "track_total_hits": True,
        }


class ResultConverter:
    resolver: IndexNameResolver
    builder: DocumentBuilder

    def __init__(
        self,
        resolver: IndexNameResolver,
        builder: DocumentBuilder,
    ) -> None:
        self.resolver = resolver
        self.builder = builder

    def convert_hit(self, hit: Any, source: str | None = None) -> Document:
        if source is None:
            source = self.resolver.unresolve(hit.get("_index", ""))
        return self.builder.create_from_dict(
            hit.get("_id"), source, hit.get("_source")
        )

    def convert_hits(self, response: Any) -> list[Document]:
        hits = response.get("hits", {}).get("hits", [])
        return [self.convert_hit(hit) for hit in hits]

    def convert_page(
        self,
        response: Any,
        index: str,
        size: int,
        current: int,
    ) -> PageResult:
        hits = response.get("hits", {}).get("hits", [])
        total = ResultConverter.convert_total(response)
        return PageResult(
            documents=[self.convert_hit(hit, source=index) for hit in hits],
            meta=PageMeta(
                current=current,
                total_pages=Helper.get_total_pages(total, size),
                total_results=total,
                size=size,
            ),
        )

    @staticmethod
    def convert_total(response: Any) -> int:
        total = response.get("hits", {}).get("total", 0)
        if isinstance(total, dict):
            return total.get("value", 0)
        return total or 0

    @staticmethod
    def convert_bulk(response: Any, action: str, index: str) -> BulkResult:
        ids: list[str] = []
        errors: list[BulkError] = []
        for item in response.get("items", []):
            status = item.get(action, {})
            error = status.get("error")
            if error:
                if isinstance(error, dict):
                    errors.append(
                        BulkError(
                            id=status.get("_id"),
                            type=error.get("type"),
                            reason=error.get("reason"),
                        )
                    )
                else:
                    errors.append(
                        BulkError(id=status.get("_id"), reason=str(error))
                    )
            elif status.get("_id") is not None:
                ids.append(status["_id"])
        if response.get("errors") and not errors:
            errors.append(BulkError(reason="Bulk response reported errors"))
        return BulkResult(index=index, ids=ids, errors=errors)
