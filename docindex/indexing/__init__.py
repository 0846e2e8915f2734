from docindex.core.exceptions import (
    BadRequestError,
    IndexConfigurationError,
    IndexingServiceError,
    InvalidFieldError,
    LoadError,
)

from ._builder import DocumentBuilder
from ._configuration import IndexConfiguration
from ._environment import create_service, load_environment
from ._helper import FieldValidator, IndexNameResolver, MappingHelper
from ._models import (
    BulkError,
    BulkResult,
    Document,
    Field,
    FieldType,
    IndexConfig,
    PageMeta,
    PageResult,
)
from .component import IndexingService

__all__ = [
    "BadRequestError",
    "BulkError",
    "BulkResult",
    "Document",
    "DocumentBuilder",
    "Field",
    "FieldType",
    "FieldValidator",
    "IndexConfig",
    "IndexConfiguration",
    "IndexConfigurationError",
    "IndexNameResolver",
    "IndexingService",
    "IndexingServiceError",
    "InvalidFieldError",
    "LoadError",
    "MappingHelper",
    "PageMeta",
    "PageResult",
    "create_service",
    "load_environment",
]
