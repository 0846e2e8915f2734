from __future__ import annotations

from typing import Any

__all__ = [
    "BaseError",
    "BadRequestError",
    "IndexConfigurationError",
    "IndexingServiceError",
    "InvalidFieldError",
    "LoadError",
    "NotSupportedError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class InvalidFieldError(BadRequestError):
    """Field name rejected before it reaches the engine."""

    field: str | None

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotSupportedError(BaseError):
    status_code = 415


class IndexConfigurationError(BaseError):
    """Index could not be created or its mapping updated."""

    status_code = 500

    index: str | None

    def __init__(self, message: str, index: str | None = None):
        super().__init__(message)
        self.index = index


class IndexingServiceError(BaseError):
    """Read, write or bulk call failed.

    For a bulk group that reported item errors, ``result`` holds the
    per-item outcome of that group.
    """

    status_code = 500

    result: Any

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result


class LoadError(Exception):
    status_code = 500
