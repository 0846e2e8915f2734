from __future__ import annotations

from typing import Any

import yaml
from pydantic import field_validator

from docindex.core import DataModel
from docindex.core.exceptions import LoadError

from ._models import Field, IndexConfig


class IndexConfiguration(DataModel):
    """Index configuration.

    Example YAML::

        index_variant: dev
        indexes:
          content:
            fields:
              title: {type: text}
              published: {type: date}
    """

    index_variant: str = ""
    """Environment or tenant prefix for physical index names."""

    indexes: dict[str, IndexConfig] = {}
    """Logical index configs keyed by name."""

    @field_validator("index_variant", mode="before")
    @classmethod
    def _convert_variant(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @field_validator("indexes", mode="before")
    @classmethod
    def _convert_indexes(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                name: config if config is not None else {}
                for name, config in value.items()
            }
        return value

    def get_index_variant(self) -> str:
        return self.index_variant or ""

    def get_indexes(self) -> dict[str, IndexConfig]:
        return self.indexes

    def get_fields_for_index(self, index: str) -> list[Field]:
        config = self.indexes.get(index)
        if config is None:
            return []
        return list(config.fields)

    @classmethod
    def from_yaml(
        cls,
        path: str,
        index_variant: str | None = None,
    ) -> IndexConfiguration:
        try:
            with open(path, "r") as file:
                data: Any = yaml.safe_load(file)
        except (OSError, yaml.YAMLError) as e:
            raise LoadError(f"Index configuration {path} not loaded") from e
        if data is None:
            data = dict()
        if not isinstance(data, dict):
            raise LoadError(f"Index configuration {path} must be a mapping")
        if index_variant is not None:
            data["index_variant"] = index_variant
        return cls.from_dict(data)
