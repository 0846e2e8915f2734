"""
Builds an indexing service from environment variables.
"""

from __future__ import annotations

import os

from dotenv import dotenv_values

from docindex.core.exceptions import LoadError

from ._builder import DocumentBuilder
from ._configuration import IndexConfiguration
from .component import IndexingService

ENDPOINT_VARIABLE = "ELASTICSEARCH_ENDPOINT"
USERNAME_VARIABLE = "ELASTICSEARCH_USERNAME"
PASSWORD_VARIABLE = "ELASTICSEARCH_PASSWORD"
INDEX_PREFIX_VARIABLE = "ELASTICSEARCH_INDEX_PREFIX"


def load_environment(path: str | None = ".env") -> dict[str, str]:
    """Load variables from an ENV file overlaid by the process environment.

    Args:
        path:
            ENV file path, defaults to ".env".
            A missing file is ignored.

    Returns:
        Variables with non-empty values.
    """
    env: dict[str, str] = {}
    if path is not None and os.path.isfile(path):
        for key, value in dotenv_values(path).items():
            if value:
                env[key] = value
    for key, value in os.environ.items():
        if value:
            env[key] = value
    return env


def get_provider_parameters(env: dict[str, str]) -> dict:
    host = env.get(ENDPOINT_VARIABLE)
    if not host:
        raise LoadError(
            "The Elasticsearch provider requires environment variables: "
            f"{ENDPOINT_VARIABLE}"
        )
    parameters: dict = {"hosts": [host]}
    username = env.get(USERNAME_VARIABLE)
    password = env.get(PASSWORD_VARIABLE)
    if username and password:
        parameters["basic_auth"] = [username, password]
    return parameters


def create_service(
    configuration: IndexConfiguration | dict | None = None,
    builder: DocumentBuilder | None = None,
    env: dict[str, str] | None = None,
    path: str | None = ".env",
    **kwargs,
) -> IndexingService:
    """Create an indexing service bound to the Elasticsearch provider.

    Args:
        configuration:
            Index configuration. Its index variant is replaced
            by ELASTICSEARCH_INDEX_PREFIX when that is set.
        builder:
            Document builder.
        env:
            Variables to use instead of loading them.
        path:
            ENV file path used when env is not given.

    Returns:
        Indexing service.
    """
    if env is None:
        env = load_environment(path)
    if isinstance(configuration, dict):
        configuration = IndexConfiguration.from_dict(configuration)
    configuration = configuration or IndexConfiguration()
    variant = env.get(INDEX_PREFIX_VARIABLE)
    if variant:
        configuration = configuration.copy(update={"index_variant": variant})
    return IndexingService(
        configuration=configuration,
        builder=builder,
        __provider__=dict(
            type="elasticsearch",
            parameters=get_provider_parameters(env),
        ),
        **kwargs,
    )
