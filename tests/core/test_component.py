import logging

import pytest

from docindex.core import (
    Component,
    Loader,
    Operation,
    Provider,
    Response,
    get_logger,
    operation,
    warn,
)
from docindex.core.exceptions import LoadError, NotSupportedError
from docindex.indexing import IndexingService
from docindex.indexing.providers.elasticsearch import Elasticsearch


class EchoProvider(Provider):
    def echo(self, value, suffix="!", **kwargs):
        return Response(result=f"{value}{suffix}", native={"raw": value})


class EchoComponent(Component):
    @operation()
    def echo(self, value: str, suffix: str | None = None, **kwargs):
        raise NotImplementedError

    @operation()
    def missing(self, **kwargs):
        return Response(result="fallback")


def test_operation_normalize():
    op = Operation.normalize(
        name="echo",
        args={
            "self": object(),
            "value": "a",
            "suffix": None,
            "kwargs": {"x": 1},
        },
    )
    assert op.name == "echo"
    assert op.args == {"value": "a", "x": 1}
    assert str(op) == 'echo value "a" x 1'


def test_operation_dispatch():
    component = EchoComponent(__provider__=EchoProvider())
    response = component.echo("hello")
    assert response.result == "hello!"
    assert response.native is None
    assert component.echo("hello", suffix="?").result == "hello?"


def test_operation_fallback_to_component():
    component = EchoComponent(__provider__=EchoProvider())
    assert component.missing().result == "fallback"


def test_operation_without_provider():
    component = EchoComponent()
    with pytest.raises(NotImplementedError):
        component.echo("hello")


def test_unpack():
    component = EchoComponent(__provider__=EchoProvider(), __unpack__=True)
    assert component.echo("hello") == "hello!"


def test_provider_not_supported():
    with pytest.raises(NotSupportedError):
        EchoProvider().__run__(Operation(name="unknown"))


def test_bind_provider_by_type():
    component = IndexingService(
        __provider__=dict(
            type="elasticsearch",
            parameters={"hosts": "http://localhost:9200"},
        )
    )
    assert isinstance(component.__provider__, Elasticsearch)
    assert component.__provider__.__component__ is component
    assert component.__provider__.hosts == "http://localhost:9200"


def test_load_class():
    path = "docindex.indexing.providers.elasticsearch"
    assert Loader.load_class(path, Provider) is Elasticsearch
    named = Loader.load_class(f"{path}:Elasticsearch", Provider)
    assert named is Elasticsearch
    with pytest.raises(LoadError):
        Loader.load_class("docindex.indexing.providers.unknown", Provider)
    with pytest.raises(LoadError):
        Loader.load_class("docindex.indexing._helper", Provider)


def test_logger(caplog):
    assert get_logger("indexing").name == "docindex.indexing"
    assert get_logger("docindex.core").name == "docindex.core"
    assert get_logger().name == "docindex"
    with caplog.at_level(logging.WARNING, logger="docindex"):
        warn("Index missing")
    assert "Index missing" in caplog.text
