import pytest

from docindex.indexing import (
    Field,
    IndexConfiguration,
    IndexingService,
    LoadError,
    create_service,
    load_environment,
)
from docindex.indexing.providers.elasticsearch import Elasticsearch

from ._data import configuration


def test_configuration_from_dict():
    config = IndexConfiguration.from_dict(configuration)
    assert config.get_index_variant() == "dev"
    assert list(config.get_indexes().keys()) == ["news", "blog"]
    assert config.get_fields_for_index("news") == [
        Field(name="title", options={"type": "text"}),
        Field(name="published", options={"type": "date"}),
        Field(name="tags", options={"type": "keyword"}),
        Field(name="summary", options={}),
    ]
    assert [f.name for f in config.get_fields_for_index("blog")] == [
        "title",
        "views",
    ]
    assert config.get_fields_for_index("missing") == []


def test_configuration_defaults():
    config = IndexConfiguration()
    assert config.get_index_variant() == ""
    assert config.get_indexes() == {}
    config = IndexConfiguration(index_variant=None, indexes={"a": None})
    assert config.get_index_variant() == ""
    assert config.get_fields_for_index("a") == []


def test_configuration_from_yaml(tmp_path):
    path = tmp_path / "indexes.yaml"
    path.write_text(
        "index_variant: staging\n"
        "indexes:\n"
        "  news:\n"
        "    fields:\n"
        "      title:\n"
        "      published: {type: date}\n"
    )
    config = IndexConfiguration.from_yaml(str(path))
    assert config.get_index_variant() == "staging"
    assert config.get_fields_for_index("news") == [
        Field(name="title"),
        Field(name="published", options={"type": "date"}),
    ]
    config = IndexConfiguration.from_yaml(str(path), index_variant="qa")
    assert config.get_index_variant() == "qa"


def test_configuration_from_yaml_errors(tmp_path):
    with pytest.raises(LoadError):
        IndexConfiguration.from_yaml(str(tmp_path / "missing.yaml"))
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(LoadError):
        IndexConfiguration.from_yaml(str(path))


def test_load_environment(tmp_path, monkeypatch):
    path = tmp_path / ".env"
    path.write_text(
        "ELASTICSEARCH_ENDPOINT=http://file:9200\n"
        "ELASTICSEARCH_INDEX_PREFIX=file\n"
    )
    monkeypatch.setenv("ELASTICSEARCH_INDEX_PREFIX", "process")
    env = load_environment(str(path))
    assert env["ELASTICSEARCH_ENDPOINT"] == "http://file:9200"
    assert env["ELASTICSEARCH_INDEX_PREFIX"] == "process"


def test_load_environment_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv("ELASTICSEARCH_ENDPOINT", "http://env:9200")
    env = load_environment(str(tmp_path / "missing.env"))
    assert env["ELASTICSEARCH_ENDPOINT"] == "http://env:9200"


def test_create_service():
    service = create_service(
        configuration=configuration,
        env={
            "ELASTICSEARCH_ENDPOINT": "http://localhost:9200",
            "ELASTICSEARCH_USERNAME": "elastic",
            "ELASTICSEARCH_PASSWORD": "secret",
            "ELASTICSEARCH_INDEX_PREFIX": "test",
        },
    )
    assert isinstance(service, IndexingService)
    provider = service.__provider__
    assert isinstance(provider, Elasticsearch)
    assert provider.hosts == ["http://localhost:9200"]
    assert provider._get_client_params()["basic_auth"] == (
        "elastic",
        "secret",
    )
    assert service.configuration.get_index_variant() == "test"
    assert service.environmentize_index("news") == "test_news"


def test_create_service_without_credentials():
    service = create_service(
        env={"ELASTICSEARCH_ENDPOINT": "http://localhost:9200"},
    )
    params = service.__provider__._get_client_params()
    assert "basic_auth" not in params
    assert service.environmentize_index("news") == "news"


def test_create_service_requires_endpoint():
    with pytest.raises(LoadError) as exc:
        create_service(env={"ELASTICSEARCH_USERNAME": "elastic"})
    assert "ELASTICSEARCH_ENDPOINT" in str(exc.value)
