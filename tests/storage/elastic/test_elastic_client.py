# type: ignore
import json

import elasticsearch7
import opensearchpy
import pytest
import responses

from lemon_core.core.exceptions import NotFoundError
from lemon_core.storage.elastic import Elastic6Service, parse_version
from lemon_core.storage.elastic._client import (
    ClientDialect,
    Es7Dialect,
    OpenSearchDialect,
    select_dialect,
)

ENDPOINT = "http://localhost:9200"

ES6_INFO = {
    "name": "node-0",
    "version": {"number": "6.8.23"},
    "tagline": "You Know, for Search",
}


@pytest.mark.parametrize(
    "version, doc_type, dialect, expected_type",
    [
        ("8.11", "_doc", ClientDialect, None),
        ("7.10", "_doc", Es7Dialect, None),
        ("7.1", "_doc", Es7Dialect, None),
        ("6.8", "item", Es7Dialect, "item"),
        ("6.2", "_doc", Es7Dialect, "_doc"),
        ("1.2", "_doc", OpenSearchDialect, None),
        ("2.13", "_doc", OpenSearchDialect, None),
    ],
)
def test_select_dialect(version, doc_type, dialect, expected_type):
    selected = select_dialect(parse_version(version), doc_type)
    assert type(selected) is dialect
    assert selected.doc_type == expected_type


def test_dialect_arguments():
    es8 = ClientDialect()
    assert es8.get("test", "A0", ["name"]) == {
        "index": "test",
        "id": "A0",
        "source_includes": ["name"],
    }
    assert es8.update("test", "A0", {"doc": {"a": 1}}) == {
        "index": "test",
        "id": "A0",
        "doc": {"a": 1},
    }
    assert es8.create_index("test", {"mappings": {}}) == {
        "index": "test",
        "mappings": {},
    }

    es6 = Es7Dialect("item")
    assert es6.get("test", "A0", ["name"]) == {
        "index": "test",
        "id": "A0",
        "doc_type": "item",
        "_source_includes": ["name"],
    }
    assert es6.update("test", "A0", {"doc": {"a": 1}}) == {
        "index": "test",
        "id": "A0",
        "doc_type": "item",
        "body": {"doc": {"a": 1}},
    }
    assert es6.create_index("test", {"mappings": {}}) == {
        "index": "test",
        "body": {"mappings": {}},
    }

    os2 = OpenSearchDialect("item")
    assert os2.search("test", {"size": 1}, "dfs_query_then_fetch") == {
        "index": "test",
        "body": {"size": 1},
        "search_type": "dfs_query_then_fetch",
    }


def test_client_params():
    es8 = Elastic6Service(
        endpoint=ENDPOINT,
        index_name="test",
        version="8.11",
        basic_auth=["user", "pass"],
    )
    assert es8._get_client_params() == {
        "hosts": ENDPOINT,
        "basic_auth": ("user", "pass"),
    }

    es7 = Elastic6Service(
        endpoint=ENDPOINT,
        index_name="test",
        version="7.10",
        api_key=["id", "key"],
        basic_auth=["user", "pass"],
        verify_certs=False,
    )
    assert es7._get_client_params() == {
        "hosts": ENDPOINT,
        "http_auth": ("user", "pass"),
        "verify_certs": False,
        "api_key": ("id", "key"),
    }
    assert isinstance(es7.client, elasticsearch7.Elasticsearch)

    # opensearch has no api key
    os2 = Elastic6Service(
        endpoint=ENDPOINT,
        index_name="test",
        version="2.13",
        api_key=["id", "key"],
        basic_auth="user:pass",
    )
    assert os2._get_client_params() == {
        "hosts": ENDPOINT,
        "http_auth": "user:pass",
    }
    assert isinstance(os2.client, opensearchpy.OpenSearch)


@responses.activate
def test_opensearch_without_product_header():
    service = Elastic6Service(
        endpoint=ENDPOINT,
        index_name="test",
        version="2.13",
        nparams={"connection_class": opensearchpy.RequestsHttpConnection},
    )
    responses.get(
        f"{ENDPOINT}/test/_doc/A0",
        json={
            "_index": "test",
            "_id": "A0",
            "_version": 1,
            "found": True,
            "_source": {"$id": "A0", "name": "a"},
        },
    )
    responses.get(
        f"{ENDPOINT}/test/_doc/XX",
        status=404,
        json={"_index": "test", "_id": "XX", "found": False},
    )
    responses.post(
        f"{ENDPOINT}/test/_update/A0",
        json={"_index": "test", "_id": "A0", "_version": 2},
    )

    result = service.read_item("A0")
    assert result == {"$id": "A0", "name": "a", "_id": "A0", "_version": 1}
    assert responses.calls[0].request.path_url == "/test/_doc/A0"

    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:XX"):
        service.read_item("XX")

    result = service.update_item("A0", None, {"count": 1})
    assert result == {"_id": "A0", "_version": 2}
    body = json.loads(responses.calls[-1].request.body)
    assert body["upsert"] == {"count": 1, "$id": "A0"}
    assert body["script"]["params"] == {"k0": "count", "v0": 1}
    assert "lang" not in body["script"]


@responses.activate
def test_elasticsearch6_typed_path():
    service = Elastic6Service(
        endpoint=ENDPOINT,
        index_name="test",
        doc_type="item",
        version="6.8",
        nparams={"connection_class": elasticsearch7.RequestsHttpConnection},
    )
    responses.get(f"{ENDPOINT}/", json=ES6_INFO)
    responses.get(
        f"{ENDPOINT}/test/item/A0",
        json={
            "_index": "test",
            "_type": "item",
            "_id": "A0",
            "_version": 1,
            "found": True,
            "_source": {"$id": "A0", "name": "a"},
        },
    )
    responses.put(
        f"{ENDPOINT}/test/item/A0/_create",
        status=409,
        json={
            "error": {
                "type": "version_conflict_engine_exception",
                "reason": "[item][A0]: version conflict",
            },
            "status": 409,
        },
    )
    responses.post(
        f"{ENDPOINT}/test/item/A0/_update",
        json={"_index": "test", "_type": "item", "_id": "A0", "_version": 2},
    )

    result = service.read_item("A0", ["name"])
    assert result == {"$id": "A0", "name": "a", "_id": "A0", "_version": 1}
    paths = [call.request.path_url for call in responses.calls]
    assert paths[0] == "/"
    assert paths[-1].startswith("/test/item/A0?")

    # existing item is updated instead
    result = service.save_item("A0", {"name": "b"})
    assert result == {"name": "b", "$id": "A0", "_id": "A0", "_version": 2}
    body = json.loads(responses.calls[-1].request.body)
    assert body == {"doc": {"name": "b"}}

    service.update_item("A0", None, {"count": 1})
    body = json.loads(responses.calls[-1].request.body)
    assert body["script"]["lang"] == "painless"
    assert responses.calls[-1].request.path_url == "/test/item/A0/_update"
