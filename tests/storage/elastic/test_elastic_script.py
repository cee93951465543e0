# type: ignore
import pytest

from lemon_core.storage.elastic import (
    Elastic6Service,
    UpdateConverter,
    prepare_settings,
    prepare_update,
)


def test_update_without_increments():
    payload = prepare_update("$id", "A0", {"name": "alpha"})
    assert payload == {"doc": {"name": "alpha"}}
    assert prepare_update("$id", "A0", None, {}) == {"doc": {}}


@pytest.mark.parametrize(
    "version, lang",
    [("6.8", "painless"), ("7.10", None), ("2.13", None)],
)
def test_update_with_increments(version: str, lang: str | None):
    payload = prepare_update(
        "$id",
        "A0",
        {"$id": "A0", "name": "alpha"},
        {"count": 1, "tags": ["a"]},
        version,
    )
    script = payload["script"]
    assert script["source"].split("\n") == [
        "ctx._source[params.k0] = params.v0;",
        "if (ctx._source[params.k1] == null) { "
        "ctx._source[params.k1] = params.v1; "
        "} else { "
        "ctx._source[params.k1] += params.v1; "
        "}",
        "if (ctx._source[params.k2] == null) { "
        "ctx._source[params.k2] = new ArrayList(params.v2); "
        "} else { "
        "for (def v : params.v2) { ctx._source[params.k2].add(v); } "
        "}",
    ]
    assert script["params"] == {
        "k0": "name",
        "v0": "alpha",
        "k1": "count",
        "v1": 1,
        "k2": "tags",
        "v2": ["a"],
    }
    assert script.get("lang") == lang
    assert payload["upsert"] == {
        "$id": "A0",
        "name": "alpha",
        "count": 1,
        "tags": ["a"],
    }
    assert "doc" not in payload


def test_update_converter_only_increments():
    payload = UpdateConverter("id").convert_update("B0", None, {"n": 0.5})
    assert payload["script"]["params"] == {"k0": "n", "v0": 0.5}
    assert payload["upsert"] == {"n": 0.5, "id": "B0"}


@pytest.mark.parametrize("key", ["it's", "a\\b", "x'] = 1; ctx._source['y"])
def test_update_field_names_are_params(key: str):
    payload = prepare_update("$id", "A0", {key: "v"}, {key: 1}, "7.10")
    script = payload["script"]
    assert key not in script["source"]
    assert "'" not in script["source"]
    assert script["params"]["k0"] == key
    assert script["params"]["k1"] == key


def test_update_is_deterministic():
    args = ("$id", "A0", {"name": "a"}, {"count": 1, "tags": ["x"]}, "6.8")
    assert prepare_update(*args) == prepare_update(*args)


def test_prepare_settings_old_engine():
    settings = prepare_settings("_doc", "$id", "6.8")
    assert settings["settings"]["number_of_shards"] == 4
    assert settings["settings"]["number_of_replicas"] == 1
    analysis = settings["settings"]["analysis"]
    assert set(analysis["tokenizer"]) == {"hangul", "edge_30grams"}
    assert set(analysis["analyzer"]) == {
        "hangul",
        "autocomplete_case_insensitive",
        "autocomplete_case_sensitive",
    }
    assert analysis["analyzer"]["autocomplete_case_sensitive"]["filter"] == [
        "standard"
    ]
    mappings = settings["mappings"]["_doc"]
    templates = [list(t)[0] for t in mappings["dynamic_templates"]]
    assert templates == [
        "autocomplete",
        "autocomplete_qwerty",
        "string_id",
        "strings",
    ]
    assert mappings["dynamic_templates"][2]["string_id"]["match"] == "$id"
    assert "created_at" in mappings["properties"]


def test_prepare_settings_latest_engine():
    settings = prepare_settings("_doc", "id", "7.10", shards=2, replicas=0)
    assert settings["settings"]["number_of_shards"] == 2
    assert settings["settings"]["number_of_replicas"] == 0
    analysis = settings["settings"]["analysis"]
    assert analysis["analyzer"]["autocomplete_case_sensitive"]["filter"] == []
    mappings = settings["mappings"]
    assert "_doc" not in mappings
    assert mappings["dynamic_templates"][2]["string_id"]["match"] == "id"


def test_prepare_settings_time_series():
    settings = prepare_settings("_doc", "$id", "7.10", True)
    assert settings["settings"]["refresh_interval"] == "5s"
    properties = settings["mappings"]["properties"]
    assert properties["@timestamp"] == {"type": "date", "doc_values": True}
    assert properties["ip"] == {"type": "ip"}
    for key in ("@version", "created_at", "updated_at", "deleted_at"):
        assert key not in properties

    # also nested under the type
    settings = prepare_settings("_doc", "$id", "6.8", True)
    properties = settings["mappings"]["_doc"]["properties"]
    assert "@timestamp" in properties
    assert "created_at" not in properties


def test_populate_autocomplete_fields():
    service = Elastic6Service(
        endpoint="http://localhost:9200",
        index_name="test",
        autocomplete_fields=["name", "code", "none"],
    )
    body = service.populate_autocomplete_fields(
        {"name": "한글 이름", "code": "AB-12 x"}
    )
    assert body["_decomposed"] == {
        "name": ["ㅎㅏㄴㄱㅡㄹ ㅇㅣㄹㅡㅁ", "ㅎㅏㄴㄱㅡㄹㅇㅣㄹㅡㅁ"],
        "code": ["AB-12 x", "AB12x"],
    }
    assert body["_qwerty"] == {"name": "gksrmf dlfma"}
    assert body["name"] == "한글 이름"

    service = Elastic6Service(
        endpoint="http://localhost:9200", index_name="test"
    )
    assert service.populate_autocomplete_fields({"name": "x"}) == {
        "name": "x"
    }
