"""
Default index settings and mappings.
"""

from __future__ import annotations

__all__ = ["DECOMPOSED_FIELD", "QWERTY_FIELD", "prepare_settings"]

from ._version import is_old_es6, parse_version

# analyzed copies of the autocomplete fields
DECOMPOSED_FIELD = "_decomposed"
QWERTY_FIELD = "_qwerty"

DATE_FORMAT = "strict_date_optional_time||epoch_millis"


def _prepare_mappings(id_name: str) -> dict:
    # the order of the dynamic templates matters
    return {
        "dynamic_templates": [
            {
                "autocomplete": {
                    "path_match": f"{DECOMPOSED_FIELD}.*",
                    "mapping": {
                        "type": "text",
                        "analyzer": "autocomplete_case_insensitive",
                        "search_analyzer": "standard",
                    },
                }
            },
            {
                "autocomplete_qwerty": {
                    "path_match": f"{QWERTY_FIELD}.*",
                    "mapping": {
                        "type": "text",
                        "analyzer": "autocomplete_case_sensitive",
                        "search_analyzer": "whitespace",
                    },
                }
            },
            {
                "string_id": {
                    "match_mapping_type": "string",
                    "match": id_name,
                    "mapping": {"type": "keyword", "ignore_above": 256},
                }
            },
            {
                "strings": {
                    "match_mapping_type": "string",
                    "mapping": {
                        "type": "text",
                        "analyzer": "hangul",
                        "search_analyzer": "hangul",
                        "fields": {
                            "keyword": {
                                "type": "keyword",
                                "ignore_above": 256,
                            }
                        },
                    },
                }
            },
        ],
        "properties": {
            "@version": {"type": "keyword", "index": False},
            "created_at": {"type": "date", "format": DATE_FORMAT},
            "updated_at": {"type": "date", "format": DATE_FORMAT},
            "deleted_at": {"type": "date", "format": DATE_FORMAT},
        },
    }


def prepare_settings(
    doc_type: str | None = "_doc",
    id_name: str | None = "$id",
    version: str | None = "6.8",
    time_series: bool = False,
    shards: int = 4,
    replicas: int = 1,
) -> dict:
    """Prepare the default settings to create the index.

    Args:
        doc_type:
            Document type, mappings are nested under it before 7.x.
        id_name:
            Id field, mapped as keyword.
        version:
            Engine version.
        time_series:
            Add `@timestamp` and `ip`, and drop the bookkeeping dates.
        shards:
            Number of shards.
        replicas:
            Number of replicas.

    Returns:
        Body of the create index request.
    """
    doc_type = doc_type or "_doc"
    old_engine = is_old_es6(parse_version(version or "6.8"))
    mappings = _prepare_mappings(id_name or "$id")
    settings: dict = {
        "settings": {
            "number_of_shards": shards,
            "number_of_replicas": replicas,
            "analysis": {
                "tokenizer": {
                    "hangul": {
                        "type": "seunjeon_tokenizer",
                        "decompound": True,
                        "deinflect": True,
                        "index_eojeol": True,
                        "pos_tagging": False,
                    },
                    "edge_30grams": {
                        "type": "edge_ngram",
                        "min_gram": 1,
                        "max_gram": 30,
                        "token_chars": [
                            "letter",
                            "digit",
                            "punctuation",
                            "symbol",
                        ],
                    },
                },
                "analyzer": {
                    "hangul": {
                        "type": "custom",
                        "tokenizer": "hangul",
                        "filter": ["lowercase"],
                    },
                    "autocomplete_case_insensitive": {
                        "type": "custom",
                        "tokenizer": "edge_30grams",
                        "filter": ["lowercase"],
                    },
                    "autocomplete_case_sensitive": {
                        "type": "custom",
                        "tokenizer": "edge_30grams",
                        # standard filter was removed in 7.x
                        "filter": ["standard"] if old_engine else [],
                    },
                },
            },
        },
        "mappings": {doc_type: mappings} if old_engine else mappings,
    }

    if time_series:
        settings["settings"]["refresh_interval"] = "5s"
        properties = mappings["properties"]
        properties["@timestamp"] = {"type": "date", "doc_values": True}
        properties["ip"] = {"type": "ip"}
        for key in ("@version", "created_at", "updated_at", "deleted_at"):
            properties.pop(key, None)
    return settings
