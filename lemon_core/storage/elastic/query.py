"""
Simple and autocomplete search on the index of `Elastic6Service`.

The simple search takes flat parameters like `{"type": "account",
"$limit": 10, "$O": "!created_at"}` and builds the query string
search from them.
"""

from __future__ import annotations

__all__ = ["Elastic6QueryService", "build_query_body"]

import json
import logging
import re
from typing import Any

from ...core import Provider
from ...core.exceptions import BadRequestError
from ._hangul import as_jamo_sequence
from ._models import Elastic6Option, SimpleSearchResult
from ._settings import DECOMPOSED_FIELD, QWERTY_FIELD
from .service import Elastic6Service

_QUOTED_CHARS = (" ", "\n", ":", "\\", "#", "^")


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _escape(value: Any) -> Any:
    """Escape the value of the query string term.

    Comma separated values are split into the list.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value == "":
        return '""'
    if not isinstance(value, str):
        return value
    if value.startswith("(") and value.endswith(")"):
        return value
    if value.startswith('"') and value.endswith('"'):
        return value
    if value.find(",") > 0:
        return [v.strip() for v in value.split(",")]
    if any(c in value for c in _QUOTED_CHARS):
        value = re.sub(r"([\"'])", r"\\\1", value)
        return f'"{value}"'
    return value


def _split(value: Any) -> list[str]:
    return [v.strip() for v in f"{value}".split(",") if v.strip()]


def _as_source(value: Any) -> Any:
    if value == "*" or not isinstance(value, str):
        return value
    includes: list[str] = []
    excludes: list[str] = []
    for name in _split(value):
        if name.startswith("!"):
            excludes.append(name[1:])
        else:
            includes.append(name)
    return {"includes": includes, "excludes": excludes}


def build_query_body(param: dict) -> dict:
    """Build the search body from the simple parameters.

    Args:
        param:
            Fields to match, with the special keys.
            `$query` is the query clause and `$Q` the whole body
            or the raw query string. `$limit` and `$page` page
            the result. `$A` lists the terms to aggregate, with
            an optional `:size`. `$O` lists the sort fields, `!`
            for descending. `$H` lists the fields to highlight.
            `$source` lists the fields to return, `!` to exclude.
            `$exists` lists the fields which must exist, `!` for
            missing. Keys starting with `!` negate the match, and
            keys starting with `#` add the field to return. Keys
            starting with `_` are ignored.

    Returns:
        Search body.
    """
    query: dict | None = None
    source: Any = None
    page = -1
    limit = -1
    aggs = ""
    orders = ""
    highlights = ""
    terms: list[str] = []

    for key, value in param.items():
        if key.startswith("_"):
            continue
        if key == "$query":
            clause = value if isinstance(value, dict) else json.loads(value)
            query = {"query": clause}
        elif key == "$limit":
            limit = _as_int(value, 0)
        elif key == "$page":
            page = _as_int(value, 0)
        elif key == "$Q":
            if not value:
                pass
            elif isinstance(value, dict):
                query = value
            elif isinstance(value, str):
                if value.startswith("{") and value.endswith("}"):
                    query = json.loads(value)
                else:
                    terms.append(f"({value})")
        elif key == "$A":
            aggs = f"{value}".strip()
        elif key == "$O":
            orders = f"{value}".strip()
        elif key == "$H":
            highlights = f"{value}".strip()
        elif key == "$source":
            source = _as_source(value)
        elif key in ("$exist", "$exists"):
            for name in _split(value):
                if name.startswith("!"):
                    terms.append(f"NOT _exists_:{name[1:]}")
                else:
                    terms.append(f"_exists_:{name}")
        elif key.startswith("!"):
            value = _escape(value)
            name = key[1:]
            if isinstance(value, list):
                values = " OR ".join(f"{_escape(v)}" for v in value)
                terms.append(f"{name}:(NOT ({values}))")
            elif value:
                terms.append(f"{name}:(NOT {value})")
            else:
                terms.append(f"_exists_:{name}")
        elif key.startswith("#"):
            source = source or {"includes": [], "excludes": []}
            if isinstance(source, dict) and "includes" in source:
                source["includes"].append(key[1:])
        elif value is None:
            pass
        else:
            value = _escape(value)
            if isinstance(value, list):
                values = " OR ".join(f"{_escape(v)}" for v in value)
                terms.append(f"{key}:({values})")
            else:
                terms.append(f"{key}:{value}")

    body: dict[str, Any] = dict(query or {})
    if query is None and terms:
        body = {"query": {"query_string": {"query": " AND ".join(terms)}}}

    if aggs:
        body["aggs"] = {}
        for name in _split(aggs):
            if name.find(":") > 0:
                field, size = name.split(":", 1)
                body["aggs"][field] = {
                    "terms": {"field": field, "size": int(size)}
                }
            else:
                body["aggs"][name] = {"terms": {"field": name}}
    if orders:
        sort = []
        for name in _split(orders):
            order = "desc" if name.startswith("!") else "asc"
            name = name[1:] if name.startswith("!") else name
            if name:
                sort.append({name: {"order": order}})
        if sort:
            body["sort"] = sort
    if highlights:
        fields = _split(highlights)
        body["highlight"] = {
            "fields": {name: {"type": "unified"} for name in fields}
        }
    if limit > -1:
        body["size"] = limit
        if page > -1:
            body["from"] = page * limit
    if source is not None:
        body["_source"] = source
    return body


class Elastic6QueryService(Provider):
    """Simple and autocomplete search on one index."""

    option: Elastic6Option
    service: Elastic6Service

    build_query_body = staticmethod(build_query_body)

    def __init__(
        self,
        option: Elastic6Option | dict | None = None,
        service: Elastic6Service | None = None,
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            option:
                Service options, see `Elastic6Service`.
            service:
                Service of the index, created from the options
                when not given.
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(logger=logger)
        self.service = service or Elastic6Service(
            option, logger=logger, **kwargs
        )
        self.option = self.service.option
        self._logger.info(
            "Elastic6QueryService(%s/%s)...",
            self.option.index_name,
            self.option.id_name,
        )

    def hello(self) -> str:
        return f"elastic6-query-service:{self.option.index_name}"

    def _prepare_query_all(
        self, id: str, limit: int | None, is_desc: bool | None
    ) -> dict:
        id_name = self.option.id_name
        param: dict[str, Any] = {id_name: id}
        if limit is not None:
            param["$limit"] = limit
        if is_desc is not None:
            param["$O"] = f"{'!' if is_desc else ''}{id_name}"
        return param

    def _prepare_simple(self, param: dict) -> dict:
        if param is None:
            raise BadRequestError("@param (SimpleSearchParam) is required")
        self._logger.debug("> param = %s", param)
        return build_query_body(param) or {"query": {"match_all": {}}}

    def _prepare_autocomplete(self, param: dict) -> tuple[str, str, dict]:
        if param is None:
            raise BadRequestError(
                "@param (AutocompleteSearchParam) is required"
            )
        queries = param.get("$query") or {}
        if not queries:
            raise BadRequestError(".query is required")
        if len(queries) > 1:
            raise BadRequestError(".query accepts only one property")
        field, query = next(iter(queries.items()))
        if not field or not query:
            raise BadRequestError(".query is invalid")
        if field not in self.option.autocomplete_fields:
            raise BadRequestError(".query has no autocomplete field")

        bool_query: dict[str, Any] = {
            "should": [
                {
                    "match": {
                        f"{DECOMPOSED_FIELD}.{field}": as_jamo_sequence(
                            query
                        )
                    }
                },
                {"match": {f"{QWERTY_FIELD}.{field}": query}},
            ],
            "minimum_should_match": 1,
        }
        filters = param.get("$filter")
        if filters:
            bool_query["filter"] = [
                {"term": {name: value}} for name, value in filters.items()
            ]
        size = _as_int(param.get("$limit"), 10)
        body = {
            "query": {"bool": bool_query},
            "size": size,
            "from": _as_int(param.get("$page"), 0) * size,
        }
        return field, query, body

    def _convert_hits(self, response: dict) -> tuple[list[dict], int]:
        hits = response.get("hits") or {}
        total = hits.get("total")
        if isinstance(total, dict):
            total = total.get("value")
        items = []
        for hit in hits.get("hits") or []:
            source = dict(hit.get("_source") or {})
            source["_id"] = source.get("_id") or hit.get("_id")
            source["_score"] = hit.get("_score")
            source.pop(DECOMPOSED_FIELD, None)
            source.pop(QWERTY_FIELD, None)
            items.append(source)
        return items, _as_int(total, 0)

    def _convert_simple(self, response: dict) -> SimpleSearchResult:
        items, total = self._convert_hits(response)
        result = SimpleSearchResult(list=items, total=total)
        aggregations = response.get("aggregations")
        if aggregations:
            result.aggregations = {}
            for field, agg in aggregations.items():
                if (agg.get("doc_count_error_upper_bound") or 0) > 0:
                    self._logger.warning(
                        "! aggregation[%s]: counts are not accurate", field
                    )
                if (agg.get("sum_other_doc_count") or 0) > 0:
                    self._logger.warning(
                        "! aggregation[%s]: some terms are skipped", field
                    )
                buckets = agg.get("buckets")
                if isinstance(buckets, list):
                    result.aggregations[field] = [
                        {"key": b.get("key"), "count": b.get("doc_count")}
                        for b in buckets
                    ]
        return result

    def _convert_autocomplete(
        self, param: dict, field: str, query: str, response: dict
    ) -> SimpleSearchResult:
        items, total = self._convert_hits(response)
        highlight = param.get("$highlight")
        if highlight:
            tag = highlight if isinstance(highlight, str) else "em"
            chars = [re.escape(c) for c in re.sub(r"\s", "", query)]
            pattern = re.compile(" *".join(chars), re.IGNORECASE)
            for item in items:
                target = f"{item.get(field) or ''}"
                match = pattern.search(target)
                if match:
                    target = (
                        f"{target[: match.start()]}"
                        f"<{tag}>{match.group(0)}</{tag}>"
                        f"{target[match.end():]}"
                    )
                item["_highlight"] = target
        return SimpleSearchResult(list=items, total=total)

    def query_all(
        self,
        id: str,
        limit: int | None = None,
        is_desc: bool | None = None,
    ) -> SimpleSearchResult:
        return self.search_simple(self._prepare_query_all(id, limit, is_desc))

    def search_simple(self, param: dict) -> SimpleSearchResult:
        body = self._prepare_simple(param)
        response = self.service.search_raw(body)
        return self._convert_simple(response)

    def search_autocomplete(self, param: dict) -> SimpleSearchResult:
        """Search as you type on one autocomplete field.

        Args:
            param:
                `$query` holds one `{field: text}`. `$filter` adds
                the terms to match. `$limit` and `$page` page the
                result. `$highlight` wraps the matched text in
                `_highlight` with the tag, `em` when true.
        """
        field, query, body = self._prepare_autocomplete(param)
        response = self.service.search_raw(body)
        return self._convert_autocomplete(param, field, query, response)

    async def aquery_all(
        self,
        id: str,
        limit: int | None = None,
        is_desc: bool | None = None,
    ) -> SimpleSearchResult:
        return await self.asearch_simple(
            self._prepare_query_all(id, limit, is_desc)
        )

    async def asearch_simple(self, param: dict) -> SimpleSearchResult:
        body = self._prepare_simple(param)
        response = await self.service.asearch_raw(body)
        return self._convert_simple(response)

    async def asearch_autocomplete(self, param: dict) -> SimpleSearchResult:
        field, query, body = self._prepare_autocomplete(param)
        response = await self.service.asearch_raw(body)
        return self._convert_autocomplete(param, field, query, response)
