"""
CRUD and search service on Elasticsearch and OpenSearch.
"""

from __future__ import annotations

__all__ = ["Elastic6Service", "RetryOptions"]

import asyncio
import copy
import logging
import re
import time
from typing import Any, AsyncIterator, Iterator

from ...core import DataModelField, FrozenDataModel, NCall, Provider
from ...core.exceptions import BadRequestError, BaseError, NotFoundError
from ._client import CLIENT_ERRORS, ClientDialect, select_dialect
from ._errors import handler
from ._hangul import as_alphabet_key_strokes, as_jamo_sequence, is_hangul
from ._models import Elastic6Option, IndexInfo, ParsedVersion, SearchResult
from ._script import prepare_update
from ._settings import DECOMPOSED_FIELD, QWERTY_FIELD, prepare_settings
from ._version import is_latest_os2, is_old_es6, is_old_es71, parse_version


class RetryOptions(FrozenDataModel):
    """Retry of the search scanner on 429 responses.

    Attributes:
        do: Retry or raise at once.
        t: Wait before retry in milliseconds.
        max_retries: Maximum number of retries.
    """

    do: bool = True
    t: int = 5000
    max_retries: int = DataModelField(default=3, alias="maxRetries")


def _convert_error(name: str, e: Exception) -> BaseError:
    """Convert the client error into the status error.

    Unknown errors are raised as they are.
    """
    return handler(name, lambda error, _: error)(e)


def _body(response: Any) -> Any:
    return response.body if hasattr(response, "body") else response


def _status(response: Any) -> int:
    # the 7.x clients return the bare body
    meta = getattr(response, "meta", None)
    return getattr(meta, "status", 200)


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> str:
    return "" if value is None else f"{value}"


class Elastic6Service(Provider):
    """Basic CRUD and search on one index.

    Items are plain dicts. The id is stored in the source under
    `option.id_name` and used as the document id.
    """

    DECOMPOSED_FIELD = DECOMPOSED_FIELD
    QWERTY_FIELD = QWERTY_FIELD

    option: Elastic6Option
    api_key: str | list[str] | None
    basic_auth: str | list[str] | None
    verify_certs: bool | None
    ca_certs: str | None
    nparams: dict[str, Any]

    dialect: ClientDialect

    _client: Any
    _aclient: Any
    _init: bool
    _ainit: bool

    prepare_settings = staticmethod(prepare_settings)
    parse_version = staticmethod(parse_version)

    def __init__(
        self,
        option: Elastic6Option | dict | None = None,
        api_key: str | list[str] | None = None,
        basic_auth: str | list[str] | None = None,
        verify_certs: bool | None = None,
        ca_certs: str | None = None,
        nparams: dict[str, Any] = dict(),
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            option:
                Service options (endpoint, index_name, doc_type,
                id_name, time_series, version, autocomplete_fields).
                Options can also be passed as keyword arguments.
            api_key:
                Elasticsearch api key.
            basic_auth:
                Elasticsearch basic auth.
            verify_certs:
                Elasticsearch verify certs.
            ca_certs:
                Elasticsearch ca certs.
            nparams:
                Native parameters to Elasticsearch client.
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(logger=logger)
        self.option = Elastic6Option.build(option, **kwargs)
        self.api_key = api_key
        self.basic_auth = basic_auth
        self.verify_certs = verify_certs
        self.ca_certs = ca_certs
        self.nparams = nparams
        self.dialect = select_dialect(
            parse_version(self.option.version), self.option.doc_type
        )

        self._init = False
        self._ainit = False
        self._logger.info(
            "%s(%s/%s)...",
            self.__class__.__name__,
            self.option.index_name,
            self.option.id_name,
        )

    def hello(self) -> str:
        return f"elastic6-service:{self.option.index_name}:{self.version}"

    @property
    def client(self) -> Any:
        if not self._init:
            self._client = self.dialect.new_client(self._get_client_params())
            self._init = True
        return self._client

    @property
    def aclient(self) -> Any:
        if not self._ainit:
            self._aclient = self.dialect.new_aclient(
                self._get_client_params()
            )
            self._ainit = True
        return self._aclient

    def _get_client_params(self) -> dict:
        args = self.dialect.client_params(
            hosts=self.option.endpoint,
            api_key=self.api_key,
            basic_auth=self.basic_auth,
            verify_certs=self.verify_certs,
            ca_certs=self.ca_certs,
        )
        if self.nparams is not None:
            args.update(self.nparams)
        return args

    # VERSION
    @property
    def version(self) -> str:
        return self.option.version

    @property
    def parsed_version(self) -> ParsedVersion:
        return parse_version(self.option.version)

    def get_version(self) -> dict[str, int | None]:
        parsed = self.parsed_version
        return {"major": parsed.major, "minor": parsed.minor}

    @property
    def is_old_es6(self) -> bool:
        return is_old_es6(self.parsed_version)

    @property
    def is_old_es71(self) -> bool:
        return is_old_es71(self.parsed_version)

    @property
    def is_latest_os2(self) -> bool:
        return is_latest_os2(self.parsed_version)

    @property
    def is_open_search(self) -> bool:
        return self.parsed_version.engine == "os"

    @property
    def doc_type(self) -> str | None:
        # type-less since OpenSearch 2.x
        if self.is_latest_os2:
            return None
        return self.option.doc_type

    # PAYLOAD
    def populate_autocomplete_fields(self, body: dict) -> dict:
        """Add the analyzed copies of the autocomplete fields."""
        fields = self.option.autocomplete_fields
        if not fields:
            return body
        decomposed: dict[str, Any] = {}
        qwerty: dict[str, Any] = {}
        for field in fields:
            value = body.get(field)
            if not value:
                continue
            text = f"{value}"
            # users may omit spaces or hyphens while typing
            if is_hangul(text, True):
                jamo = as_jamo_sequence(text)
                decomposed[field] = [jamo, re.sub(r"[ -]", "", jamo)]
                qwerty[field] = as_alphabet_key_strokes(text)
            else:
                decomposed[field] = [text, re.sub(r"[ -]", "", text)]
        return body | {DECOMPOSED_FIELD: decomposed, QWERTY_FIELD: qwerty}

    def _prepare_create_index(self, settings: dict | None) -> dict:
        option = self.option
        settings = settings or prepare_settings(
            doc_type=option.doc_type,
            id_name=option.id_name,
            version=option.version,
            time_series=option.time_series,
        )
        payload = copy.deepcopy(settings)
        payload["settings"] = {
            "number_of_shards": 5,
            "number_of_replicas": 1,
        } | payload.get("settings", {})
        return payload

    def _prepare_save(self, id: str, item: dict) -> tuple[dict, dict]:
        id_name = self.option.id_name
        body = dict(item) | {id_name: id}
        document = self.populate_autocomplete_fields(dict(body))
        # `_id` is reserved in the source
        if id_name == "_id":
            document.pop(id_name, None)
        return body, document

    def _prepare_read(self, id: str, views: list | dict | None) -> dict:
        # keys of the dict are the fields
        includes = list(views) if views else None
        return self.dialect.get(self.option.index_name, id, includes)

    def _prepare_update(
        self, id: str, item: dict | None, increments: dict | None
    ) -> dict:
        payload = prepare_update(
            self.option.id_name, id, item, increments, self.option.version
        )
        return self.dialect.update(self.option.index_name, id, payload)

    def _prepare_search(self, body: dict, search_type: str | None) -> dict:
        if not body:
            raise BadRequestError("@body (SearchBody) is required")
        return self.dialect.search(self.option.index_name, body, search_type)

    def _convert_indices(self, response: Any) -> list[IndexInfo]:
        rows = _body(response)
        if not isinstance(rows, list):
            raise BadRequestError(f"@result is invalid - {rows}!")
        return [
            IndexInfo(
                pri=_as_int(row.get("pri")),
                rep=_as_int(row.get("rep")),
                docs_count=_as_int(row.get("docs.count")),
                docs_deleted=_as_int(row.get("docs.deleted")),
                health=_as_str(row.get("health")),
                index=_as_str(row.get("index")),
                status=_as_str(row.get("status")),
                uuid=_as_str(row.get("uuid")),
                pri_store_size=_as_str(row.get("pri.store.size")),
                store_size=_as_str(row.get("store.size")),
            )
            for row in rows
        ]

    def _convert_read(self, response: Any) -> dict:
        body = _body(response) or {}
        source = dict(body.get("_source") or {})
        source.pop(DECOMPOSED_FIELD, None)
        source.pop(QWERTY_FIELD, None)
        return source | {
            "_id": body.get("_id"),
            "_version": body.get("_version"),
        }

    def _convert_search(self, body: dict, response: Any) -> SearchResult:
        size = _as_int(body.get("size")) or 0
        raw = _body(response) or {}
        hits = raw.get("hits")
        if not isinstance(hits, dict):
            raise BadRequestError(f".hits (object) is required - hits:{hits}")
        total = hits.get("total")
        if isinstance(total, dict):
            total = total.get("value")
        items = hits.get("hits") or []
        last = None
        if size > 0 and len(items) == size:
            last = items[size - 1].get("sort")
        return SearchResult(
            total=total,
            list=[
                dict(hit.get("_source") or {})
                | {"_id": hit.get("_id"), "_score": hit.get("_score")}
                for hit in items
            ],
            last=last,
            aggregations=raw.get("aggregations"),
        )

    def _index_not_found(self, name: str, e: Exception) -> BaseError:
        error = _convert_error(name, e)
        if error.message.startswith("404 INDEX NOT FOUND"):
            return NotFoundError(
                f"404 NOT FOUND - index:{self.option.index_name}"
            )
        return error

    def _item_not_found(self, name: str, id: str, e: Exception) -> BaseError:
        error = _convert_error(name, e)
        if error.message.startswith("404 NOT FOUND"):
            return NotFoundError(f"404 NOT FOUND - id:{id}")
        return error

    def _create_failed(self, name: str, e: Exception) -> BaseError:
        error = _convert_error("create", e)
        if error.message.startswith("400 RESOURCE ALREADY EXISTS"):
            return BadRequestError(f"400 IN USE - index:{name}")
        return error

    def _mapping_not_found(self, name: str, e: Exception) -> BaseError:
        error = _convert_error("mapping", e)
        if error.message.startswith("404 INDEX NOT FOUND"):
            return NotFoundError(f"404 NOT FOUND - index:{name}")
        return error

    def _raise_unless_conflict(self, e: Exception) -> None:
        # existing item is updated instead
        error = _convert_error("save", e)
        if not error.message.startswith("409 VERSION CONFLICT ENGINE"):
            raise error from e

    def _update_failed(self, id: str, e: Exception) -> BaseError:
        error = _convert_error("update", e)
        message = error.message
        # missing item
        if message.startswith("404 DOCUMENT MISSING"):
            return NotFoundError(f"404 NOT FOUND - id:{id}")
        # field not updatable
        if message.startswith("400 REMOTE TRANSPORT"):
            return BadRequestError(f"400 INVALID FIELD - id:{id}")
        if message.startswith("404 NOT FOUND"):
            return NotFoundError(f"404 NOT FOUND - id:{id}")
        return error

    # INDEX
    def list_indices(self) -> list[IndexInfo]:
        self._logger.debug("- listIndices()")
        response = NCall(self.client.cat.indices, {"format": "json"}).invoke()
        return self._convert_indices(response)

    def find_index(self, name: str | None = None) -> IndexInfo | None:
        name = name or self.option.index_name
        self._logger.debug("- findIndex(%s)", name)
        for info in self.list_indices():
            if info.index == name:
                return info
        return None

    def create_index(self, settings: dict | None = None) -> dict:
        name = self.option.index_name
        payload = self._prepare_create_index(settings)
        self._logger.debug("> settings[%s] = %s", name, payload)
        call = NCall(
            self.client.indices.create,
            self.dialect.create_index(name, payload),
        )
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._create_failed(name, e) from e
        return {
            "status": _status(response),
            "index": name,
            "acknowledged": _body(response).get("shards_acknowledged"),
        }

    def destroy_index(self) -> dict:
        name = self.option.index_name
        self._logger.debug("- destroyIndex(%s)", name)
        call = NCall(self.client.indices.delete, {"index": name})
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("destroy", e) from e
        return {
            "status": _status(response),
            "index": name,
            "acknowledged": _body(response).get("acknowledged"),
        }

    def refresh_index(self) -> dict:
        name = self.option.index_name
        self._logger.debug("- refreshIndex(%s)", name)
        call = NCall(self.client.indices.refresh, {"index": name})
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("refresh", e) from e
        return _body(response)

    def flush_index(self) -> dict:
        name = self.option.index_name
        self._logger.debug("- flushIndex(%s)", name)
        call = NCall(self.client.indices.flush, {"index": name})
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("flush", e) from e
        return _body(response)

    def describe(self) -> dict:
        name = self.option.index_name
        self._logger.debug("- describe(%s)", name)
        call = NCall(self.client.indices.get_settings, {"index": name})
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("describe", e) from e
        settings = (_body(response).get(name) or {}).get("settings") or {}
        mappings = self.get_index_mapping(name)
        return {"settings": settings, "mappings": mappings}

    def get_index_mapping(self, name: str | None = None) -> dict:
        name = name or self.option.index_name
        call = NCall(self.client.indices.get_mapping, {"index": name})
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._mapping_not_found(name, e) from e
        return (_body(response).get(name) or {}).get("mappings") or {}

    # PUT
    def save_item(self, id: str, item: dict) -> dict:
        index = self.option.index_name
        self._logger.debug("- saveItem(%s)", id)
        body, document = self._prepare_save(id, item)
        call = NCall(
            self.client.create, self.dialect.create(index, id, document)
        )
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            self._raise_unless_conflict(e)
            document.pop(self.option.id_name, None)
            call = NCall(
                self.client.update,
                self.dialect.update(index, id, {"doc": document}),
            )
            response = call.invoke()
        result = _body(response)
        return body | {
            "_id": result.get("_id"),
            "_version": result.get("_version") or 0,
        }

    def push_item(self, item: dict) -> dict:
        body = dict(item)
        document = self.populate_autocomplete_fields(dict(body))
        call = NCall(
            self.client.index,
            self.dialect.index(self.option.index_name, document),
        )
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise _convert_error("index", e) from e
        result = _body(response)
        return body | {
            "_id": result.get("_id"),
            "_version": result.get("_version"),
        }

    # GET
    def read_item(self, id: str, views: list | dict | None = None) -> dict:
        self._logger.debug("- readItem(%s)", id)
        call = NCall(self.client.get, self._prepare_read(id, views))
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._item_not_found("read", id, e) from e
        return self._convert_read(response)

    # DELETE
    def delete_item(self, id: str) -> dict:
        self._logger.debug("- deleteItem(%s)", id)
        call = NCall(
            self.client.delete,
            self.dialect.delete(self.option.index_name, id),
        )
        try:
            response = call.invoke()
        except CLIENT_ERRORS as e:
            raise self._item_not_found("delete", id, e) from e
        result = _body(response)
        return {"_id": result.get("_id"), "_version": result.get("_version")}

    # UPDATE
    def update_item(
        self,
        id: str,
        item: dict | None,
        increments: dict | None = None,
    ) -> dict:
        self._logger.debug("- updateItem(%s)", id)
        args = self._prepare_update(id, item, increments)
        self._logger.debug("> params[%s] = %s", id, args)
        try:
            response = NCall(self.client.update, args).invoke()
        except CLIENT_ERRORS as e:
            raise self._update_failed(id, e) from e
        result = _body(response)
        return dict(item or {}) | {
            "_id": result.get("_id"),
            "_version": result.get("_version"),
        }

    # SEARCH
    def search_raw(self, body: dict, search_type: str | None = None) -> dict:
        args = self._prepare_search(body, search_type)
        self._logger.debug("- search(%s, %s)", args["index"], search_type)
        try:
            response = NCall(self.client.search, args).invoke()
        except CLIENT_ERRORS as e:
            raise _convert_error("search", e) from e
        return _body(response)

    def search(
        self, body: dict, search_type: str | None = None
    ) -> SearchResult:
        response = self.search_raw(body, search_type)
        return self._convert_search(body, response)

    def generate_search_result(
        self,
        body: dict,
        limit: int = -1,
        retry_options: RetryOptions | dict | None = None,
    ) -> Iterator[list[dict]]:
        """Scan the search result page by page with `search_after`.

        Args:
            body:
                Search body, sorted for a stable scan.
            limit:
                Maximum number of items, -1 for all.
            retry_options:
                Retry on 429 (too many requests).

        Yields:
            List of the items in each page.
        """
        retry = RetryOptions.model_validate(retry_options or {})
        body = dict(body) | {"size": _as_int(body.get("size")) or 100}
        count = 0
        while limit < 0 or count < limit:
            attempt = 0
            while True:
                try:
                    result = self.search(body)
                    break
                except BaseError as e:
                    if (
                        e.status_code != 429
                        or not retry.do
                        or attempt >= retry.max_retries
                    ):
                        raise
                    attempt += 1
                    self._logger.warning(
                        "! search[%s] retry(%s) = %s", body, attempt, e
                    )
                    time.sleep(retry.t / 1000)
            items = result.list
            if limit >= 0:
                items = items[: limit - count]
            if items:
                yield items
            count += len(items)
            if result.last is None:
                break
            body["search_after"] = result.last

    def search_all(
        self,
        body: dict,
        limit: int = -1,
        retry_options: RetryOptions | dict | None = None,
    ) -> list[dict]:
        items: list[dict] = []
        for page in self.generate_search_result(body, limit, retry_options):
            items.extend(page)
        return items

    # ASYNC
    async def alist_indices(self) -> list[IndexInfo]:
        call = NCall(self.aclient.cat.indices, {"format": "json"})
        response = await call.ainvoke()
        return self._convert_indices(response)

    async def afind_index(self, name: str | None = None) -> IndexInfo | None:
        name = name or self.option.index_name
        for info in await self.alist_indices():
            if info.index == name:
                return info
        return None

    async def acreate_index(self, settings: dict | None = None) -> dict:
        name = self.option.index_name
        payload = self._prepare_create_index(settings)
        call = NCall(
            self.aclient.indices.create,
            self.dialect.create_index(name, payload),
        )
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._create_failed(name, e) from e
        return {
            "status": _status(response),
            "index": name,
            "acknowledged": _body(response).get("shards_acknowledged"),
        }

    async def adestroy_index(self) -> dict:
        name = self.option.index_name
        call = NCall(self.aclient.indices.delete, {"index": name})
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("destroy", e) from e
        return {
            "status": _status(response),
            "index": name,
            "acknowledged": _body(response).get("acknowledged"),
        }

    async def arefresh_index(self) -> dict:
        name = self.option.index_name
        call = NCall(self.aclient.indices.refresh, {"index": name})
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("refresh", e) from e
        return _body(response)

    async def aflush_index(self) -> dict:
        name = self.option.index_name
        call = NCall(self.aclient.indices.flush, {"index": name})
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("flush", e) from e
        return _body(response)

    async def adescribe(self) -> dict:
        name = self.option.index_name
        call = NCall(self.aclient.indices.get_settings, {"index": name})
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._index_not_found("describe", e) from e
        settings = (_body(response).get(name) or {}).get("settings") or {}
        mappings = await self.aget_index_mapping(name)
        return {"settings": settings, "mappings": mappings}

    async def aget_index_mapping(self, name: str | None = None) -> dict:
        name = name or self.option.index_name
        call = NCall(self.aclient.indices.get_mapping, {"index": name})
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._mapping_not_found(name, e) from e
        return (_body(response).get(name) or {}).get("mappings") or {}

    async def asave_item(self, id: str, item: dict) -> dict:
        index = self.option.index_name
        body, document = self._prepare_save(id, item)
        call = NCall(
            self.aclient.create, self.dialect.create(index, id, document)
        )
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            self._raise_unless_conflict(e)
            document.pop(self.option.id_name, None)
            call = NCall(
                self.aclient.update,
                self.dialect.update(index, id, {"doc": document}),
            )
            response = await call.ainvoke()
        result = _body(response)
        return body | {
            "_id": result.get("_id"),
            "_version": result.get("_version") or 0,
        }

    async def apush_item(self, item: dict) -> dict:
        body = dict(item)
        document = self.populate_autocomplete_fields(dict(body))
        call = NCall(
            self.aclient.index,
            self.dialect.index(self.option.index_name, document),
        )
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise _convert_error("index", e) from e
        result = _body(response)
        return body | {
            "_id": result.get("_id"),
            "_version": result.get("_version"),
        }

    async def aread_item(
        self, id: str, views: list | dict | None = None
    ) -> dict:
        call = NCall(self.aclient.get, self._prepare_read(id, views))
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._item_not_found("read", id, e) from e
        return self._convert_read(response)

    async def adelete_item(self, id: str) -> dict:
        call = NCall(
            self.aclient.delete,
            self.dialect.delete(self.option.index_name, id),
        )
        try:
            response = await call.ainvoke()
        except CLIENT_ERRORS as e:
            raise self._item_not_found("delete", id, e) from e
        result = _body(response)
        return {"_id": result.get("_id"), "_version": result.get("_version")}

    async def aupdate_item(
        self,
        id: str,
        item: dict | None,
        increments: dict | None = None,
    ) -> dict:
        args = self._prepare_update(id, item, increments)
        try:
            response = await NCall(self.aclient.update, args).ainvoke()
        except CLIENT_ERRORS as e:
            raise self._update_failed(id, e) from e
        result = _body(response)
        return dict(item or {}) | {
            "_id": result.get("_id"),
            "_version": result.get("_version"),
        }

    async def asearch_raw(
        self, body: dict, search_type: str | None = None
    ) -> dict:
        args = self._prepare_search(body, search_type)
        try:
            response = await NCall(self.aclient.search, args).ainvoke()
        except CLIENT_ERRORS as e:
            raise _convert_error("search", e) from e
        return _body(response)

    async def asearch(
        self, body: dict, search_type: str | None = None
    ) -> SearchResult:
        response = await self.asearch_raw(body, search_type)
        return self._convert_search(body, response)

    async def agenerate_search_result(
        self,
        body: dict,
        limit: int = -1,
        retry_options: RetryOptions | dict | None = None,
    ) -> AsyncIterator[list[dict]]:
        retry = RetryOptions.model_validate(retry_options or {})
        body = dict(body) | {"size": _as_int(body.get("size")) or 100}
        count = 0
        while limit < 0 or count < limit:
            attempt = 0
            while True:
                try:
                    result = await self.asearch(body)
                    break
                except BaseError as e:
                    if (
                        e.status_code != 429
                        or not retry.do
                        or attempt >= retry.max_retries
                    ):
                        raise
                    attempt += 1
                    await asyncio.sleep(retry.t / 1000)
            items = result.list
            if limit >= 0:
                items = items[: limit - count]
            if items:
                yield items
            count += len(items)
            if result.last is None:
                break
            body["search_after"] = result.last

    async def asearch_all(
        self,
        body: dict,
        limit: int = -1,
        retry_options: RetryOptions | dict | None = None,
    ) -> list[dict]:
        items: list[dict] = []
        async for page in self.agenerate_search_result(
            body, limit, retry_options
        ):
            items.extend(page)
        return items
