"""
Native clients of each engine generation.

The Elasticsearch 8 client takes the bodies as keyword arguments and
refuses servers without the `X-Elastic-Product` header. Engines
before 8.x go through the 7.x client and OpenSearch through its own
client. Both take the body as `body`, and on 6.x the document type
is a segment of the path.
"""

from __future__ import annotations

__all__ = [
    "CLIENT_ERRORS",
    "LEGACY_ERRORS",
    "ClientDialect",
    "Es7Dialect",
    "LegacyDialect",
    "OpenSearchDialect",
    "select_dialect",
]

from typing import Any

import elasticsearch7
import opensearchpy
from elasticsearch import ApiError, AsyncElasticsearch, Elasticsearch
from elasticsearch7.exceptions import TransportError as Es7TransportError
from opensearchpy.exceptions import TransportError as OsTransportError

from ._models import ParsedVersion
from ._version import is_old_es6

LEGACY_ERRORS = (Es7TransportError, OsTransportError)
CLIENT_ERRORS = (ApiError, *LEGACY_ERRORS)


def _not_none(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def _as_tuple(value: Any) -> Any:
    return tuple(value) if isinstance(value, list) else value


class ClientDialect:
    """Arguments of the Elasticsearch 8 client."""

    name = "elasticsearch"

    doc_type: str | None

    def __init__(self, doc_type: str | None = None):
        self.doc_type = doc_type

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.doc_type})"

    def new_client(self, params: dict) -> Any:
        return Elasticsearch(**params)

    def new_aclient(self, params: dict) -> Any:
        return AsyncElasticsearch(**params)

    def client_params(
        self,
        hosts: str,
        api_key: Any = None,
        basic_auth: Any = None,
        verify_certs: bool | None = None,
        ca_certs: str | None = None,
    ) -> dict:
        return {"hosts": hosts} | _not_none(
            api_key=_as_tuple(api_key),
            basic_auth=_as_tuple(basic_auth),
            verify_certs=verify_certs,
            ca_certs=ca_certs,
        )

    def create_index(self, index: str, payload: dict) -> dict:
        return {"index": index, **payload}

    def create(self, index: str, id: str, document: dict) -> dict:
        return {"index": index, "id": id, "document": document}

    def index(self, index: str, document: dict) -> dict:
        return {"index": index, "document": document}

    def get(self, index: str, id: str, includes: list | None = None) -> dict:
        args: dict[str, Any] = {"index": index, "id": id}
        if includes:
            args["source_includes"] = includes
        return args

    def delete(self, index: str, id: str) -> dict:
        return {"index": index, "id": id}

    def update(self, index: str, id: str, body: dict) -> dict:
        return {"index": index, "id": id, **body}

    def search(
        self, index: str, body: dict, search_type: str | None = None
    ) -> dict:
        args: dict[str, Any] = {"index": index, "body": body}
        if search_type:
            args["search_type"] = search_type
        return args


class LegacyDialect(ClientDialect):
    """Arguments of the 7.x style clients."""

    def _typed(self, args: dict) -> dict:
        if self.doc_type:
            args["doc_type"] = self.doc_type
        return args

    def client_params(
        self,
        hosts: str,
        api_key: Any = None,
        basic_auth: Any = None,
        verify_certs: bool | None = None,
        ca_certs: str | None = None,
    ) -> dict:
        return {"hosts": hosts} | _not_none(
            http_auth=_as_tuple(basic_auth),
            verify_certs=verify_certs,
            ca_certs=ca_certs,
        )

    def create_index(self, index: str, payload: dict) -> dict:
        return {"index": index, "body": payload}

    def create(self, index: str, id: str, document: dict) -> dict:
        return self._typed({"index": index, "id": id, "body": document})

    def index(self, index: str, document: dict) -> dict:
        return self._typed({"index": index, "body": document})

    def get(self, index: str, id: str, includes: list | None = None) -> dict:
        args = self._typed({"index": index, "id": id})
        if includes:
            args["_source_includes"] = includes
        return args

    def delete(self, index: str, id: str) -> dict:
        return self._typed({"index": index, "id": id})

    def update(self, index: str, id: str, body: dict) -> dict:
        return self._typed({"index": index, "id": id, "body": body})

    def search(
        self, index: str, body: dict, search_type: str | None = None
    ) -> dict:
        args = self._typed({"index": index, "body": body})
        if search_type:
            args["search_type"] = search_type
        return args


class Es7Dialect(LegacyDialect):
    """Elasticsearch 6.x and 7.x via the 7.x client."""

    name = "elasticsearch7"

    def new_client(self, params: dict) -> Any:
        return elasticsearch7.Elasticsearch(**params)

    def new_aclient(self, params: dict) -> Any:
        return elasticsearch7.AsyncElasticsearch(**params)

    def client_params(
        self,
        hosts: str,
        api_key: Any = None,
        basic_auth: Any = None,
        verify_certs: bool | None = None,
        ca_certs: str | None = None,
    ) -> dict:
        params = super().client_params(
            hosts, api_key, basic_auth, verify_certs, ca_certs
        )
        return params | _not_none(api_key=_as_tuple(api_key))


class OpenSearchDialect(LegacyDialect):
    """OpenSearch via opensearch-py, always type-less."""

    name = "opensearch"

    def __init__(self, doc_type: str | None = None):
        super().__init__(None)

    def new_client(self, params: dict) -> Any:
        return opensearchpy.OpenSearch(**params)

    def new_aclient(self, params: dict) -> Any:
        return opensearchpy.AsyncOpenSearch(**params)


def select_dialect(
    parsed: ParsedVersion, doc_type: str | None = None
) -> ClientDialect:
    """Select the client of the engine.

    Args:
        parsed:
            Parsed engine version.
        doc_type:
            Document type, kept in the path only before 7.x.

    Returns:
        `OpenSearchDialect` for OpenSearch, `Es7Dialect` for
        Elasticsearch before 8.x, else `ClientDialect`.
    """
    if parsed.engine == "os":
        return OpenSearchDialect()
    if parsed.engine == "es" and parsed.major < 8:
        return Es7Dialect(doc_type if is_old_es6(parsed) else None)
    return ClientDialect()
