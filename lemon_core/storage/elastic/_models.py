from __future__ import annotations

from typing import Any, List

from ...core import DataModel, DataModelField, FrozenDataModel
from ...core.exceptions import BadRequestError


class Elastic6Option(FrozenDataModel):
    """Options of the elastic services.

    Attributes:
        endpoint: URL of the search engine.
        index_name: Index name.
        doc_type: Document type used by typed (6.x) mappings.
        id_name: Field holding the document id in the source.
        time_series: Index holds time series documents.
        version: Engine version like "6.8", "7.10" or "2.13".
        autocomplete_fields: Fields indexed for search as you type.
    """

    endpoint: str = ""
    index_name: str = DataModelField(default="", alias="indexName")
    doc_type: str = DataModelField(default="_doc", alias="docType")
    id_name: str = DataModelField(default="$id", alias="idName")
    time_series: bool = DataModelField(default=False, alias="timeSeries")
    version: str = "6.8"
    autocomplete_fields: List[str] = DataModelField(
        default=[], alias="autocompleteFields"
    )

    def validate_required(self) -> Elastic6Option:
        if not self.endpoint:
            raise BadRequestError(".endpoint (URL) is required")
        if not self.index_name:
            raise BadRequestError(".indexName (string) is required")
        return self

    @staticmethod
    def build(
        option: Elastic6Option | dict | None = None, **kwargs: Any
    ) -> Elastic6Option:
        updates = {k: v for k, v in kwargs.items() if v is not None}
        if isinstance(option, Elastic6Option):
            if updates:
                option = Elastic6Option.model_validate(
                    option.model_dump() | updates
                )
            return option.validate_required()
        values = {k: v for k, v in dict(option or {}).items() if v is not None}
        return Elastic6Option.from_dict(values | updates).validate_required()


class ParsedVersion(FrozenDataModel):
    """Engine version parsed from the version text."""

    engine: str | None = None
    """'es' for Elasticsearch, 'os' for OpenSearch."""

    major: int = 0
    minor: int | None = None
    patch: int | None = None
    prerelease: str | None = None
    build: str | None = None

    error: str | None = None
    """Set when the text failed to parse."""


class ErrorReasonDetail(DataModel):
    status: int | None = None
    type: str | None = None
    reason: str | None = None
    cause: Any = None


class ErrorReason(DataModel):
    """Error normalized from the engine response.

    Attributes:
        status: HTTP status, 0 if unknown.
        message: Error message.
        reason: Details with the type label like "MAPPER PARSING".
    """

    status: int = 0
    message: str | None = None
    reason: ErrorReasonDetail | None = None


class IndexInfo(DataModel):
    """Row of the index listing."""

    pri: int | None = None
    rep: int | None = None
    docs_count: int | None = None
    docs_deleted: int | None = None
    health: str = ""
    index: str = ""
    status: str = ""
    uuid: str = ""
    pri_store_size: str = ""
    store_size: str = ""


class SearchResult(DataModel):
    """Formatted search result.

    Attributes:
        total: Total number of hits.
        list: Hits as `{..._source, _id, _score}`.
        last: Sort values of the last hit when the page is full.
        aggregations: Aggregations in the response.
    """

    total: int | None = None
    list: List[dict[str, Any]] = []
    last: Any = None
    aggregations: dict[str, Any] | None = None


class SimpleSearchResult(DataModel):
    """Result of the simple and the autocomplete search.

    Attributes:
        list: Sources with `_id` and `_score`.
        total: Total number of hits.
        aggregations: Buckets of each term as `{key, count}`.
    """

    list: List[dict[str, Any]] = []
    total: int = 0
    aggregations: dict[str, List[dict[str, Any]]] | None = None
