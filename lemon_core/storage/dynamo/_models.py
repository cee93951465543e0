from __future__ import annotations

from enum import Enum
from typing import Any, List

from ...core import DataModel, DataModelField, FrozenDataModel
from ...core.exceptions import BadRequestError


class DynamoKeyType(str, Enum):
    """Key attribute type."""

    STRING = "string"
    NUMBER = "number"


class DynamoOption(FrozenDataModel):
    """Options of the DynamoDB services.

    Attributes:
        table_name: Table name.
        id_name: Partition key name.
        sort_name: Sort key name.
        id_type: Partition key type.
        sort_type: Sort key type.
    """

    table_name: str = DataModelField(default="", alias="tableName")
    id_name: str = DataModelField(default="", alias="idName")
    sort_name: str | None = DataModelField(default=None, alias="sortName")
    id_type: DynamoKeyType | None = DataModelField(
        default=None, alias="idType"
    )
    sort_type: DynamoKeyType | None = DataModelField(
        default=None, alias="sortType"
    )

    def validate_required(self) -> DynamoOption:
        if not self.table_name:
            raise BadRequestError(".tableName is required")
        if not self.id_name:
            raise BadRequestError(".idName is required")
        return self

    @staticmethod
    def build(
        option: DynamoOption | dict | None = None, **kwargs: Any
    ) -> DynamoOption:
        if isinstance(option, DynamoOption):
            if kwargs:
                option = DynamoOption.model_validate(
                    option.model_dump() | kwargs
                )
            return option.validate_required()
        values = dict(option or {}) | kwargs
        return DynamoOption.from_dict(values).validate_required()


class ScanResult(DataModel):
    """Result of scan.

    Attributes:
        list: Items found.
        count: Number of items.
        last: Last evaluated key for pagination.
    """

    list: List[dict[str, Any]] = []
    count: int | None = None
    last: dict[str, Any] | None = None


class QueryResult(DataModel):
    """Result of range query.

    Attributes:
        list: Items found.
        count: Number of items.
        last: Last evaluated sort key, 0 when exhausted.
    """

    list: List[dict[str, Any]] = []
    count: int | None = None
    last: Any = None


class PageResult(DataModel):
    """Page of in-memory items."""

    page: int
    limit: int
    total: int
    list: List[dict[str, Any]] = []
