"""
Range query on Amazon DynamoDB.
"""

from __future__ import annotations

__all__ = ["DynamoQueryService"]

import re
from typing import Any

from ...core import NCall, run_async
from ...core.exceptions import BadRequestError
from ._helper import convert_floats, convert_types_back
from ._provider import DynamoProvider
from ._models import QueryResult


class KeyCondition:
    """Accumulates key conditions with unique value placeholders."""

    statement: str | None
    names: dict[str, str]
    values: dict[str, Any]

    def __init__(self) -> None:
        self.statement = None
        self.names = dict()
        self.values = dict()

    def _value_name(self, key: str, used: list[str]) -> str:
        name = f":{key}"
        idx = 1
        while name in self.values or name in used:
            idx += 1
            name = f":{key}_{idx}"
        return name

    def add(self, key: str, operator: str, *values: Any) -> KeyCondition:
        path = f"#{key}"
        used: list[str] = []
        names = []
        for value in values:
            name = self._value_name(key, used)
            used.append(name)
            names.append(name)
        if operator == "BETWEEN":
            statement = f"{path} BETWEEN {names[0]} AND {names[1]}"
        else:
            statement = f"{path} {operator} {names[0]}"
        self.names[path] = key
        for name, value in zip(names, values):
            self.values[name] = value
        if self.statement is None:
            self.statement = f"({statement})"
        else:
            self.statement = f"{self.statement} AND ({statement})"
        return self


def _replace_at(mapping: dict[str, Any]) -> dict[str, Any]:
    return {re.sub(r"^([#:])@", r"\1_", k): v for k, v in mapping.items()}


class DynamoQueryService(DynamoProvider):
    def hello(self) -> str:
        return f"dynamo-query-service:{self.option.table_name}"

    def query_all(
        self, pkey: Any, limit: int | None = None, is_desc: bool = False
    ) -> QueryResult:
        return self.query_range_by(pkey, -1, -1, limit, None, is_desc)

    def query_range(
        self,
        pkey: Any,
        from_: Any,
        to: Any,
        limit: int | None = None,
        last: Any = None,
    ) -> QueryResult:
        return self.query_range_by(pkey, from_, to, limit, last, False)

    def build_payload(
        self,
        pkey: Any,
        from_: Any,
        to: Any,
        limit: int | None = None,
        last: Any = None,
        is_desc: bool = False,
    ) -> dict:
        option = self.option
        condition = KeyCondition()
        if option.sort_name:
            if from_ != -1 and to != -1:
                condition.add(option.sort_name, "BETWEEN", from_, to)
            else:
                condition.add(option.sort_name, ">=", 0)
        args: dict[str, Any] = {
            "TableName": option.table_name,
            "ScanIndexForward": not is_desc,
        }
        if limit is not None:
            if limit <= 0:
                raise BadRequestError("Limit must be greater than 0")
            args["Limit"] = limit
        condition.add(option.id_name, "=", pkey)
        if last:
            start_key = {option.id_name: pkey}
            if option.sort_name:
                start_key[option.sort_name] = last
            args["ExclusiveStartKey"] = start_key
        args["KeyConditionExpression"] = re.sub(
            r"([#:])@", r"\1_", condition.statement or ""
        )
        args["ExpressionAttributeNames"] = _replace_at(condition.names)
        args["ExpressionAttributeValues"] = convert_floats(
            _replace_at(condition.values)
        )
        return args

    def query_range_by(
        self,
        pkey: Any,
        from_: Any,
        to: Any,
        limit: int | None = None,
        last: Any = None,
        is_desc: bool = False,
    ) -> QueryResult:
        self._logger.debug("queryRangeBy(%s, %s, %s)...", pkey, from_, to)
        args = self.build_payload(pkey, from_, to, limit, last, is_desc)
        self._logger.debug("> payload[%s] = %s", pkey, args)
        args.pop("TableName")
        response = NCall(self.table.query, args).invoke()
        if not response:
            return QueryResult(list=[])
        items = convert_types_back(response.get("Items", []))
        last_key = convert_types_back(response.get("LastEvaluatedKey", {}))
        sort_name = self.option.sort_name
        last_sort = last_key.get(sort_name) if sort_name else None
        return QueryResult(
            list=items,
            count=response.get("Count"),
            last=last_sort if last_sort is not None else 0,
        )

    async def aquery_all(
        self, pkey: Any, limit: int | None = None, is_desc: bool = False
    ) -> QueryResult:
        return await run_async(self.query_all, pkey, limit, is_desc)

    async def aquery_range(
        self,
        pkey: Any,
        from_: Any,
        to: Any,
        limit: int | None = None,
        last: Any = None,
    ) -> QueryResult:
        return await run_async(self.query_range, pkey, from_, to, limit, last)
