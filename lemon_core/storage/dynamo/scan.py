"""
Filtered scan on Amazon DynamoDB.
"""

from __future__ import annotations

__all__ = ["DynamoScanService"]

from typing import Any

from ...core import NCall, run_async
from ._filter import compile_filter
from ._helper import convert_types_back
from ._provider import DynamoProvider
from ._models import ScanResult


class DynamoScanService(DynamoProvider):
    def hello(self) -> str:
        return f"dynamo-scan-service:{self.option.table_name}"

    def build_payload(
        self,
        limit: int | None = None,
        last: dict | None = None,
        filter: Any = None,
    ) -> dict:
        """Build the Scan request.

        Args:
            limit:
                Page size, ignored unless positive.
            last:
                Last evaluated key of the previous page.
            filter:
                Scan filter (see `parse_filter`).

        Returns:
            Scan request arguments including TableName.
        """
        option = self.option
        args: dict[str, Any] = {"TableName": option.table_name}
        if limit is not None and limit > 0:
            args["Limit"] = limit
        if last:
            start_key = {option.id_name: last.get(option.id_name)}
            if option.sort_name:
                start_key[option.sort_name] = last.get(option.sort_name)
            args["ExclusiveStartKey"] = start_key
        if filter is not None:
            compiled = compile_filter(filter)
            if compiled.expression is not None:
                args["FilterExpression"] = compiled.expression
            if len(compiled.names) > 0:
                args["ExpressionAttributeNames"] = compiled.names
            if len(compiled.values) > 0:
                args["ExpressionAttributeValues"] = compiled.values
        return args

    def scan(
        self,
        limit: int | None = None,
        last: dict | None = None,
        filter: Any = None,
    ) -> ScanResult:
        args = self.build_payload(limit, last, filter)
        self._logger.debug("> payload = %s", args)
        args.pop("TableName")
        response = NCall(self.table.scan, args).invoke()
        items = convert_types_back(response.get("Items", []))
        last_key = convert_types_back(response.get("LastEvaluatedKey", {}))
        self._logger.debug(
            "> scan.count = %s, scanned = %s, last = %s",
            response.get("Count"),
            response.get("ScannedCount"),
            last_key,
        )
        return ScanResult(
            list=items,
            count=response.get("Count"),
            last=last_key,
        )

    async def ascan(
        self,
        limit: int | None = None,
        last: dict | None = None,
        filter: Any = None,
    ) -> ScanResult:
        return await run_async(self.scan, limit, last, filter)
