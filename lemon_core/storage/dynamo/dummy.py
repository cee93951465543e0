"""
In-memory DynamoDB services for tests and local runs.
"""

from __future__ import annotations

__all__ = ["DummyDynamoScanService", "DummyDynamoService"]

import copy
import logging
from typing import Any

from ...core import Provider, YamlLoader, run_async
from ...core.exceptions import BadRequestError, NotFoundError
from ._filter import match_filter
from ._helper import MemoryUpdater, OperationConverter, normalize
from ._models import DynamoOption, PageResult, ScanResult


class MemoryTable:
    """Items of one table kept in insertion order."""

    option: DynamoOption
    buffer: dict[str, dict]

    def __init__(self, option: DynamoOption):
        self.option = option
        self.buffer = dict()

    def key(self, id: Any, sort: Any = None) -> str:
        if self.option.sort_name and sort is not None:
            return f"{id}/{sort}"
        return f"{id}"

    def load(self, data: list[dict] | None) -> None:
        if not isinstance(data, list):
            raise BadRequestError("@data should be array!")
        option = self.option
        for item in data:
            id = item.get(option.id_name) or ""
            sort = item.get(option.sort_name) if option.sort_name else None
            self.buffer[self.key(id, sort)] = item

    def load_file(self, data_file: str, folder: str | None = None) -> None:
        if not data_file:
            raise BadRequestError("@dataFile(string) is required!")
        dummy = YamlLoader.load_data(data_file, folder)
        self.load(dummy.get("data"))


class DummyDynamoService(Provider):
    """In-memory implementation of `DynamoService`."""

    option: DynamoOption

    _table: MemoryTable

    def __init__(
        self,
        data_file: str,
        option: DynamoOption | dict | None = None,
        folder: str | None = None,
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            data_file:
                YAML file with a `data` list, resolved as
                `<folder>/<data_file>.yml`.
            option:
                Table options.
            folder:
                Data folder, defaults to "data".
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(logger=logger)
        self.option = DynamoOption.build(option, **kwargs)
        self._logger.debug("DummyDynamoService(%s)...", data_file)
        self._table = MemoryTable(self.option)
        self._table.load_file(data_file, folder)

    def hello(self) -> str:
        return f"dummy-dynamo-service:{self.option.table_name}"

    def load(self, data: list[dict]) -> None:
        self._table.load(data)

    def list_items(self, page: int = 1, limit: int = 2) -> PageResult:
        keys = list(self._table.buffer.keys())
        selected = keys[(page - 1) * limit : page * limit]
        return PageResult(
            page=page,
            limit=limit,
            total=len(keys),
            list=[copy.deepcopy(self._table.buffer[k]) for k in selected],
        )

    def read_item(self, id: Any, sort: Any = None) -> dict:
        id_name = self.option.id_name
        OperationConverter(self.option).convert_key(id, sort)
        item = self._table.buffer.get(self._table.key(id, sort))
        if item is None:
            raise NotFoundError(f"404 NOT FOUND - {id_name}:{id}")
        return {id_name: id} | copy.deepcopy(item)

    def save_item(self, id: Any, item: dict) -> dict:
        option = self.option
        OperationConverter(option).convert_save(id, item)
        sort = item.get(option.sort_name) if option.sort_name else None
        node = {option.id_name: id} | {
            k: v for k, v in item.items() if k != option.id_name
        }
        self._table.buffer[self._table.key(id, sort)] = normalize(
            copy.deepcopy(node)
        )
        return self.read_item(id, sort)

    def delete_item(self, id: Any, sort: Any = None) -> dict | None:
        self._table.buffer.pop(self._table.key(id, sort), None)
        return None

    def update_item(
        self,
        id: Any,
        sort: Any,
        updates: dict | None,
        increments: dict | None = None,
    ) -> dict:
        key = self._table.key(id, sort)
        item = self._table.buffer.get(key)
        if item is None:
            raise NotFoundError(f"404 NOT FOUND - {self.option.id_name}:{id}")
        node = MemoryUpdater(self.option).apply(item, updates, increments)
        self._table.buffer[key] = node
        return {self.option.id_name: id} | copy.deepcopy(node)

    async def aread_item(self, id: Any, sort: Any = None) -> dict:
        return await run_async(self.read_item, id, sort)

    async def asave_item(self, id: Any, item: dict) -> dict:
        return await run_async(self.save_item, id, item)

    async def adelete_item(self, id: Any, sort: Any = None) -> dict | None:
        return await run_async(self.delete_item, id, sort)

    async def aupdate_item(
        self,
        id: Any,
        sort: Any,
        updates: dict | None,
        increments: dict | None = None,
    ) -> dict:
        return await run_async(
            self.update_item, id, sort, updates, increments
        )


class DummyDynamoScanService(Provider):
    """In-memory implementation of `DynamoScanService`."""

    option: DynamoOption

    _table: MemoryTable

    def __init__(
        self,
        data_file: str | None = None,
        option: DynamoOption | dict | None = None,
        data: list[dict] | None = None,
        folder: str | None = None,
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        super().__init__(logger=logger)
        self.option = DynamoOption.build(option, **kwargs)
        self._table = MemoryTable(self.option)
        if data is not None:
            self._table.load(data)
        else:
            self._table.load_file(data_file or "", folder)

    def hello(self) -> str:
        return f"dummy-dynamo-scan-service:{self.option.table_name}"

    def scan(
        self,
        limit: int | None = None,
        last: dict | None = None,
        filter: Any = None,
    ) -> ScanResult:
        option = self.option
        keys = list(self._table.buffer.keys())
        if last:
            start = self._table.key(
                last.get(option.id_name),
                last.get(option.sort_name) if option.sort_name else None,
            )
            keys = keys[keys.index(start) + 1 :] if start in keys else []
        items: list[dict] = []
        lek: dict = {}
        for i, key in enumerate(keys):
            item = self._table.buffer[key]
            if limit is not None and limit > 0 and i >= limit:
                break
            if limit is not None and limit > 0 and i == limit - 1:
                if i < len(keys) - 1:
                    lek = {option.id_name: item.get(option.id_name)}
                    if option.sort_name:
                        lek[option.sort_name] = item.get(option.sort_name)
            if filter is None or match_filter(filter, item):
                items.append(copy.deepcopy(item))
        return ScanResult(list=items, count=len(items), last=lek)

    async def ascan(
        self,
        limit: int | None = None,
        last: dict | None = None,
        filter: Any = None,
    ) -> ScanResult:
        return await run_async(self.scan, limit, last, filter)
