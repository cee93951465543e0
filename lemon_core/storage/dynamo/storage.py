"""
Model storage with the fixed field set, on DynamoDB or in memory.

Models are plain dicts. Only the listed fields are stored, always
with `id`, `type`, `stereo` and `meta` first.
"""

from __future__ import annotations

__all__ = ["DummyStorageService", "DynamoStorageService", "StorageService"]

import copy
import logging
from typing import Any

from ...core import Provider, YamlLoader, increment, is_number, run_async
from ...core.exceptions import BadRequestError, NotFoundError
from ._models import DynamoKeyType
from .service import DynamoService

BASE_FIELDS = ["id", "type", "stereo", "meta"]


def _number_required(key: str) -> BadRequestError:
    return BadRequestError(
        f"400 ILLEGAL ARGUMENT - number is required at key:{key}"
    )


class StorageService(Provider):
    """Read, save, update, increment and delete of one model."""

    def hello(self) -> str:
        raise NotImplementedError

    def read(self, id: str) -> dict:
        raise NotImplementedError

    def save(self, id: str, model: dict) -> dict:
        raise NotImplementedError

    def update(self, id: str, model: dict) -> dict:
        raise NotImplementedError

    def increment(self, id: str, model: dict) -> dict:
        raise NotImplementedError

    def delete(self, id: str) -> dict:
        raise NotImplementedError

    def read_or_create(self, id: str, model: dict) -> dict:
        """Read the model, or create it by update when missing."""
        try:
            return self.read(id)
        except NotFoundError:
            return self.update(id, model)

    async def aread(self, id: str) -> dict:
        return await run_async(self.read, id)

    async def aread_or_create(self, id: str, model: dict) -> dict:
        return await run_async(self.read_or_create, id, model)

    async def asave(self, id: str, model: dict) -> dict:
        return await run_async(self.save, id, model)

    async def aupdate(self, id: str, model: dict) -> dict:
        return await run_async(self.update, id, model)

    async def aincrement(self, id: str, model: dict) -> dict:
        return await run_async(self.increment, id, model)

    async def adelete(self, id: str) -> dict:
        return await run_async(self.delete, id)


class DynamoStorageService(StorageService):
    """Storage on one DynamoDB table."""

    table: str
    id_name: str
    fields: list[str]

    _dynamo: DynamoService

    def __init__(
        self,
        table: str,
        fields: list[str] | None = None,
        id_name: str = "id",
        id_type: DynamoKeyType | str = DynamoKeyType.STRING,
        dynamo: DynamoService | None = None,
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            table:
                Table name.
            fields:
                Fields stored after the base fields.
            id_name:
                Partition key name, replaces `id` of the base fields.
            id_type:
                Partition key type.
            dynamo:
                Service of the table, created from the arguments
                when not given.
            logger:
                Logger to use, defaults to the module logger.
            kwargs:
                Arguments of `DynamoService` like `region`.
        """
        super().__init__(logger=logger)
        if not table:
            raise BadRequestError("@table (table-name) is required!")
        self.table = table
        self.id_name = id_name
        self.fields = [id_name, *BASE_FIELDS[1:], *(fields or [])]
        self._dynamo = dynamo or DynamoService(
            table_name=table,
            id_name=id_name,
            id_type=id_type,
            logger=logger,
            **kwargs,
        )

    def hello(self) -> str:
        return (
            f"dynamo-storage-service:{self.table}"
            f"/{self.id_name}/{len(self.fields)}"
        )

    def _pick(self, model: dict) -> dict:
        return {k: model[k] for k in self.fields if k in model}

    def read(self, id: str) -> dict:
        return self._pick(self._dynamo.read_item(id))

    def save(self, id: str, model: dict) -> dict:
        data = self._pick(model)
        self._dynamo.save_item(id, data)
        return {self.id_name: id} | data

    def update(self, id: str, model: dict) -> dict:
        data = self._pick(model)
        if not data:
            return {self.id_name: id}
        return self._dynamo.update_item(id, None, data)

    def increment(self, id: str, model: dict) -> dict:
        """Add the numbers, and set the others or the missing fields.

        Raises:
            BadRequestError: when a stored number is given a value
                which is not a number.
        """
        try:
            org = self.read(id)
        except NotFoundError:
            org = {self.id_name: id}
        updates: dict[str, Any] = {}
        increments: dict[str, Any] = {}
        for key, value in self._pick(model).items():
            if value is None:
                continue
            current = org.get(key)
            if is_number(current) and not is_number(value):
                raise _number_required(key)
            if current is None or not is_number(value):
                updates[key] = value
            else:
                increments[key] = value
        if not updates and not increments:
            return {self.id_name: id}
        return self._dynamo.update_item(
            id, None, updates or None, increments or None
        )

    def delete(self, id: str) -> dict:
        org = self.read(id)
        self._dynamo.delete_item(id)
        return org


class DummyStorageService(StorageService):
    """Storage kept in memory, loaded from the data file."""

    name: str

    _buffer: dict[str, dict]

    def __init__(
        self,
        data_file: str,
        name: str = "memory",
        folder: str | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(logger=logger)
        self._logger.debug("DummyStorageService(%s)...", data_file)
        if not data_file:
            raise BadRequestError("@dataFile(string) is required!")
        self.name = name or ""
        self._buffer = dict()
        dummy = YamlLoader.load_data(data_file, folder)
        self.load(dummy.get("data"))

    def load(self, data: list[dict] | None) -> None:
        if not isinstance(data, list):
            raise BadRequestError("@data should be array!")
        for item in data:
            self._buffer[f"{item.get('id') or ''}"] = item

    def hello(self, name: str | None = None) -> str:
        return f"dummy-storage-service:{name or self.name}"

    def read(self, id: str) -> dict:
        if not f"{id or ''}".strip():
            raise BadRequestError("@id(string) is required!")
        item = self._buffer.get(id)
        if item is None:
            raise NotFoundError(f"404 NOT FOUND - id:{id}")
        return copy.deepcopy(item)

    def _read_safe(self, id: str) -> dict:
        try:
            return self.read(id)
        except NotFoundError:
            return {"id": id}

    def _check(self, id: str, model: dict | None) -> None:
        if not id:
            raise BadRequestError("@id is required!")
        if model is None:
            raise BadRequestError("@item is required!")

    def save(self, id: str, model: dict) -> dict:
        self._check(id, model)
        self._buffer[id] = copy.deepcopy(model)
        return copy.deepcopy(model)

    def update(self, id: str, model: dict) -> dict:
        self._check(id, model)
        self.save(id, self._read_safe(id) | model)
        return {"id": id} | model

    def increment(self, id: str, model: dict) -> dict:
        self._check(id, model)
        org = self._read_safe(id)
        updates: dict[str, Any] = {}
        for key, value in model.items():
            if value is None:
                continue
            current = org.get(key)
            if is_number(current) and not is_number(value):
                raise _number_required(key)
            if is_number(value):
                updates[key] = increment(key, current, value)
            else:
                updates[key] = value
        self.save(id, org | updates)
        return {"id": id} | updates

    def delete(self, id: str) -> dict:
        org = self.read(id)
        self._buffer.pop(id, None)
        return org
