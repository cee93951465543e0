"""
In-memory elastic service for tests and local runs.
"""

from __future__ import annotations

__all__ = ["DummyElastic6Service"]

import copy
import logging

from ...core import YamlLoader, apply_increments, run_async
from ...core.exceptions import BadRequestError, NotFoundError
from ._models import Elastic6Option
from .service import Elastic6Service


class DummyElastic6Service(Elastic6Service):
    """Keeps the items in memory, never connects to the engine."""

    _buffer: dict[str, dict]

    def __init__(
        self,
        data_file: str,
        option: Elastic6Option | dict | None = None,
        folder: str | None = None,
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        super().__init__(option=option, logger=logger, **kwargs)
        self._logger.debug("DummyElastic6Service(%s)...", data_file)
        if not data_file:
            raise BadRequestError("@dataFile(string) is required!")
        self._buffer = dict()
        dummy = YamlLoader.load_data(data_file, folder)
        self.load(dummy.get("data"))

    def hello(self) -> str:
        return f"dummy-elastic6-service:{self.option.index_name}"

    def load(self, data: list[dict] | None) -> None:
        if not isinstance(data, list):
            raise BadRequestError("@data should be array!")
        id_name = self.option.id_name
        for item in data:
            self._buffer[f"{item.get(id_name) or ''}"] = item

    def read_item(self, id: str, views: list | dict | None = None) -> dict:
        item = self._buffer.get(id)
        if item is None:
            raise NotFoundError(f"404 NOT FOUND - id:{id}")
        return copy.deepcopy(item)

    def save_item(self, id: str, item: dict) -> dict:
        self._buffer[id] = {"id": id} | copy.deepcopy(item)
        return {self.option.id_name: id} | copy.deepcopy(item) | {
            "_version": 1
        }

    def delete_item(self, id: str) -> dict:
        return dict(self._buffer.pop(id, None) or {})

    def update_item(
        self,
        id: str,
        item: dict | None,
        increments: dict | None = None,
    ) -> dict:
        # increments create the missing item like the upsert
        if increments and id not in self._buffer:
            org: dict = {"id": id}
        else:
            org = self.read_item(id)
        node = org | copy.deepcopy(item or {})
        node["_version"] = int(org.get("_version") or 0) + 1
        apply_increments(node, increments)
        self._buffer[id] = node
        return copy.deepcopy(node)

    async def aread_item(
        self, id: str, views: list | dict | None = None
    ) -> dict:
        return await run_async(self.read_item, id, views)

    async def asave_item(self, id: str, item: dict) -> dict:
        return await run_async(self.save_item, id, item)

    async def adelete_item(self, id: str) -> dict:
        return await run_async(self.delete_item, id)

    async def aupdate_item(
        self,
        id: str,
        item: dict | None,
        increments: dict | None = None,
    ) -> dict:
        return await run_async(self.update_item, id, item, increments)
