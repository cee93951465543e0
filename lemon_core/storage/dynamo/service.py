"""
CRUD service on Amazon DynamoDB.
"""

from __future__ import annotations

__all__ = ["DynamoService"]

from typing import Any

from botocore.exceptions import ClientError

from ...core import NCall, run_async
from ...core.exceptions import NotFoundError
from ._helper import OperationConverter, convert_types_back, normalize
from ._provider import DynamoProvider


def _is_not_found(e: ClientError) -> bool:
    return e.response["Error"]["Code"] == "ResourceNotFoundException"


class DynamoService(DynamoProvider):
    """Basic CRUD service on one DynamoDB table.

    Items are plain dicts. The partition key is `option.id_name` and the
    optional sort key is `option.sort_name`.
    """

    normalize = staticmethod(normalize)

    def hello(self) -> str:
        return f"dynamo-service:{self.option.table_name}"

    @property
    def op_converter(self) -> OperationConverter:
        return OperationConverter(self.option)

    def prepare_create_table(
        self,
        read_capacity_units: int = 1,
        write_capacity_units: int = 1,
        stream_enabled: bool = True,
    ) -> dict:
        return self.op_converter.convert_create_table(
            read_capacity_units, write_capacity_units, stream_enabled
        )

    def prepare_delete_table(self) -> dict:
        return self.op_converter.convert_delete_table()

    def prepare_save_item(self, id: Any, item: dict) -> dict:
        return self.op_converter.convert_save(id, item)

    def prepare_item_key(self, id: Any, sort: Any = None) -> dict:
        return self.op_converter.convert_key(id, sort)

    def prepare_update_item(
        self,
        id: Any,
        sort: Any,
        updates: dict | None,
        increments: dict | None = None,
    ) -> dict:
        args = self.op_converter.convert_update(id, sort, updates, increments)
        self._logger.debug(
            "> UpdateExpression[%s] = %s", id, args["UpdateExpression"]
        )
        return args

    # TABLE
    def create_table(
        self, read_capacity_units: int = 1, write_capacity_units: int = 1
    ) -> dict:
        args = self.prepare_create_table(
            read_capacity_units, write_capacity_units
        )
        self._logger.debug("createTable(%s)...", args["TableName"])
        return NCall(self.client.create_table, args).invoke()

    def delete_table(self) -> dict:
        args = self.prepare_delete_table()
        self._logger.debug("deleteTable(%s)...", args["TableName"])
        return NCall(self.client.delete_table, args).invoke()

    # GET
    def read_item(self, id: Any, sort: Any = None) -> dict:
        id_name = self.option.id_name
        args = self.prepare_item_key(id, sort)
        args.pop("TableName")
        try:
            response = NCall(self.table.get_item, args).invoke()
        except ClientError as e:
            if _is_not_found(e):
                raise NotFoundError(f"404 NOT FOUND - {id_name}:{id}") from e
            raise
        item = response.get("Item")
        if item is None:
            raise NotFoundError(
                f"404 NOT FOUND - {id_name}:{id}"
                f"{f'/{sort}' if sort else ''}"
            )
        return convert_types_back(item)

    # PUT
    def save_item(self, id: Any, item: dict) -> dict:
        args = self.prepare_save_item(id, item)
        args.pop("TableName")
        try:
            NCall(self.table.put_item, args).invoke()
        except ClientError as e:
            if _is_not_found(e):
                raise NotFoundError(
                    f"404 NOT FOUND - {self.option.id_name}:{id}"
                ) from e
            raise
        return convert_types_back(args["Item"])

    # DELETE
    def delete_item(self, id: Any, sort: Any = None) -> dict | None:
        args = self.prepare_item_key(id, sort)
        args.pop("TableName")
        try:
            NCall(self.table.delete_item, args).invoke()
        except ClientError as e:
            if _is_not_found(e):
                return {}
            raise
        return None

    # UPDATE
    def update_item(
        self,
        id: Any,
        sort: Any,
        updates: dict | None,
        increments: dict | None = None,
    ) -> dict:
        args = self.prepare_update_item(id, sort, updates, increments)
        args.pop("TableName")
        try:
            response = NCall(self.table.update_item, args).invoke()
        except ClientError as e:
            if _is_not_found(e):
                raise NotFoundError(
                    f"404 NOT FOUND - {self.option.id_name}:{id}"
                ) from e
            raise
        attributes = convert_types_back(response.get("Attributes", {}))
        return attributes | args["Key"]

    async def acreate_table(
        self, read_capacity_units: int = 1, write_capacity_units: int = 1
    ) -> dict:
        return await run_async(
            self.create_table, read_capacity_units, write_capacity_units
        )

    async def adelete_table(self) -> dict:
        return await run_async(self.delete_table)

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
