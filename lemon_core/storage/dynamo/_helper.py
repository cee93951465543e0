from __future__ import annotations

import copy
import re
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import Binary

from ...core import apply_increments
from ...core.exceptions import BadRequestError
from ._models import DynamoKeyType, DynamoOption


def normalize(data: Any) -> Any:
    """Replace empty strings with None, recursively."""
    if data == "" and isinstance(data, str):
        return None
    if isinstance(data, list):
        return [normalize(v) for v in data]
    if isinstance(data, dict):
        return {k: normalize(v) for k, v in data.items()}
    return data


def convert_floats(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: convert_floats(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_floats(i) for i in obj]
    elif isinstance(obj, float):
        return Decimal(str(obj))
    return obj


def convert_types_back(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: convert_types_back(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_types_back(i) for i in obj]
    elif isinstance(obj, set):
        return {convert_types_back(i) for i in obj}
    elif isinstance(obj, Decimal):
        return int(obj) if obj % 1 == 0 else float(obj)
    elif isinstance(obj, Binary):
        return bytes(obj)
    return obj


def norm_name(name: str) -> str:
    return re.sub(r"[.\\:/]", "_", f"{name}")


class OperationConverter:
    option: DynamoOption

    def __init__(self, option: DynamoOption):
        self.option = option

    def convert_create_table(
        self,
        read_capacity_units: int = 1,
        write_capacity_units: int = 1,
        stream_enabled: bool = True,
    ) -> dict:
        def get_attribute_type(type: DynamoKeyType | str | None) -> str:
            type = DynamoKeyType(type or DynamoKeyType.STRING.value)
            if type == DynamoKeyType.NUMBER:
                return "N"
            return "S"

        option = self.option
        key_schema = [{"AttributeName": option.id_name, "KeyType": "HASH"}]
        attribute_definitions = [
            {
                "AttributeName": option.id_name,
                "AttributeType": get_attribute_type(option.id_type),
            }
        ]
        if option.sort_name:
            key_schema.append(
                {"AttributeName": option.sort_name, "KeyType": "RANGE"}
            )
            attribute_definitions.append(
                {
                    "AttributeName": option.sort_name,
                    "AttributeType": get_attribute_type(option.sort_type),
                }
            )
        return {
            "TableName": option.table_name,
            "KeySchema": key_schema,
            "AttributeDefinitions": attribute_definitions,
            "ProvisionedThroughput": {
                "ReadCapacityUnits": read_capacity_units,
                "WriteCapacityUnits": write_capacity_units,
            },
            "StreamSpecification": {
                "StreamEnabled": stream_enabled,
                "StreamViewType": "NEW_AND_OLD_IMAGES",
            },
        }

    def convert_delete_table(self) -> dict:
        return {"TableName": self.option.table_name}

    def convert_save(self, id: Any, item: dict) -> dict:
        option = self.option
        if option.sort_name and option.sort_name not in item:
            raise BadRequestError(
                f".{option.sort_name} is required. {option.id_name}:{id}"
            )
        node = {option.id_name: id} | {
            k: v for k, v in item.items() if k != option.id_name
        }
        return {
            "TableName": option.table_name,
            "Item": convert_floats(normalize(node)),
        }

    def convert_key(self, id: Any, sort: Any = None) -> dict:
        option = self.option
        if id is None or id == "":
            raise BadRequestError("@id is required!")
        key = {option.id_name: id}
        if option.sort_name:
            if sort is None:
                raise BadRequestError(
                    f"@sort is required. {option.id_name}:{id}"
                )
            key[option.sort_name] = sort
        return {"TableName": option.table_name, "Key": key}

    def convert_update(
        self,
        id: Any,
        sort: Any,
        updates: dict | None,
        increments: dict | None = None,
    ) -> dict:
        option = self.option
        args = self.convert_key(id, sort)
        sets: list[str] = []
        removes: list[str] = []
        adds: list[str] = []
        attribute_names: dict[str, str] = {}
        attribute_values: dict[str, Any] = {}
        for key, value in (updates or {}).items():
            if key == option.id_name or key == option.sort_name:
                continue
            name = norm_name(key)
            value = normalize(value)
            if isinstance(value, dict) and isinstance(
                value.get("setIndex"), list
            ):
                for seq, (idx, val) in enumerate(value["setIndex"]):
                    if idx is None or val is None:
                        continue
                    attribute_names[f"#{name}"] = key
                    attribute_values[f":{name}_{seq}_"] = val
                    sets.append(f"#{name}[{int(idx)}] = :{name}_{seq}_")
            elif isinstance(value, dict) and isinstance(
                value.get("removeIndex"), list
            ):
                for idx in value["removeIndex"]:
                    if idx is None:
                        continue
                    attribute_names[f"#{name}"] = key
                    removes.append(f"#{name}[{int(idx)}]")
            else:
                attribute_names[f"#{name}"] = key
                attribute_values[f":{name}"] = value
                sets.append(f"#{name} = :{name}")
        for key, value in (increments or {}).items():
            name = norm_name(key)
            attribute_names[f"#{name}"] = key
            attribute_values[f":{name}"] = value
            if isinstance(value, list):
                attribute_values[f":{name}_0"] = []
                sets.append(
                    f"#{name} = list_append("
                    f"if_not_exists(#{name}, :{name}_0), :{name})"
                )
            else:
                adds.append(f"#{name} :{name}")

        expr = ""
        if len(sets) > 0:
            expr = f"{expr} SET {', '.join(sets)}"
        if len(removes) > 0:
            expr = f"{expr} REMOVE {', '.join(removes)}"
        if len(adds) > 0:
            expr = f"{expr} ADD {', '.join(adds)}"
        args["UpdateExpression"] = expr.strip()
        if len(attribute_names) > 0:
            args["ExpressionAttributeNames"] = attribute_names
        if len(attribute_values) > 0:
            args["ExpressionAttributeValues"] = convert_floats(
                copy.deepcopy(attribute_values)
            )
        args["ReturnValues"] = "UPDATED_NEW"
        return args


class MemoryUpdater:
    """Applies updates and increments to an in-memory item."""

    option: DynamoOption

    def __init__(self, option: DynamoOption):
        self.option = option

    def apply(
        self,
        item: dict,
        updates: dict | None,
        increments: dict | None = None,
    ) -> dict:
        option = self.option
        node = copy.deepcopy(item)
        for key, value in (updates or {}).items():
            if key == option.id_name or key == option.sort_name:
                continue
            value = normalize(value)
            if isinstance(value, dict) and isinstance(
                value.get("setIndex"), list
            ):
                target = node.get(key)
                for idx, val in value["setIndex"]:
                    if idx is None or val is None:
                        continue
                    if not isinstance(target, list) or int(idx) >= len(
                        target
                    ):
                        raise BadRequestError(
                            f"400 INVALID INDEX - {key}[{idx}]"
                        )
                    target[int(idx)] = val
            elif isinstance(value, dict) and isinstance(
                value.get("removeIndex"), list
            ):
                target = node.get(key)
                if isinstance(target, list):
                    removes = value["removeIndex"]
                    indexes = sorted(
                        {int(i) for i in removes if i is not None},
                        reverse=True,
                    )
                    for idx in indexes:
                        if idx < len(target):
                            target.pop(idx)
            else:
                node[key] = value
        # numbers are added, lists appended
        return apply_increments(node, increments)
