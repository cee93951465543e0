from __future__ import annotations

import copy
from decimal import Decimal
from numbers import Number
from typing import Any

from .exceptions import BadRequestError


def is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _illegal(key: str, current: Any, value: Any) -> BadRequestError:
    return BadRequestError(
        f"400 ILLEGAL ARGUMENT - .{key} "
        f"({type(current).__name__}) += {type(value).__name__}"
    )


def increment(key: str, current: Any, value: Any) -> Any:
    """Add the increment to the current value of one field.

    Numbers are added and lists are appended. A missing field
    takes the increment as it is.

    Raises:
        BadRequestError: "400 ILLEGAL ARGUMENT" when the types
            of the field and the increment do not match.
    """
    if isinstance(value, list):
        if current is None:
            return copy.deepcopy(value)
        if not isinstance(current, list):
            raise _illegal(key, current, value)
        return list(current) + copy.deepcopy(value)
    if not is_number(value):
        raise _illegal(key, current, value)
    if current is None:
        return value
    if not is_number(current):
        raise _illegal(key, current, value)
    if isinstance(current, Decimal) or isinstance(value, Decimal):
        return Decimal(str(current)) + Decimal(str(value))
    return current + value


def apply_increments(node: dict, increments: dict | None) -> dict:
    for key, value in (increments or {}).items():
        node[key] = increment(key, node.get(key), value)
    return node
