"""
Scan filter conditions and their compilation into DynamoDB expressions.
"""

from __future__ import annotations

__all__ = [
    "AndFilter",
    "BetweenCondition",
    "ComparisonCondition",
    "CompiledFilter",
    "Condition",
    "ExistenceCondition",
    "Filter",
    "FilterCompiler",
    "NotFilter",
    "OrFilter",
    "StringCondition",
    "compile_filter",
    "match_filter",
    "parse_filter",
    "simplify_filter",
]

import re
from decimal import Decimal
from typing import Any, Literal, Union

from ...core import DataModel, DataModelField
from ...core.exceptions import BadRequestError


class ComparisonCondition(DataModel):
    """Arithmetic comparison. `!=` is a shortcut of NOT `=`."""

    key: str
    comparator: Literal["=", "!=", "<=", "<", ">=", ">"]
    value: Any

    kind: Literal["comparison"] = "comparison"


class BetweenCondition(DataModel):
    """Inclusive range: from <= value <= to."""

    key: str
    from_: Any = DataModelField(alias="from")
    to: Any

    kind: Literal["between"] = "between"


class ExistenceCondition(DataModel):
    """Field exists or not."""

    key: str
    exists: bool

    kind: Literal["existence"] = "existence"


class StringCondition(DataModel):
    """String begins with or contains the value."""

    key: str
    operator: Literal["begins_with", "contains"]
    value: str

    kind: Literal["string"] = "string"


class AndFilter(DataModel):
    filters: list[Filter]

    kind: Literal["and"] = "and"


class OrFilter(DataModel):
    or_: list[Filter] = DataModelField(alias="or")

    kind: Literal["or"] = "or"


class NotFilter(DataModel):
    not_: Filter = DataModelField(alias="not")

    kind: Literal["not"] = "not"


Condition = Union[
    ComparisonCondition,
    BetweenCondition,
    ExistenceCondition,
    StringCondition,
]

Filter = Union[
    ComparisonCondition,
    BetweenCondition,
    ExistenceCondition,
    StringCondition,
    AndFilter,
    OrFilter,
    NotFilter,
]

AndFilter.model_rebuild()
OrFilter.model_rebuild()
NotFilter.model_rebuild()


def parse_filter(obj: Any) -> Filter:
    """Convert the wire shape of a filter into the condition models.

    Args:
        obj:
            A list (AND), a dict with "or" (list) or "not",
            a leaf condition dict, or an already parsed model.

    Returns:
        Parsed filter.
    """
    if isinstance(obj, DataModel):
        return obj  # type: ignore[return-value]
    if isinstance(obj, (list, tuple)):
        return AndFilter(filters=[parse_filter(f) for f in obj])
    if not isinstance(obj, dict):
        raise BadRequestError(f"@filter is invalid - {obj!r}")
    if "or" in obj and isinstance(obj["or"], (list, tuple)):
        return OrFilter(or_=[parse_filter(f) for f in obj["or"]])
    if "not" in obj:
        return NotFilter(not_=parse_filter(obj["not"]))
    if "key" not in obj:
        raise BadRequestError(f"@filter is invalid - {obj!r}")
    if "comparator" in obj:
        return ComparisonCondition.from_dict(obj)
    if "from" in obj and "to" in obj:
        return BetweenCondition.from_dict(obj)
    if "exists" in obj:
        return ExistenceCondition.from_dict(obj)
    if "operator" in obj:
        return StringCondition.from_dict(obj)
    raise BadRequestError(f"@filter is invalid - {obj!r}")


def simplify_filter(filter: Filter) -> Filter | bool:
    """Fold empty combinators into plain booleans.

    An empty AND is always true and an empty OR is always false.
    """
    if isinstance(filter, AndFilter):
        filters: list = []
        for f in filter.filters:
            sf = simplify_filter(f)
            if sf is False:
                return False
            if sf is not True:
                filters.append(sf)
        return AndFilter(filters=filters) if filters else True
    if isinstance(filter, OrFilter):
        filters = []
        for f in filter.or_:
            sf = simplify_filter(f)
            if sf is True:
                return True
            if sf is not False:
                filters.append(sf)
        return OrFilter(or_=filters) if filters else False
    if isinstance(filter, NotFilter):
        sf = simplify_filter(filter.not_)
        if isinstance(sf, bool):
            return not sf
        return NotFilter(not_=sf)
    return filter


class CompiledFilter(DataModel):
    expression: str | None = None
    """FilterExpression, None when the filter matches everything."""

    names: dict[str, str] = {}
    """ExpressionAttributeNames."""

    values: dict[str, Any] = {}
    """ExpressionAttributeValues."""


class FilterCompiler:
    NONE_FIELD = "__none"

    names: dict[str, str]
    values: dict[str, Any]

    def __init__(self) -> None:
        self.names = dict()
        self.values = dict()

    def compile(self, filter: Any) -> CompiledFilter:
        sf = simplify_filter(parse_filter(filter))
        if sf is True:
            return CompiledFilter()
        if sf is False:
            name = self.name_alias(self.NONE_FIELD)
            expression = (
                f"attribute_exists({name}) AND attribute_not_exists({name})"
            )
        else:
            expression = self.convert(sf)
        return CompiledFilter(
            expression=expression,
            names=dict(self.names),
            values=dict(self.values),
        )

    def name_alias(self, key: str) -> str:
        base = f"#{re.sub(r'[^A-Za-z0-9_]', '_', key)}"
        alias = base
        i = 1
        while alias in self.names and self.names[alias] != key:
            alias = f"{base}_{i}"
            i += 1
        self.names[alias] = key
        return alias

    def value_alias(self, key: str, value: Any) -> str:
        base = f":{re.sub(r'[^A-Za-z0-9_]', '_', key)}"
        i = 0
        while f"{base}{i}" in self.values:
            i += 1
        alias = f"{base}{i}"
        self.values[alias] = (
            Decimal(str(value)) if isinstance(value, float) else value
        )
        return alias

    def convert(self, filter: Filter) -> str:
        if isinstance(filter, AndFilter):
            return f"({' AND '.join(self.convert(f) for f in filter.filters)})"
        if isinstance(filter, OrFilter):
            return f"({' OR '.join(self.convert(f) for f in filter.or_)})"
        if isinstance(filter, NotFilter):
            return f"NOT {self.convert(filter.not_)}"
        if isinstance(filter, ComparisonCondition):
            name = self.name_alias(filter.key)
            value = self.value_alias(filter.key, filter.value)
            if filter.comparator == "!=":
                return f"NOT {name} = {value}"
            return f"{name} {filter.comparator} {value}"
        if isinstance(filter, BetweenCondition):
            name = self.name_alias(filter.key)
            lower = self.value_alias(filter.key, filter.from_)
            upper = self.value_alias(filter.key, filter.to)
            return f"{name} BETWEEN {lower} AND {upper}"
        if isinstance(filter, ExistenceCondition):
            name = self.name_alias(filter.key)
            if filter.exists:
                return f"attribute_exists({name})"
            return f"attribute_not_exists({name})"
        if isinstance(filter, StringCondition):
            name = self.name_alias(filter.key)
            value = self.value_alias(filter.key, filter.value)
            return f"{filter.operator}({name}, {value})"
        raise BadRequestError(f"@filter is invalid - {filter!r}")


def compile_filter(filter: Any) -> CompiledFilter:
    return FilterCompiler().compile(filter)


def _compare(lhs: Any, op: str, rhs: Any) -> bool:
    if isinstance(lhs, bool) != isinstance(rhs, bool):
        return False
    if isinstance(lhs, (int, float, Decimal)) and isinstance(
        rhs, (int, float, Decimal)
    ):
        lhs, rhs = Decimal(str(lhs)), Decimal(str(rhs))
    elif type(lhs) is not type(rhs):
        return False
    try:
        if op == "=":
            return lhs == rhs
        if op == "<":
            return lhs < rhs
        if op == "<=":
            return lhs <= rhs
        if op == ">":
            return lhs > rhs
        if op == ">=":
            return lhs >= rhs
    except TypeError:
        return False
    raise BadRequestError(f"@comparator is invalid - {op}")


def match_filter(filter: Any, item: dict) -> bool:
    """Evaluate a filter against an in-memory item.

    A missing field never compares true, so `!=` on a missing
    field matches (it is NOT of a false comparison).
    """
    filter = parse_filter(filter)
    if isinstance(filter, AndFilter):
        return all(match_filter(f, item) for f in filter.filters)
    if isinstance(filter, OrFilter):
        return any(match_filter(f, item) for f in filter.or_)
    if isinstance(filter, NotFilter):
        return not match_filter(filter.not_, item)
    if isinstance(filter, ExistenceCondition):
        return (filter.key in item) == filter.exists
    if isinstance(filter, ComparisonCondition) and filter.comparator == "!=":
        if filter.key not in item:
            return True
        return not _compare(item[filter.key], "=", filter.value)
    if filter.key not in item:
        return False
    value = item[filter.key]
    if isinstance(filter, ComparisonCondition):
        return _compare(value, filter.comparator, filter.value)
    if isinstance(filter, BetweenCondition):
        return _compare(value, ">=", filter.from_) and _compare(
            value, "<=", filter.to
        )
    if isinstance(filter, StringCondition):
        if filter.operator == "begins_with":
            return isinstance(value, str) and value.startswith(filter.value)
        if isinstance(value, str):
            return filter.value in value
        if isinstance(value, (list, set, tuple)):
            return filter.value in value
        return False
    raise BadRequestError(f"@filter is invalid - {filter!r}")
