"""
Partial update payloads with Painless increment scripts.
"""

from __future__ import annotations

__all__ = ["UpdateConverter", "prepare_update"]

from typing import Any

from ._version import is_old_es6, parse_version


class UpdateConverter:
    """Builds the body of the update request.

    Without increments the update is a plain partial `doc`. With
    increments one Painless script assigns the plain fields and
    applies the increments, and the `upsert` document creates the
    item when it is missing.
    """

    id_name: str
    old_engine: bool

    def __init__(self, id_name: str, old_engine: bool = False):
        self.id_name = id_name
        self.old_engine = old_engine

    def convert_update(
        self,
        id: str,
        item: dict | None,
        increments: dict | None = None,
    ) -> dict:
        if not increments:
            return {"doc": dict(item or {})}

        script_lines: list[str] = []
        params: dict[str, Any] = {}

        def add_field(key: str, value: Any) -> tuple[str, str]:
            # names are passed as params, never spliced into the source
            n = len(params) // 2
            params[f"k{n}"] = key
            params[f"v{n}"] = value
            return f"ctx._source[params.k{n}]", f"params.v{n}"

        for key, value in (item or {}).items():
            if key == self.id_name:
                continue
            field, param = add_field(key, value)
            script_lines.append(f"{field} = {param};")

        for key, value in increments.items():
            field, param = add_field(key, value)
            if isinstance(value, list):
                script_lines.append(
                    f"if ({field} == null) {{ "
                    f"{field} = new ArrayList({param}); "
                    f"}} else {{ "
                    f"for (def v : {param}) {{ {field}.add(v); }} "
                    f"}}"
                )
            else:
                script_lines.append(
                    f"if ({field} == null) {{ "
                    f"{field} = {param}; "
                    f"}} else {{ "
                    f"{field} += {param}; "
                    f"}}"
                )

        script: dict[str, Any] = {
            "source": "\n".join(script_lines),
            "params": params,
        }
        if self.old_engine:
            script["lang"] = "painless"
        upsert = dict(item or {}) | dict(increments) | {self.id_name: id}
        return {"upsert": upsert, "script": script}


def prepare_update(
    id_name: str,
    id: str,
    item: dict | None,
    increments: dict | None = None,
    version: str = "6.8",
) -> dict:
    old_engine = is_old_es6(parse_version(version))
    return UpdateConverter(id_name, old_engine).convert_update(
        id, item, increments
    )
