from __future__ import annotations

from typing import Any, Callable


class NCall:
    """Native SDK call bound to its payload."""

    function: Callable
    args: dict[str, Any] | None

    def __init__(
        self,
        function: Callable,
        args: dict[str, Any] | None = None,
    ):
        self.function = function
        self.args = args

    def __repr__(self) -> str:
        return str(self.function)

    def invoke(self) -> Any:
        args = self.args if self.args is not None else dict()
        return self.function(**args)

    async def ainvoke(self) -> Any:
        args = self.args if self.args is not None else dict()
        return await self.function(**args)
