from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Iterable

from ..core import Provider

# fn(source, param, body, context)
Listener = Callable[[str, dict, Any, Any], Any]

MAX_PARALLEL = 5


async def call_maybe_async(function: Callable, *args: Any) -> Any:
    result = function(*args)
    if inspect.isawaitable(result):
        return await result
    return result


async def run_parallel(
    items: Iterable[Any],
    function: Callable[[Any, int], Awaitable[Any]],
    limit: int = MAX_PARALLEL,
) -> list[Any]:
    """Run the function per item, at most `limit` at once, in order."""
    semaphore = asyncio.Semaphore(limit)

    async def run(item: Any, index: int) -> Any:
        async with semaphore:
            return await function(item, index)

    return list(
        await asyncio.gather(
            *[run(item, i) for i, item in enumerate(items)]
        )
    )


def as_number(value: Any) -> Any:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    return int(number) if number.is_integer() else number


def parse_body(message: Any) -> Any:
    """Parse JSON object text, other messages are wrapped as data."""
    if (
        isinstance(message, str)
        and message.startswith("{")
        and message.endswith("}")
    ):
        return json.loads(message)
    return {"data": message}


class LambdaSubHandler(Provider):
    """Handler of one event source with its listeners."""

    type: str | None

    _listeners: list[Listener]
    _last_result: Any

    def __init__(
        self,
        lambda_handler: Any = None,
        register: bool = False,
        type: str | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(logger=logger)
        self.type = type
        self._listeners = []
        self._last_result = None
        if lambda_handler is not None and register and type:
            lambda_handler.set_handler(type, self)

    @property
    def last_result(self) -> Any:
        return self._last_result

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    async def notify(self, source: str, param: dict, body: Any) -> str:
        """Call the listeners, returns their indexes or errors joined."""

        async def call(index: int, listener: Listener) -> str:
            try:
                result = await call_maybe_async(
                    listener, source, param, body, None
                )
                self._logger.debug(">> [%s].res = %s", index, result)
                return f"{index}"
            except Exception as e:
                self._logger.error(
                    "! err[%s] = %s, param = %s", index, e, param
                )
                return f"ERR[{index}] - {e}"

        results = await asyncio.gather(
            *[call(i, fn) for i, fn in enumerate(self._listeners)]
        )
        return ",".join(results)

    async def handle(self, event: dict, context: Any = None) -> Any:
        raise NotImplementedError
