"""
Handler of the SQS events.
"""

from __future__ import annotations

__all__ = ["LambdaSQSHandler"]

from typing import Any

from ._base import LambdaSubHandler, as_number, parse_body, run_parallel


class LambdaSQSHandler(LambdaSubHandler):
    """Notifies the listeners with each SQS record.

    Message attributes (with `callback` if any) become the param,
    and the body is parsed as JSON object when it looks like one.
    """

    def __init__(self, lambda_handler: Any = None, register: bool = False):
        super().__init__(lambda_handler, register, "sqs")

    def parse_record(self, record: dict) -> tuple[dict, Any]:
        param: dict[str, Any] = {}
        for key, attribute in (record.get("messageAttributes") or {}).items():
            if not attribute:
                continue
            type = attribute.get("dataType") or ""
            value = attribute.get("stringValue") or ""
            if type == "Number":
                value = as_number(value)
            param[key] = value
        return param, parse_body(record.get("body"))

    async def handle(self, event: dict, context: Any = None) -> None:
        records = event.get("Records") or []
        self._logger.debug("handle(len=%s)...", len(records))

        async def on_record(record: dict, index: int) -> str:
            param, body = self.parse_record(record)
            if param.get("callback"):
                self._logger.debug(
                    "> callback[%s] = %s", index, param["callback"]
                )
            return await self.notify("SQS", param, body)

        self._last_result = await run_parallel(records, on_record)
