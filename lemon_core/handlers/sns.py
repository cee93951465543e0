"""
Handler of the SNS events.
"""

from __future__ import annotations

__all__ = ["LambdaSNSHandler"]

from typing import Any

from ._base import LambdaSubHandler, as_number, parse_body, run_parallel


class LambdaSNSHandler(LambdaSubHandler):
    """Notifies the listeners with each SNS record.

    Message attributes become the param (with the subject), and the
    message becomes the body.
    """

    def __init__(self, lambda_handler: Any = None, register: bool = False):
        super().__init__(lambda_handler, register, "sns")

    def parse_record(self, record: dict) -> tuple[dict, Any]:
        message = record.get("Sns") or {}
        param: dict[str, Any] = {"subject": message.get("Subject")}
        for key, attribute in (message.get("MessageAttributes") or {}).items():
            if not attribute:
                continue
            value = attribute.get("Value")
            if attribute.get("Type") == "Number":
                value = as_number(value)
            param[key] = value
        return param, parse_body(message.get("Message"))

    async def handle(self, event: dict, context: Any = None) -> None:
        records = event.get("Records") or []
        self._logger.debug("handle(len=%s)...", len(records))

        async def on_record(record: dict, index: int) -> str:
            param, body = self.parse_record(record)
            self._logger.debug("> sns[%s].param = %s", index, param)
            return await self.notify("SNS", param, body)

        self._last_result = await run_parallel(records, on_record)
