"""
Main entry of AWS Lambda, dispatching the event to the sub handlers.
"""

from __future__ import annotations

__all__ = ["LambdaHandler"]

import asyncio
import logging
from typing import Any

from ..core import Provider
from ..core.exceptions import BadRequestError
from ._base import LambdaSubHandler, call_maybe_async

SERVICE_TYPES = (
    "web",
    "sns",
    "sqs",
    "wss",
    "dds",
    "notification",
    "schedule",
    "cognito",
)


class LambdaHandler(Provider):
    """Finds the type of the event and calls the registered handler.

    A handler is either a `LambdaSubHandler` or a function of
    `(event, context)`, sync or async.
    """

    _handlers: dict[str, Any]

    def __init__(self, logger: logging.Logger | None = None):
        super().__init__(logger=logger)
        self._handlers = dict()

    def hello(self) -> str:
        return "lambda-handler"

    def set_handler(self, type: str, handler: Any) -> None:
        if type not in SERVICE_TYPES:
            raise BadRequestError(f"400 INVALID TYPE - type:{type}")
        self._handlers[type] = handler

    def get_handler(self, type: str) -> Any:
        return self._handlers.get(type)

    @staticmethod
    def find_service(event: dict) -> str:
        """Detect the service type from the shape of the event."""
        if not isinstance(event, dict):
            return ""
        request_context = event.get("requestContext")
        if request_context:
            headers = event.get("headers") or {}
            if "x-amz-sns-message-type" in headers:
                return "notification"
            if "pathParameters" in event:
                return "web"
            if request_context.get("eventType"):
                return "wss"
            return ""
        if event.get("cron"):
            return "schedule"
        if event.get("userPoolId"):
            return "cognito"
        records = event.get("Records")
        if isinstance(records, list) and records:
            record = records[0] or {}
            if record.get("Sns"):
                return "sns"
            if record.get("eventSource") == "aws:sqs":
                return "sqs"
            if record.get("dynamodb"):
                return "dds"
        return ""

    async def handle(self, event: dict, context: Any = None) -> Any:
        type = self.find_service(event)
        self._logger.info("handle(%s)...", type or "unknown")
        handler = self._handlers.get(type)
        if handler is None:
            raise BadRequestError(f"400 UNKNOWN - service:{type}")
        if isinstance(handler, LambdaSubHandler):
            return await handler.handle(event, context)
        return await call_maybe_async(handler, event, context)

    def __call__(self, event: dict, context: Any = None) -> Any:
        return asyncio.run(self.handle(event, context))
