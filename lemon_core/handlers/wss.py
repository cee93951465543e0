"""
Handler of the WebSocket events from API Gateway.
"""

from __future__ import annotations

__all__ = ["LambdaWSSHandler"]

import asyncio
import json
import logging
from typing import Any, Callable

import boto3

from ..core import run_async
from ..core.exceptions import BadRequestError, InternalError
from ._base import LambdaSubHandler, call_maybe_async
from ._response import failure, success

WSC_REQUEST_ID = "$wsc-request-id"
WSS_REQUEST_ID = "$wss-request-id"
MAX_TIMEOUT = 15.0

# handler(method, data) returns the body to reply
WSSCall = Callable[[str, dict], Any]
# poster(url, connection_id, payload)
Poster = Callable[[str, str, dict], Any]


def _parse_json_object(value: Any) -> Any:
    if (
        isinstance(value, str)
        and value.startswith("{")
        and value.endswith("}")
    ):
        return json.loads(value)
    return value


class LambdaWSSHandler(LambdaSubHandler):
    """Routes the WebSocket events to the handler function.

    CONNECT and DISCONNECT call the handler. MESSAGE either resolves
    a request the server sent to the client (with `$wss-request-id`)
    or calls the handler and posts the result back to the client
    (with its `$wsc-request-id`).
    """

    handler: WSSCall | None
    timeout: float
    nparams: dict[str, Any]

    _poster: Poster | None
    _waits: dict[str, asyncio.Future]
    _next: int

    def __init__(
        self,
        lambda_handler: Any = None,
        register: bool = False,
        handler: WSSCall | None = None,
        poster: Poster | None = None,
        timeout: float = MAX_TIMEOUT,
        nparams: dict[str, Any] = dict(),
        logger: logging.Logger | None = None,
    ):
        """Initialize.

        Args:
            lambda_handler:
                Dispatcher to register to.
            register:
                Register as the "wss" handler.
            handler:
                Called with the method (CONNECT, DISCONNECT or MESSAGE)
                and the data, returns the body to reply.
            poster:
                Posts the payload to the connection, defaults to
                the API Gateway management API.
            timeout:
                Seconds to wait for the client response.
            nparams:
                Native parameters to boto3 client.
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(lambda_handler, register, "wss", logger=logger)
        self.handler = handler
        self.timeout = timeout
        self.nparams = nparams
        self._poster = poster
        self._waits = dict()
        self._next = 0

    def _post_to_connection(
        self, url: str, connection_id: str, payload: dict
    ) -> Any:
        client = boto3.client(
            "apigatewaymanagementapi", endpoint_url=url, **self.nparams
        )
        return client.post_to_connection(
            ConnectionId=connection_id,
            Data=json.dumps(payload).encode("utf-8"),
        )

    async def post_message_to_client(
        self, url: str, connection_id: str, payload: dict
    ) -> Any:
        """Post the payload without waiting for the response."""
        if not isinstance(payload, dict):
            raise BadRequestError("payload object is required!")
        self._logger.debug(
            "postMessageToClient(%s, %s)...", url, connection_id
        )
        if self._poster is not None:
            return await call_maybe_async(
                self._poster, url, connection_id, payload
            )
        return await run_async(
            self._post_to_connection, url, connection_id, payload
        )

    async def send_message_to_client(
        self, url: str, connection_id: str, payload: dict
    ) -> Any:
        """Send the payload and wait for the client response.

        Raises:
            InternalError: "500 TIMEOUT - ID:<id>" when no response
                arrives in time.
        """
        if not isinstance(payload, dict):
            raise BadRequestError("payload object is required!")
        self._next = (self._next + 1) % 100
        request_id = f"WSS{self._next + 100}{connection_id}"
        payload[WSS_REQUEST_ID] = request_id
        future = asyncio.get_running_loop().create_future()
        self._waits[request_id] = future
        try:
            await self.post_message_to_client(url, connection_id, payload)
            return await asyncio.wait_for(future, self.timeout)
        except asyncio.TimeoutError as e:
            raise InternalError(f"500 TIMEOUT - ID:{request_id}") from e
        finally:
            self._waits.pop(request_id, None)

    def resolve_wait(self, request_id: str, data: dict) -> None:
        future = self._waits.pop(request_id, None)
        status_code = data.get("statusCode") or 500
        body = _parse_json_object(data.get("body"))
        self._logger.debug(
            ">> waits[%s] %s = %s", request_id, status_code, future
        )
        if future is None or future.done():
            return
        if status_code == 200:
            future.set_result(body)
        else:
            future.set_exception(InternalError(f"{body or status_code}"))

    async def call(self, method: str, data: dict | None = None) -> dict:
        self._logger.debug("call(%s)...", method)
        if self.handler is None:
            return {"statusCode": 404, "body": "404 NOT FOUND - handler"}
        try:
            body = await call_maybe_async(self.handler, method, data or {})
            return {"statusCode": 200, "body": body}
        except Exception as e:
            self._logger.error("> call.error = %s", e)
            message = f"{e}"
            status_code = 404 if "404 NOT FOUND" in message else 503
            return {"statusCode": status_code, "body": message}

    async def handle(self, event: dict, context: Any = None) -> Any:
        request_context = event.get("requestContext") or {}
        event_type = request_context.get("eventType") or ""
        route_key = request_context.get("routeKey") or ""
        connection_id = request_context.get("connectionId") or ""
        url = (
            f"https://{request_context.get('domainName')}"
            f"/{request_context.get('stage')}"
        )
        self._logger.debug("> route(%s/%s)", route_key, event_type)

        if event_type in ("CONNECT", "DISCONNECT"):
            response = await self.call(event_type, {"context": context})
            if response["statusCode"] == 200:
                return success()
            return response
        if event_type != "MESSAGE":
            return failure(f"400 UNKNOWN - event:{event_type}")
        if route_key == "echo":
            await self.post_message_to_client(url, connection_id, event)
            return success()

        data = _parse_json_object(event.get("body"))
        if not isinstance(data, dict):
            return failure(
                "body should be JSON object. "
                f"but type:{type(data).__name__}"
            )
        server_request_id = data.get(WSS_REQUEST_ID) or ""
        client_request_id = data.get(WSC_REQUEST_ID) or ""
        if server_request_id:
            self.resolve_wait(server_request_id, data)
            return success()

        data = data | {
            "context": context,
            "requestContext": request_context,
        }
        message = await self.call("MESSAGE", data)
        if not client_request_id:
            return success()
        message[WSC_REQUEST_ID] = client_request_id
        await self.post_message_to_client(url, connection_id, message)
        return success()
