"""
Handler of the REST events from API Gateway.

The path `/{type}/{id}/{cmd}` and the HTTP method pick the function
of the controller registered for the type.
"""

from __future__ import annotations

__all__ = ["LambdaWEBHandler", "WEBController"]

import json
import logging
import re
from typing import Any, Callable, Protocol
from urllib.parse import parse_qsl

from ..core.exceptions import NotFoundError
from ._base import LambdaSubHandler, call_maybe_async
from ._response import failure, notfound, redirect, success

HEADER_LEMON_IDENTITY = "x-lemon-identity"

# next(id, param, body, context)
NextHandler = Callable[[str, dict, Any, dict], Any]
# decoder(mode, id, cmd) returns the next handler or None
NextDecoder = Callable[[str, str, str], NextHandler | None]

_STATUS_MESSAGE = re.compile(r"^[1-9][0-9]{2} [A-Z ]+")


class WEBController(Protocol):
    def hello(self) -> str: ...

    def type(self) -> str: ...

    def decode(self, mode: str, id: str, cmd: str) -> NextHandler | None: ...


def _parse_body(body: Any, content_type: str) -> Any:
    if not body or not isinstance(body, str):
        return body
    if content_type.startswith("application/json"):
        return json.loads(body)
    if (body.startswith("{") and body.endswith("}")) or (
        body.startswith("[") and body.endswith("]")
    ):
        return json.loads(body)
    if content_type.startswith("application/x-www-form-urlencoded"):
        return dict(parse_qsl(body))
    return body


def _parse_identity(value: str) -> dict:
    if not value:
        return {}
    if value.startswith("{") and value.endswith("}"):
        try:
            return json.loads(value)
        except ValueError:
            return {}
    return {"name": value}


class LambdaWEBHandler(LambdaSubHandler):
    """Routes the API Gateway proxy events to the controllers.

    The mode is `LIST` for GET without id and cmd, otherwise the
    HTTP method. Errors become the responses by their message:
    "404 NOT FOUND" is 404, "301 MOVED - <url>" redirects, and any
    other message with the status prefix keeps its status.
    """

    name: str
    version: str

    _handlers: dict[str, NextDecoder | WEBController]

    def __init__(
        self,
        lambda_handler: Any = None,
        register: bool = False,
        name: str = "LEMON API",
        version: str = "0.0.0",
        logger: logging.Logger | None = None,
    ):
        """Initialize.

        Args:
            lambda_handler:
                Dispatcher to register to.
            register:
                Register as the "web" handler.
            name:
                Name of the API, replied to `GET /`.
            version:
                Version of the API, replied to `GET /`.
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(lambda_handler, register, "web", logger=logger)
        self.name = name
        self.version = version
        self._handlers = dict()

    def set_handler(self, type: str, decoder: NextDecoder) -> None:
        if not isinstance(type, str):
            raise ValueError("@type (string) is required!")
        self._handlers[type] = decoder

    def has_handler(self, type: str) -> bool:
        return type in self._handlers

    def add_controller(self, controller: WEBController) -> None:
        if controller is None:
            raise ValueError("@controller (object) is required!")
        type = controller.type()
        self._logger.debug(
            "> web-controller[%s] = %s", type, controller.hello()
        )
        self._handlers[type] = controller

    def get_handler_decoders(self) -> dict[str, NextDecoder]:
        return {
            type: handler if callable(handler) else handler.decode
            for type, handler in self._handlers.items()
        }

    def transform_to_param(self, event: dict, context: dict) -> dict:
        """Extract type, mode, id, cmd, param and body of the event."""
        headers = event.get("headers") or {}
        path = event.get("pathParameters") or {}
        content_type = (
            headers.get("content-type") or headers.get("Content-Type") or ""
        ).lower()
        resource = event.get("resource") or event.get("path") or ""
        parts = f"{resource}".split("/")
        method = f"{event.get('httpMethod') or ''}".upper()
        if method == "GET" and not path.get("id") and not path.get("cmd"):
            mode = "LIST"
        else:
            mode = method
        return {
            "type": path.get("type") or (parts[1] if len(parts) > 1 else ""),
            "mode": mode,
            "id": path.get("id"),
            "cmd": path.get("cmd"),
            "param": event.get("queryStringParameters") or {},
            "body": _parse_body(event.get("body"), content_type),
            "context": context,
        }

    def pack_context(self, event: dict, context: Any = None) -> dict:
        """Build the request context from the headers and the event."""
        headers = event.get("headers") or {}
        request_context = event.get("requestContext") or {}
        source = request_context.get("identity") or {}
        identity = _parse_identity(
            f"{headers.get(HEADER_LEMON_IDENTITY) or ''}"
        )
        if source.get("cognitoIdentityId"):
            identity["cognitoId"] = source.get("cognitoIdentityId")
            identity["accountId"] = source.get("accountId")
            identity["cognitoPoolId"] = source.get("cognitoIdentityPoolId")
        return {
            "identity": identity,
            "clientIp": source.get("sourceIp"),
            "requestId": request_context.get("requestId"),
            "accountId": request_context.get("accountId"),
            "domain": (
                request_context.get("domainName")
                or headers.get("Host")
                or headers.get("host")
            ),
        }

    def _decode(self, mode: str, type: str, id: str, cmd: str) -> Any:
        if mode == "LIST" and not type and not id and not cmd:
            return lambda *_: f"{self.name}/{self.version}"
        decoder = self._handlers.get(type)
        if decoder is None:
            return None
        if callable(decoder):
            return decoder(mode, id, cmd)
        return decoder.decode(mode, id, cmd)

    async def handle_protocol(self, param: dict) -> Any:
        """Call the next handler of the type.

        Raises:
            NotFoundError: "404 NOT FOUND - <MODE> /<type>/<id>" when
                no handler decodes the request.
        """
        type = f"{param.get('type') or ''}"
        mode = f"{param.get('mode') or 'GET'}"
        id = f"{param.get('id') or ''}"
        cmd = f"{param.get('cmd') or ''}"
        self._logger.debug("#%s:%s (%s/%s)....", mode, cmd, type, id)

        handler = self._decode(mode, type, id, cmd)
        if handler is None:
            path = f"/{type}/{id}" + (f"/{cmd}" if cmd else "")
            raise NotFoundError(f"404 NOT FOUND - {mode} {path}")
        return await call_maybe_async(
            handler,
            id,
            param.get("param"),
            param.get("body"),
            param.get("context"),
        )

    def as_response(self, e: Exception) -> dict:
        message = f"{e}"
        if message.startswith("404 NOT FOUND"):
            return notfound(message)
        if _STATUS_MESSAGE.match(message):
            status = int(message[:3])
            if status in (301, 302) and message.find(" - ") > 0:
                location = message[message.find(" - ") + 3 :].strip()
                if location:
                    return redirect(location, status)
            return failure(message, status)
        return failure(message)

    async def handle(self, event: dict, context: Any = None) -> Any:
        self._logger.debug("handle(%s)....", event.get("path"))
        param = self.transform_to_param(
            event, self.pack_context(event, context)
        )
        try:
            result = await self.handle_protocol(param)
        except Exception as e:
            self._logger.error(
                "! %s[/%s/%s/%s].err = %s",
                param["mode"],
                param["type"],
                param["id"],
                param["cmd"],
                e,
            )
            return self.as_response(e)
        return success(result)
