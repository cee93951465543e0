"""
Normalization of the errors from the search engine.

Errors from every engine generation end up as one exception whose
message reads "<status> <TYPE> - <reason>", like
"409 VERSION CONFLICT ENGINE - [A0]: version conflict".
"""

from __future__ import annotations

__all__ = ["as_error", "as_json", "handler", "parse_meta"]

import json
import logging
from typing import Any, Callable

from elasticsearch import ApiError

from ...core.exceptions import BaseError, error_from_status
from ._client import LEGACY_ERRORS
from ._models import ErrorReason, ErrorReasonDetail

_logger = logging.getLogger(__name__)


def as_json(e: Any) -> Any:
    """Convert the thrown value into a plain dict."""
    if isinstance(e, ApiError):
        body = e.body
        error = body.get("error") if isinstance(body, dict) else None
        # the client falls back to the whole body when no error type
        message = e.message if error else "Response Error"
        return {
            "message": message,
            "statusCode": e.status_code,
            "meta": {"statusCode": e.status_code, "body": body},
        }
    # connection errors of the 7.x clients have no status
    if isinstance(e, LEGACY_ERRORS) and isinstance(e.status_code, int):
        body = e.info if isinstance(e.info, dict) else None
        error = body.get("error") if body else None
        message = e.error if error else "Response Error"
        return {
            "message": message,
            "statusCode": e.status_code,
            "meta": {"statusCode": e.status_code, "body": body},
        }
    if isinstance(e, BaseException):
        data = {k: v for k, v in vars(e).items() if not k.startswith("_")}
        return data | {"message": str(e)}
    return e


def parse_meta(meta: Any) -> Any:
    if isinstance(meta, str) and meta:
        try:
            if meta.startswith("[") and meta.endswith("]"):
                return {"list": json.loads(meta)}
            if meta.startswith("{") and meta.endswith("}"):
                return json.loads(meta)
            return {"type": "string", "value": meta}
        except ValueError as e:
            return {"type": "string", "value": meta, "error": str(e)}
    if meta is None or meta == "":
        return None
    if isinstance(meta, dict):
        return meta
    return {"type": type(meta).__name__, "value": meta}


def _as_type(name: Any) -> str:
    text = "" if name is None else f"{name}"
    return " ".join(text.upper().split("_")[:-1])


def _as_int(value: Any, default: int | None = None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if len(value) > 0 else None
    return value


def _get(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _parse_reason(data: dict) -> ErrorReasonDetail | None:
    meta = data.get("meta")
    # 7.x and later
    if isinstance(meta, dict):
        type = _as_type(data.get("message"))
        status = _as_int(
            meta.get("statusCode"), 404 if "NOT FOUND" in type else 400
        )
        return ErrorReasonDetail(
            status=status,
            type=type or ("NOT FOUND" if status == 404 else "UNKNOWN"),
            reason=_get(meta, "body", "error", "reason"),
        )

    # 6.x
    if not data.get("response"):
        return None
    response = parse_meta(data.get("response")) or {}
    cause = _first(_get(response, "error", "root_cause"))
    status = _as_int(
        _get(response, "error", "status") or response.get("status")
    )
    reason = _get(response, "error", "reason")
    if reason is None:
        not_found = (
            response.get("found") is False
            or response.get("result") == "not_found"
        )
        reason = "NOT FOUND" if not_found else ""
    type = _as_type(_get(cause, "type"))
    return ErrorReasonDetail(
        status=status,
        type=type or reason,
        reason=reason,
        cause=cause,
    )


def as_error(e: Any) -> ErrorReason:
    """Normalize the error into `ErrorReason`.

    Args:
        e:
            Exception or raw error payload from the client.

    Returns:
        Normalized error with status 0 if unknown.
    """
    data = as_json(e)
    if not isinstance(data, dict):
        data = {"message": f"{data}"}
    message = f"{data.get('message') or data.get('msg') or ''}"
    reason = _parse_reason(data)
    status = _as_int(data.get("statusCode")) or (
        reason.status if reason else None
    )
    return ErrorReason(
        status=status or 0,
        message=message or (reason.reason if reason else None),
        reason=reason,
    )


def handler(
    name: str,
    callback: Callable[[BaseError, ErrorReason], Any] | None = None,
) -> Callable[[Any], Any]:
    """Create the error handler of one operation.

    Unknown errors are logged and raised as they are. Others are
    converted into the status error, then given to the callback
    or raised.

    Args:
        name:
            Operation name for the log.
        callback:
            Called with the converted error and its reason.
            Its result is returned by the handler.
    """

    def handle(e: Any) -> Any:
        error = as_error(e)
        if not error.status:
            _logger.error("! err[%s]@handler = %r", name, e)
            if isinstance(e, BaseException):
                raise e
            raise error_from_status(500, f"{e}")
        detail = error.reason.reason if error.reason else None
        type = error.reason.type if error.reason else ""
        converted = error_from_status(
            error.status,
            f"{error.status} {type} - {detail or error.message}",
        )
        if callback is not None:
            return callback(converted, error)
        raise converted

    return handle
