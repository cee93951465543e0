from __future__ import annotations

__all__ = ["build_response", "failure", "notfound", "redirect", "success"]

import json
from typing import Any


def build_response(status_code: int, body: Any = None) -> dict:
    """Build the API Gateway proxy result."""
    if isinstance(body, str):
        html = body.startswith("<") and body.endswith(">")
        content_type = "text/html" if html else "text/plain"
    else:
        content_type = "application/json"
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": f"{content_type}; charset=utf-8",
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Credentials": True,
        },
        "body": (
            None
            if body is None
            else body if isinstance(body, str) else json.dumps(body)
        ),
    }


def success(body: Any = None) -> dict:
    return build_response(200, body)


def notfound(body: Any = None) -> dict:
    return build_response(404, body)


def failure(body: Any = None, status: int = 503) -> dict:
    return build_response(status, body)


def redirect(location: str, status: int = 300) -> dict:
    response = build_response(status, "")
    response["headers"]["Location"] = location
    return response
