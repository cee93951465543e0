# type: ignore
import asyncio
import json

import pytest

from lemon_core.core.exceptions import InternalError, NotFoundError
from lemon_core.handlers import LambdaHandler, LambdaWSSHandler

URL = "https://ws.example.com/dev"


def wss_event(event_type: str, body=None, route_key: str = "$default"):
    return {
        "requestContext": {
            "eventType": event_type,
            "routeKey": route_key,
            "connectionId": "c1",
            "domainName": "ws.example.com",
            "stage": "dev",
        },
        "body": body,
    }


class Poster:
    def __init__(self):
        self.posted = []

    async def __call__(self, url, connection_id, payload):
        self.posted.append((url, connection_id, payload))


class Calls:
    def __init__(self, result=None, error: Exception | None = None):
        self.calls = []
        self.result = result
        self.error = error

    def __call__(self, method, data):
        self.calls.append((method, data))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_connect_and_disconnect():
    lambda_handler = LambdaHandler()
    calls = Calls("ok")
    LambdaWSSHandler(lambda_handler, True, handler=calls, poster=Poster())

    response = await lambda_handler.handle(wss_event("CONNECT", None))
    assert response["statusCode"] == 200
    response = await lambda_handler.handle(wss_event("DISCONNECT", None))
    assert response["statusCode"] == 200
    assert [method for method, _ in calls.calls] == ["CONNECT", "DISCONNECT"]

    # errors are returned as they are
    wss = LambdaWSSHandler(
        handler=Calls(error=NotFoundError("404 NOT FOUND - id:c1"))
    )
    response = await wss.handle(wss_event("CONNECT"))
    assert response == {"statusCode": 404, "body": "404 NOT FOUND - id:c1"}
    wss = LambdaWSSHandler(handler=Calls(error=ValueError("broken")))
    response = await wss.handle(wss_event("DISCONNECT"))
    assert response == {"statusCode": 503, "body": "broken"}


@pytest.mark.asyncio
async def test_message():
    poster = Poster()
    calls = Calls({"res": 1})
    wss = LambdaWSSHandler(handler=calls, poster=poster)

    # echo
    event = wss_event("MESSAGE", "hi", "echo")
    response = await wss.handle(event)
    assert response["statusCode"] == 200
    assert poster.posted == [(URL, "c1", event)]
    assert calls.calls == []

    # body should be JSON object
    response = await wss.handle(wss_event("MESSAGE", "hello"))
    assert response["statusCode"] == 503
    assert response["body"] == "body should be JSON object. but type:str"

    # reply with the client request id
    body = json.dumps({"$wsc-request-id": "r1", "cmd": "ping"})
    response = await wss.handle(wss_event("MESSAGE", body))
    assert response["statusCode"] == 200
    method, data = calls.calls[-1]
    assert method == "MESSAGE"
    assert data["cmd"] == "ping"
    assert data["requestContext"]["connectionId"] == "c1"
    assert poster.posted[-1] == (
        URL,
        "c1",
        {"statusCode": 200, "body": {"res": 1}, "$wsc-request-id": "r1"},
    )

    # no reply without the client request id
    count = len(poster.posted)
    await wss.handle(wss_event("MESSAGE", json.dumps({"cmd": "ping"})))
    assert len(calls.calls) == 2
    assert len(poster.posted) == count


@pytest.mark.asyncio
async def test_send_message_to_client():
    poster = Poster()
    wss = LambdaWSSHandler(poster=poster, timeout=1)

    async def respond(status_code: int, body):
        while not poster.posted:
            await asyncio.sleep(0)
        request_id = poster.posted[-1][2]["$wss-request-id"]
        poster.posted.clear()
        message = {
            "$wss-request-id": request_id,
            "statusCode": status_code,
            "body": body,
        }
        await wss.handle(wss_event("MESSAGE", json.dumps(message)))
        return request_id

    task = asyncio.create_task(wss.send_message_to_client(URL, "c1", {}))
    request_id = await respond(200, json.dumps({"pong": True}))
    assert request_id == "WSS101c1"
    assert await task == {"pong": True}

    task = asyncio.create_task(wss.send_message_to_client(URL, "c1", {}))
    request_id = await respond(500, "failed")
    assert request_id == "WSS102c1"
    with pytest.raises(InternalError, match="failed"):
        await task


@pytest.mark.asyncio
async def test_send_message_timeout():
    poster = Poster()
    wss = LambdaWSSHandler(poster=poster, timeout=0.01)
    with pytest.raises(InternalError, match="500 TIMEOUT - ID:WSS101c1"):
        await wss.send_message_to_client(URL, "c1", {"cmd": "ping"})
    assert poster.posted[0][2] == {
        "cmd": "ping",
        "$wss-request-id": "WSS101c1",
    }
