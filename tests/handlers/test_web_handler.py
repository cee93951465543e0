# type: ignore
import json

import pytest

from lemon_core.core.exceptions import BadRequestError, NotFoundError
from lemon_core.handlers import LambdaHandler, LambdaWEBHandler


def web_event(
    method: str,
    resource: str,
    path: dict | None = None,
    body=None,
    headers: dict | None = None,
    query: dict | None = None,
):
    return {
        "resource": resource,
        "path": resource,
        "httpMethod": method,
        "headers": headers or {},
        "pathParameters": path,
        "queryStringParameters": query,
        "requestContext": {
            "requestId": "r1",
            "accountId": "085403634746",
            "domainName": "api.example.com",
            "identity": {"sourceIp": "127.0.0.1"},
        },
        "body": body,
    }


class AccountController:
    def hello(self):
        return "account-controller"

    def type(self):
        return "account"

    def decode(self, mode, id, cmd):
        if mode == "GET" and not cmd:
            return self.do_get
        if mode == "PUT":
            return self.do_put
        if mode == "POST" and cmd == "move":
            return self.do_move
        return None

    async def do_get(self, id, param, body, context):
        if id == "XX":
            raise NotFoundError(f"404 NOT FOUND - id:{id}")
        return {"id": id, "param": param, "identity": context["identity"]}

    def do_put(self, id, param, body, context):
        if body.get("name") == "":
            raise BadRequestError("400 INVALID - name")
        if body.get("name") == "boom":
            raise ValueError("boom")
        return {"id": id, "body": body}

    def do_move(self, id, param, body, context):
        raise BadRequestError(f"302 FOUND - https://example.com/{id}")


def get_handler() -> tuple[LambdaHandler, LambdaWEBHandler]:
    handler = LambdaHandler()
    web = LambdaWEBHandler(
        handler, register=True, name="lemon-api", version="1.0.0"
    )
    web.add_controller(AccountController())
    return handler, web


@pytest.mark.asyncio
async def test_web_handler():
    handler, web = get_handler()
    assert handler.get_handler("web") is web
    assert web.has_handler("account")
    assert not web.has_handler("echo")

    response = await handler.handle(web_event("GET", "/", {}))
    assert response["statusCode"] == 200
    assert response["body"] == "lemon-api/1.0.0"

    response = await handler.handle(
        web_event(
            "GET",
            "/account/{id}",
            {"type": "account", "id": "A0"},
            headers={"x-lemon-identity": '{"sid":"s1"}'},
            query={"limit": "1"},
        )
    )
    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {
        "id": "A0",
        "param": {"limit": "1"},
        "identity": {"sid": "s1"},
    }

    # type from the resource path
    response = await handler.handle(
        web_event(
            "PUT",
            "/account/{id}",
            {"id": "A0"},
            body='{"name":"alpha"}',
        )
    )
    assert json.loads(response["body"]) == {
        "id": "A0",
        "body": {"name": "alpha"},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event, status, body",
    [
        (
            web_event("GET", "/account/{id}", {"id": "XX"}),
            404,
            "404 NOT FOUND - id:XX",
        ),
        (
            web_event("GET", "/account", {}),
            404,
            "404 NOT FOUND - LIST /account/",
        ),
        (
            web_event("DELETE", "/nope/{id}", {"id": "A0"}),
            404,
            "404 NOT FOUND - DELETE /nope/A0",
        ),
        (
            web_event("POST", "/account/{id}/{cmd}", {"id": "A0"}),
            404,
            "404 NOT FOUND - POST /account/A0",
        ),
        (
            web_event("PUT", "/account/{id}", {"id": "A0"}, '{"name":""}'),
            400,
            "400 INVALID - name",
        ),
        (
            web_event("PUT", "/account/{id}", {"id": "A0"}, '{"name":"boom"}'),
            503,
            "boom",
        ),
    ],
)
async def test_web_handler_errors(event: dict, status: int, body: str):
    handler, _ = get_handler()

    response = await handler.handle(event)
    assert response["statusCode"] == status
    assert response["body"] == body


@pytest.mark.asyncio
async def test_web_handler_redirect():
    handler, _ = get_handler()

    response = await handler.handle(
        web_event(
            "POST", "/account/{id}/{cmd}", {"id": "A0", "cmd": "move"}
        )
    )
    assert response["statusCode"] == 302
    assert response["headers"]["Location"] == "https://example.com/A0"


@pytest.mark.asyncio
async def test_web_handler_decoder():
    _, web = get_handler()

    def decoder(mode, id, cmd):
        if mode != "POST":
            return None
        return lambda id, param, body, context: {"id": id, "body": body}

    web.set_handler("echo", decoder)
    assert web.has_handler("echo")
    decoders = web.get_handler_decoders()
    assert sorted(decoders) == ["account", "echo"]
    assert decoders["echo"] is decoder
    assert decoders["account"]("PUT", "A0", "") is not None

    response = await web.handle(
        web_event(
            "POST",
            "/echo/{id}",
            {"id": "E0"},
            body="a=1&b=2",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
    )
    assert json.loads(response["body"]) == {
        "id": "E0",
        "body": {"a": "1", "b": "2"},
    }

    response = await web.handle(
        web_event("POST", "/echo/{id}", {"id": "E0"}, body="plain")
    )
    assert json.loads(response["body"]) == {"id": "E0", "body": "plain"}

    with pytest.raises(ValueError, match="@type"):
        web.set_handler(None, decoder)
    with pytest.raises(ValueError, match="@controller"):
        web.add_controller(None)


def test_pack_context():
    _, web = get_handler()

    event = web_event(
        "GET",
        "/account",
        {},
        headers={"x-lemon-identity": "lemon", "Host": "host.example.com"},
    )
    event["requestContext"]["domainName"] = None
    event["requestContext"]["identity"] = {
        "sourceIp": "10.0.0.1",
        "cognitoIdentityId": "c1",
        "accountId": "a1",
        "cognitoIdentityPoolId": "p1",
    }
    assert web.pack_context(event) == {
        "identity": {
            "name": "lemon",
            "cognitoId": "c1",
            "accountId": "a1",
            "cognitoPoolId": "p1",
        },
        "clientIp": "10.0.0.1",
        "requestId": "r1",
        "accountId": "085403634746",
        "domain": "host.example.com",
    }

    context = web.pack_context(web_event("GET", "/", {}))
    assert context["identity"] == {}
    assert context["domain"] == "api.example.com"

    event = web_event("GET", "/", {}, headers={"x-lemon-identity": "{bad}"})
    assert web.pack_context(event)["identity"] == {}
