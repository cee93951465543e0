# type: ignore
import os

import pytest
from common.sync_and_async_client import SyncAndAsyncClient

from lemon_core.core.exceptions import BadRequestError, NotFoundError
from lemon_core.storage.dynamo import (
    DummyDynamoScanService,
    DummyDynamoService,
)

DATA_FOLDER = os.path.join(os.path.dirname(__file__), "..", "..", "data")


def get_service() -> DummyDynamoService:
    return DummyDynamoService(
        "dummy-dynamo-data",
        table_name="test",
        id_name="id",
        folder=DATA_FOLDER,
    )


def test_load_data():
    service = get_service()
    assert service.hello() == "dummy-dynamo-service:test"

    page = service.list_items()
    assert page.total == 4
    assert [item["id"] for item in page.list] == ["00", "A0"]
    page = service.list_items(2, 2)
    assert [item["id"] for item in page.list] == ["B0", "C0"]

    with pytest.raises(NotFoundError, match="data-file"):
        DummyDynamoService(
            "dummy-none", table_name="test", id_name="id", folder=DATA_FOLDER
        )
    with pytest.raises(BadRequestError, match="should be array"):
        service.load({"id": "A0"})


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_save_read_update_delete(async_call: bool):
    client = SyncAndAsyncClient(get_service(), async_call)

    result = await client.read_item("A0")
    assert result == {
        "id": "A0",
        "type": "account",
        "name": "alpha",
        "count": 1,
        "tags": ["a", "b"],
    }
    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:XX"):
        await client.read_item("XX")

    saved = await client.save_item("D0", {"type": "", "name": "delta"})
    assert saved == {"id": "D0", "type": None, "name": "delta"}

    updated = await client.update_item(
        "A0",
        None,
        {"name": "ALPHA", "tags": {"setIndex": [[0, "z"]]}},
        {"count": 2, "score": 1, "tags": ["c"]},
    )
    assert updated == {
        "id": "A0",
        "type": "account",
        "name": "ALPHA",
        "count": 3,
        "score": 1,
        "tags": ["z", "b", "c"],
    }
    updated = await client.update_item(
        "A0", None, {"tags": {"removeIndex": [0, 9]}}
    )
    assert updated["tags"] == ["b", "c"]
    with pytest.raises(BadRequestError, match="400 INVALID INDEX"):
        await client.update_item("A0", None, {"tags": {"setIndex": [[5, 1]]}})
    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:XX"):
        await client.update_item("XX", None, {"name": "x"})

    result = await client.delete_item("D0")
    assert result is None
    with pytest.raises(NotFoundError):
        await client.read_item("D0")


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_update_increments(async_call: bool):
    client = SyncAndAsyncClient(get_service(), async_call)

    updated = await client.update_item("A0", None, None, {"slot": 1})
    assert updated["slot"] == 1
    updated = await client.update_item("A0", None, None, {"slot": -2})
    assert updated["slot"] == -1

    # zero is kept, not dropped
    updated = await client.update_item("A0", None, {"count": 0})
    assert updated["count"] == 0
    updated = await client.update_item("A0", None, None, {"hits": 0})
    assert updated["hits"] == 0
    assert (await client.read_item("A0"))["count"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize(
    "increments",
    [{"name": 1}, {"count": "1"}, {"count": True}, {"type": ["x"]}],
)
async def test_update_increments_illegal(async_call: bool, increments):
    client = SyncAndAsyncClient(get_service(), async_call)

    with pytest.raises(BadRequestError, match="^400 ILLEGAL ARGUMENT - "):
        await client.update_item("A0", None, None, increments)
    result = await client.read_item("A0")
    assert result["name"] == "alpha"
    assert result["count"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_scan(async_call: bool):
    service = DummyDynamoScanService(
        "dummy-dynamo-data",
        table_name="test",
        id_name="id",
        folder=DATA_FOLDER,
    )
    client = SyncAndAsyncClient(service, async_call)
    assert service.hello() == "dummy-dynamo-scan-service:test"

    result = await client.scan()
    assert result.count == 4
    assert result.last == {}

    account = [{"key": "type", "comparator": "=", "value": "account"}]
    result = await client.scan(None, None, account)
    assert [item["id"] for item in result.list] == ["A0", "B0"]

    # the limit counts the scanned items like DynamoDB
    result = await client.scan(2, None, account)
    assert [item["id"] for item in result.list] == ["A0"]
    assert result.last == {"id": "A0"}
    result = await client.scan(2, result.last, account)
    assert [item["id"] for item in result.list] == ["B0"]
    assert result.last == {}


def test_scan_inline_data():
    service = DummyDynamoScanService(
        data=[{"id": "A", "no": 1}, {"id": "A", "no": 2}],
        table_name="test",
        id_name="id",
        sort_name="no",
    )
    result = service.scan(1)
    assert result.list == [{"id": "A", "no": 1}]
    assert result.last == {"id": "A", "no": 1}
    result = service.scan(1, result.last)
    assert result.list == [{"id": "A", "no": 2}]
    assert result.last == {}
