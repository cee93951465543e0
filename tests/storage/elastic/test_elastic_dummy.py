# type: ignore
import os

import pytest
from common.sync_and_async_client import SyncAndAsyncClient

from lemon_core.core.exceptions import BadRequestError, NotFoundError
from lemon_core.storage.elastic import DummyElastic6Service

DATA_FOLDER = os.path.join(os.path.dirname(__file__), "..", "..", "data")


def get_service() -> DummyElastic6Service:
    return DummyElastic6Service(
        "dummy-elastic6-data",
        endpoint="dummy-elastic6",
        index_name="test",
        folder=DATA_FOLDER,
    )


def test_load_data():
    service = get_service()
    assert service.hello() == "dummy-elastic6-service:test"
    assert service.read_item("00") == {
        "$id": "00",
        "id": "00",
        "type": "test",
        "name": "zero",
    }
    with pytest.raises(BadRequestError, match="@dataFile"):
        DummyElastic6Service("", endpoint="dummy", index_name="test")


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_save_read_update_delete(async_call: bool):
    client = SyncAndAsyncClient(get_service(), async_call)

    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:B0"):
        await client.read_item("B0")

    result = await client.save_item("B0", {"type": ""})
    assert result == {"$id": "B0", "type": "", "_version": 1}
    result = await client.read_item("B0")
    assert result == {"id": "B0", "type": ""}

    result = await client.update_item("B0", {"type": "account"})
    assert result == {"id": "B0", "type": "account", "_version": 1}

    # increments
    result = await client.update_item(
        "A0", {"name": "ALPHA"}, {"count": 2, "tags": ["a"]}
    )
    assert result["name"] == "ALPHA"
    assert result["count"] == 3
    assert result["tags"] == ["a"]
    assert result["_version"] == 1
    result = await client.update_item("A0", None, {"tags": ["b"]})
    assert result["tags"] == ["a", "b"]
    assert result["_version"] == 2

    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:XX"):
        await client.update_item("XX", {"type": "x"})

    result = await client.delete_item("B0")
    assert result == {"id": "B0", "type": "account", "_version": 1}
    result = await client.delete_item("B0")
    assert result == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_update_increments(async_call: bool):
    client = SyncAndAsyncClient(get_service(), async_call)

    # missing item is created by the increments
    result = await client.update_item("NEW", None, {"slot": 1})
    assert result == {"id": "NEW", "slot": 1, "_version": 1}
    result = await client.update_item("NEW", None, {"slot": -2})
    assert result["slot"] == -1
    assert result["_version"] == 2

    result = await client.update_item("ZERO", None, {"count": 0})
    assert result == {"id": "ZERO", "count": 0, "_version": 1}
    assert (await client.read_item("ZERO"))["count"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize(
    "increments",
    [{"name": 1}, {"count": "1"}, {"count": {"a": 1}}, {"name": ["x"]}],
)
async def test_update_increments_illegal(async_call: bool, increments):
    client = SyncAndAsyncClient(get_service(), async_call)
    await client.save_item("C0", {"name": "c", "count": 1})

    with pytest.raises(BadRequestError, match="^400 ILLEGAL ARGUMENT - "):
        await client.update_item("C0", None, increments)
    item = await client.read_item("C0")
    assert item == {"id": "C0", "name": "c", "count": 1}
