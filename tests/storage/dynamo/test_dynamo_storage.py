# type: ignore
import os

import pytest
from common.sync_and_async_client import SyncAndAsyncClient
from moto import mock_aws

from lemon_core.core.exceptions import BadRequestError, NotFoundError
from lemon_core.storage.dynamo import (
    DummyStorageService,
    DynamoService,
    DynamoStorageService,
)

DATA_FOLDER = os.path.join(os.path.dirname(__file__), "..", "..", "data")
TABLE = "test-lemon-storage"


@pytest.fixture
def storage(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    with mock_aws():
        dynamo = DynamoService(table_name=TABLE, id_name="id")
        dynamo.create_table()
        dynamo.save_item("A0", {"type": "account", "name": "alpha"})
        yield DynamoStorageService(TABLE, ["name", "count"])


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_dynamo_storage(storage, async_call: bool):
    client = SyncAndAsyncClient(storage, async_call)
    assert storage.hello() == f"dynamo-storage-service:{TABLE}/id/6"
    assert storage.fields == ["id", "type", "stereo", "meta", "name", "count"]

    # unknown fields are dropped
    saved = await client.save("B0", {"type": "bulk", "extra": 1})
    assert saved == {"id": "B0", "type": "bulk"}
    assert await client.read("B0") == {"id": "B0", "type": "bulk"}

    updated = await client.update("B0", {"name": "bravo", "extra": 2})
    assert updated == {"id": "B0", "name": "bravo"}

    # missing fields are set, numbers are added
    result = await client.increment("B0", {"count": 2})
    assert result == {"id": "B0", "count": 2}
    result = await client.increment("B0", {"count": 3, "meta": "m"})
    assert result["count"] == 5
    assert result["meta"] == "m"
    with pytest.raises(BadRequestError, match="number is required at key:"):
        await client.increment("B0", {"count": "x"})

    assert await client.read_or_create("A0", {"name": "x"}) == {
        "id": "A0",
        "type": "account",
        "name": "alpha",
    }
    created = await client.read_or_create("C0", {"name": "charlie"})
    assert created == {"id": "C0", "name": "charlie"}

    deleted = await client.delete("B0")
    assert deleted == {
        "id": "B0",
        "type": "bulk",
        "meta": "m",
        "name": "bravo",
        "count": 5,
    }
    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:B0"):
        await client.read("B0")


def test_dynamo_storage_table_required():
    with pytest.raises(BadRequestError, match="@table"):
        DynamoStorageService("", ["name"])


def get_dummy() -> DummyStorageService:
    return DummyStorageService("dummy-storage-data", folder=DATA_FOLDER)


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_dummy_storage(async_call: bool):
    service = get_dummy()
    client = SyncAndAsyncClient(service, async_call)
    assert service.hello() == "dummy-storage-service:memory"
    assert service.hello("test") == "dummy-storage-service:test"

    assert await client.read("A0") == {
        "id": "A0",
        "type": "account",
        "name": "alpha",
        "count": 1,
    }
    with pytest.raises(NotFoundError, match="404 NOT FOUND - id:XX"):
        await client.read("XX")
    with pytest.raises(BadRequestError, match="@id"):
        await client.read(" ")

    updated = await client.update("A0", {"name": "ALPHA"})
    assert updated == {"id": "A0", "name": "ALPHA"}
    assert (await client.read("A0"))["type"] == "account"

    result = await client.increment("A0", {"count": 2, "tag": "x"})
    assert result == {"id": "A0", "count": 3, "tag": "x"}
    result = await client.increment("N0", {"count": -1})
    assert result == {"id": "N0", "count": -1}
    with pytest.raises(BadRequestError, match="number is required at key:"):
        await client.increment("A0", {"count": "1"})
    with pytest.raises(BadRequestError, match="400 ILLEGAL ARGUMENT"):
        await client.increment("A0", {"name": 1})

    created = await client.read_or_create("C0", {"name": "charlie"})
    assert created == {"id": "C0", "name": "charlie"}
    assert await client.read("C0") == {"id": "C0", "name": "charlie"}

    deleted = await client.delete("B0")
    assert deleted == {"id": "B0", "type": "account", "name": "bravo"}
    with pytest.raises(NotFoundError):
        await client.delete("B0")


def test_dummy_storage_required():
    with pytest.raises(BadRequestError, match="@dataFile"):
        DummyStorageService("")
    service = get_dummy()
    with pytest.raises(BadRequestError, match="@item is required"):
        service.save("A0", None)
