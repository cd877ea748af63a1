# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for MongoCacheAdapter — integration tests using mongomock-motor."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

mongomock_motor = pytest.importorskip("mongomock_motor", reason="mongomock-motor not installed")

from mongomock_motor import AsyncMongoMockClient
from pymongo.results import UpdateResult

from riftcache.cache.adapters.mongodb import BootstrapState, MongoCacheAdapter
from riftcache.cache.ports.outbound import CacheAdapter
from riftcache.cache.types import CacheReply
from riftcache.kernel.exceptions import CacheBootstrapException, CacheNotInitializedException

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    mock_client = AsyncMongoMockClient()
    yield mock_client
    mock_client.close()


@pytest.fixture
def adapter(client):
    return MongoCacheAdapter(client)


def _collection(client):
    return client["riot-api"]["cache"]


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


# ===========================================================================
# 1. Bootstrap
# ===========================================================================


class TestBootstrap:
    def test_default_names(self, adapter):
        assert adapter.database_name == "riot-api"
        assert adapter.collection_name == "cache"
        assert adapter.key_index_name == "riot-api-cache-key-index"
        assert adapter.ttl_index_name == "riot-api-cache-ttl-index"

    def test_starts_uninitialized(self, adapter):
        assert adapter.state is BootstrapState.UNINITIALIZED

    def test_protocol_compliance(self, adapter):
        assert isinstance(adapter, CacheAdapter)

    async def test_start_creates_collection_and_indexes(self, adapter, client):
        await adapter.start()

        assert adapter.state is BootstrapState.READY
        assert "cache" in await client["riot-api"].list_collection_names()

        indexes = await _collection(client).index_information()
        assert indexes["riot-api-cache-key-index"]["unique"] is True
        assert indexes["riot-api-cache-key-index"]["key"] == [("key", 1)]
        assert indexes["riot-api-cache-ttl-index"]["expireAfterSeconds"] == 0
        assert indexes["riot-api-cache-ttl-index"]["key"] == [("expiresAt", 1)]

    async def test_existing_collection_and_indexes_are_reused(self, client):
        await client["riot-api"].create_collection("cache")
        await _collection(client).create_index([("key", 1)], unique=True, name="riot-api-cache-key-index")

        adapter = MongoCacheAdapter(client)
        await adapter.start()

        indexes = await _collection(client).index_information()
        assert "riot-api-cache-key-index" in indexes
        assert "riot-api-cache-ttl-index" in indexes

    async def test_custom_names(self, client):
        adapter = MongoCacheAdapter(client, database="other-db", collection="entries")
        await adapter.set("k", {"a": 1}, 0)

        assert await client["other-db"]["entries"].count_documents({}) == 1

    async def test_bootstrap_runs_once_for_concurrent_callers(self, adapter):
        with patch.object(adapter, "_bootstrap", wraps=adapter._bootstrap) as bootstrap:
            results = await asyncio.gather(
                adapter.set("a", {"v": 1}, 0),
                adapter.get("a"),
                adapter.set("b", {"v": 2}, 5000),
                adapter.flush(),
            )

        assert bootstrap.call_count == 1
        assert results[0] == CacheReply.OK
        assert results[3] == CacheReply.OK

    async def test_operations_before_bootstrap_complete_succeed(self, adapter, client):
        gate = asyncio.Event()
        original = client.list_database_names

        async def slow_list_database_names(*args, **kwargs):
            await gate.wait()
            return await original(*args, **kwargs)

        with patch.object(client, "list_database_names", side_effect=slow_list_database_names):
            pending_set = asyncio.create_task(adapter.set("early", {"a": 1}, 0))
            await asyncio.sleep(0.01)
            assert adapter.state is BootstrapState.CONNECTING
            assert not pending_set.done()

            gate.set()
            assert await pending_set == CacheReply.OK

        assert await adapter.get("early") == {"a": 1}

    async def test_cancelled_caller_does_not_cancel_bootstrap(self, adapter, client):
        gate = asyncio.Event()
        original = client.list_database_names

        async def slow_list_database_names(*args, **kwargs):
            await gate.wait()
            return await original(*args, **kwargs)

        with patch.object(client, "list_database_names", side_effect=slow_list_database_names):
            first = asyncio.create_task(adapter.get("k"))
            await asyncio.sleep(0.01)
            first.cancel()
            with pytest.raises(asyncio.CancelledError):
                await first

            second = asyncio.create_task(adapter.get("k"))
            gate.set()
            assert await second is None

        assert adapter.state is BootstrapState.READY

    async def test_bootstrap_failure_surfaces_on_every_operation(self):
        client = MagicMock()
        client.list_database_names = AsyncMock(side_effect=ConnectionError("no route to host"))
        adapter = MongoCacheAdapter(client)

        with pytest.raises(CacheBootstrapException) as exc_info:
            await adapter.get("k")
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.code == "CACHE_BOOTSTRAP"
        assert adapter.state is BootstrapState.FAILED

        with pytest.raises(CacheBootstrapException):
            await adapter.set("k", {"a": 1}, 0)
        with pytest.raises(CacheBootstrapException):
            await adapter.flush()
        client.list_database_names.assert_awaited_once()

    async def test_missing_collection_after_bootstrap_is_fatal(self, adapter):
        with patch.object(adapter, "_bootstrap", new=AsyncMock(return_value=None)):
            with pytest.raises(CacheNotInitializedException):
                await adapter.get("k")

    async def test_stop_closes_client(self):
        client = MagicMock()
        adapter = MongoCacheAdapter(client)
        await adapter.stop()
        client.close.assert_called_once()

    async def test_stop_cancels_pending_bootstrap(self, adapter, client):
        gate = asyncio.Event()

        async def never_answers(*args, **kwargs):
            await gate.wait()

        with patch.object(client, "list_database_names", side_effect=never_answers):
            waiter = asyncio.create_task(adapter.get("k"))
            await asyncio.sleep(0.01)
            assert adapter.state is BootstrapState.CONNECTING

            await adapter.stop()

        assert adapter._bootstrap_task.cancelled()
        with pytest.raises(asyncio.CancelledError):
            await waiter


# ===========================================================================
# 2. Cache operations
# ===========================================================================


class TestMongoCacheOperations:
    async def test_set_writes_single_document_with_expiry(self, adapter, client):
        before = _utcnow()
        assert await adapter.set("key", {"a": 1}, 5000) == "OK"

        assert await _collection(client).count_documents({}) == 1
        doc = await _collection(client).find_one({"key": "key"})
        assert doc["key"] == "key"
        assert doc["value"] == {"a": 1}
        expected = before + timedelta(milliseconds=5000)
        assert abs((doc["expiresAt"] - expected).total_seconds()) < 2

    async def test_zero_ttl_stores_null_expiry(self, adapter, client):
        await adapter.set("key", {"a": 1}, 0)

        doc = await _collection(client).find_one({"key": "key"})
        assert doc["expiresAt"] is None
        assert await adapter.get("key") == {"a": 1}

    async def test_get_returns_value_without_metadata(self, adapter):
        await adapter.set("key", {"a": 1, "b": 2}, 5000)

        value = await adapter.get("key")
        assert value == {"a": 1, "b": 2}
        assert "key" not in value
        assert "expiresAt" not in value

    async def test_get_missing_returns_none(self, adapter):
        assert await adapter.get("missing") is None

    async def test_set_is_upsert(self, adapter, client):
        await adapter.set("key", {"v": 1}, 0)
        await adapter.set("key", {"v": 2}, 5000)

        assert await _collection(client).count_documents({}) == 1
        assert await adapter.get("key") == {"v": 2}

    async def test_expired_document_is_not_returned(self, adapter, client):
        await adapter.start()
        await _collection(client).insert_one(
            {"key": "old", "value": {"a": 1}, "expiresAt": _utcnow() - timedelta(minutes=5)}
        )

        assert await adapter.get("old") is None

    async def test_flush_removes_all_documents(self, adapter, client):
        await adapter.set("a", {"v": 1}, 0)
        await adapter.set("b", {"v": 2}, 5000)

        assert await adapter.flush() == CacheReply.OK
        assert await _collection(client).count_documents({}) == 0
        assert await adapter.get("a") is None

    async def test_unacknowledged_write_returns_error(self, adapter):
        await adapter.start()
        collection = MagicMock()
        collection.update_one = AsyncMock(return_value=UpdateResult({}, acknowledged=False))
        adapter._collection = collection

        assert await adapter.set("key", {"a": 1}, 5000) == CacheReply.ERROR
        collection.update_one.assert_awaited_once()
        query, update = collection.update_one.await_args.args
        assert query == {"key": "key"}
        assert update["$set"]["value"] == {"a": 1}
        assert update["$set"]["key"] == "key"
        assert isinstance(update["$set"]["expiresAt"], datetime)
        assert collection.update_one.await_args.kwargs == {"upsert": True}

    async def test_negative_ttl_rejected(self, adapter):
        with pytest.raises(ValueError):
            await adapter.set("key", {"a": 1}, -1)
