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
"""MongoDB-backed cache adapter."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from pymongo.errors import CollectionInvalid

from riftcache.cache.types import CacheReply, ttl_millis
from riftcache.kernel.exceptions import CacheBootstrapException, CacheNotInitializedException

_logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "riot-api"
DEFAULT_COLLECTION = "cache"
DEFAULT_KEY_INDEX = "riot-api-cache-key-index"
DEFAULT_TTL_INDEX = "riot-api-cache-ttl-index"


class BootstrapState(StrEnum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    BOOTSTRAPPING = "bootstrapping"
    READY = "ready"
    FAILED = "failed"


def _utcnow() -> datetime:
    # pymongo returns naive datetimes and treats naive input as UTC
    return datetime.now(UTC).replace(tzinfo=None)


class MongoCacheAdapter:
    """Cache adapter storing entries as ``{key, value, expiresAt}`` documents.

    Expiry is delegated to a TTL index on ``expiresAt``; documents written
    with ``ttl=0`` carry ``expiresAt: null`` and are never swept. Because the
    server's TTL monitor runs periodically, ``get`` also filters out
    documents whose ``expiresAt`` has already passed.

    Before the first operation the adapter connects and ensures the
    database, collection and both indexes exist. That bootstrap runs once,
    as a shared task every early caller awaits. If it fails, every
    operation raises :class:`CacheBootstrapException`.

    Args:
        client: A ``motor`` client (or a compatible mock client).
        database: Database name.
        collection: Collection name.
        key_index: Name of the unique index on ``key``.
        ttl_index: Name of the TTL index on ``expiresAt``.
    """

    def __init__(
        self,
        client: Any,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        key_index: str = DEFAULT_KEY_INDEX,
        ttl_index: str = DEFAULT_TTL_INDEX,
    ) -> None:
        self._client = client
        self._database_name = database
        self._collection_name = collection
        self._key_index_name = key_index
        self._ttl_index_name = ttl_index
        self._collection: Any = None
        self._state = BootstrapState.UNINITIALIZED
        self._bootstrap_task: asyncio.Task[None] | None = None

    @classmethod
    def from_url(cls, uri: str, **kwargs: Any) -> MongoCacheAdapter:
        """Build an adapter around a new Motor client for *uri*."""
        return cls(AsyncIOMotorClient(uri), **kwargs)

    @property
    def client(self) -> Any:
        return self._client

    @property
    def database_name(self) -> str:
        return self._database_name

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def key_index_name(self) -> str:
        return self._key_index_name

    @property
    def ttl_index_name(self) -> str:
        return self._ttl_index_name

    @property
    def state(self) -> BootstrapState:
        return self._state

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    async def _bootstrap(self) -> None:
        try:
            self._state = BootstrapState.CONNECTING
            # first round trip opens the connection
            database_names = await self._client.list_database_names()

            self._state = BootstrapState.BOOTSTRAPPING
            if self._database_name not in database_names:
                _logger.info("Creating cache database '%s'", self._database_name)
            db = self._client[self._database_name]

            if self._collection_name not in await db.list_collection_names():
                try:
                    await db.create_collection(self._collection_name)
                except CollectionInvalid:
                    # created by another process since we listed
                    pass
            collection = db[self._collection_name]

            indexes = await collection.index_information()
            if self._key_index_name not in indexes:
                await collection.create_index(
                    [("key", ASCENDING)],
                    unique=True,
                    name=self._key_index_name,
                )
            if self._ttl_index_name not in indexes:
                await collection.create_index(
                    [("expiresAt", ASCENDING)],
                    expireAfterSeconds=0,
                    name=self._ttl_index_name,
                )
        except Exception as exc:
            self._state = BootstrapState.FAILED
            _logger.error("Cache bootstrap failed for '%s.%s'", self._database_name, self._collection_name, exc_info=True)
            raise CacheBootstrapException(
                f"Failed to bootstrap MongoDB cache '{self._database_name}.{self._collection_name}': {exc}",
                code="CACHE_BOOTSTRAP",
                context={"database": self._database_name, "collection": self._collection_name},
            ) from exc

        self._collection = collection
        self._state = BootstrapState.READY
        _logger.debug("Cache collection '%s.%s' ready", self._database_name, self._collection_name)

    async def _ready(self) -> Any:
        """Wait for bootstrap and return the collection handle."""
        if self._bootstrap_task is None:
            self._bootstrap_task = asyncio.create_task(self._bootstrap())
        # cancelling one waiter must not cancel the shared bootstrap
        await asyncio.shield(self._bootstrap_task)

        if self._collection is None:
            raise CacheNotInitializedException(
                "MongoDB collection not initialized",
                code="CACHE_NOT_INITIALIZED",
                context={"state": str(self._state)},
            )
        return self._collection

    # ------------------------------------------------------------------
    # CacheAdapter
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the stored value, without any storage metadata."""
        collection = await self._ready()
        document = await collection.find_one(
            {"key": key, "$or": [{"expiresAt": None}, {"expiresAt": {"$gt": _utcnow()}}]},
            {"_id": 0, "value": 1},
        )
        if document is None:
            return None
        return document.get("value")

    async def set(self, key: str, value: Any, ttl: int = 0) -> CacheReply:
        """Upsert the entry; ``ERROR`` if the write was not acknowledged."""
        collection = await self._ready()
        millis = ttl_millis(ttl)
        expires_at = _utcnow() + timedelta(milliseconds=millis) if millis else None

        result = await collection.update_one(
            {"key": key},
            {"$set": {"value": value, "key": key, "expiresAt": expires_at}},
            upsert=True,
        )
        if not result.acknowledged:
            _logger.warning("Cache write for key '%s' was not acknowledged", key)
            return CacheReply.ERROR
        return CacheReply.OK

    async def flush(self) -> CacheReply:
        """Delete every document in the cache collection."""
        collection = await self._ready()
        await collection.delete_many({})
        return CacheReply.OK

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Run (or join) the bootstrap, raising if it fails."""
        await self._ready()

    async def stop(self) -> None:
        """Cancel a bootstrap still in flight and close the underlying client."""
        task = self._bootstrap_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._client.close()
