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
"""Redis-backed cache adapter."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Literal

import redis.asyncio as aioredis

from riftcache.cache.types import CacheReply, ttl_millis

_logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "fm-riot-api-"

FlushScope = Literal["database", "namespace"]

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


class RedisCacheAdapter:
    """Cache adapter that delegates to a ``redis.asyncio.Redis``-like client.

    Expiry is left to Redis itself. Every key is stored under
    ``key_prefix`` so the cache can share an instance with unrelated data.
    Values are compact-JSON encoded.

    ``flush_scope="database"`` clears the whole logical database with
    FLUSHDB; ``"namespace"`` deletes only keys under the prefix.
    """

    def __init__(
        self,
        client: Any,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        flush_scope: FlushScope = "database",
    ) -> None:
        if flush_scope not in ("database", "namespace"):
            raise ValueError(f"Unknown flush scope '{flush_scope}'")
        self._client = client
        self._key_prefix = key_prefix
        self._flush_scope = flush_scope

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisCacheAdapter:
        """Build an adapter around a new client for *url*."""
        return cls(aioredis.from_url(url), **kwargs)

    @property
    def client(self) -> Any:
        return self._client

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    def _key(self, key: str) -> str:
        return self._key_prefix + key

    async def get(self, key: str) -> Any | None:
        """Retrieve and deserialize a cached value."""
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            _logger.warning("Failed to deserialize cached value for key '%s'", key)
            raise

    async def set(self, key: str, value: Any, ttl: int = 0) -> CacheReply:
        """Serialize and store a value; Redis expires it after *ttl* ms."""
        millis = ttl_millis(ttl)
        payload = json.dumps(value, separators=(",", ":"))
        if millis >= 1000:
            reply = await self._client.setex(self._key(key), millis // 1000, payload)
        elif millis:
            # SETEX would round a sub-second ttl to 0, so expire in milliseconds
            reply = await self._client.set(self._key(key), payload, px=millis)
        else:
            reply = await self._client.set(self._key(key), payload)
        return CacheReply.OK if reply else CacheReply.ERROR

    async def flush(self) -> CacheReply:
        """Clear the database, or only this adapter's namespace."""
        if self._flush_scope == "namespace":
            pattern = _GLOB_SPECIAL.sub(r"\\\1", self._key_prefix) + "*"
            keys = [k async for k in self._client.scan_iter(match=pattern)]
            if keys:
                await self._client.delete(*keys)
            _logger.debug("Flushed %d keys under prefix '%s'", len(keys), self._key_prefix)
            return CacheReply.OK

        await self._client.flushdb()
        return CacheReply.OK

    async def start(self) -> None:
        """Validate connectivity by pinging Redis."""
        await self._client.ping()

    async def stop(self) -> None:
        """Close the underlying Redis connection."""
        await self._client.aclose()
