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
"""Process-local cache adapter."""

from __future__ import annotations

import time
from typing import Any

from riftcache.cache.types import CacheEntry, CacheReply, ttl_millis


class InMemoryCache:
    """In-memory cache with lazily checked TTLs.

    Expired entries are removed only when they are next read or when the
    cache is flushed; there is no background sweep. Each instance owns its
    own mapping.
    """

    def __init__(self) -> None:
        self._store: dict[str, CacheEntry] = {}

    @property
    def size(self) -> int:
        """Number of entries held, including expired ones not yet read."""
        return len(self._store)

    async def get(self, key: str) -> Any | None:
        """Get a value by key. Returns None if missing or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.is_expired(time.monotonic()):
            del self._store[key]
            return None

        return entry.value

    async def set(self, key: str, value: Any, ttl: int = 0) -> CacheReply:
        """Store a value; a zero ttl never expires."""
        millis = ttl_millis(ttl)
        expires_at = time.monotonic() + millis / 1000 if millis else None
        self._store[key] = CacheEntry(value=value, expires_at=expires_at)
        return CacheReply.OK

    async def flush(self) -> CacheReply:
        """Remove all entries."""
        self._store = {}
        return CacheReply.OK
