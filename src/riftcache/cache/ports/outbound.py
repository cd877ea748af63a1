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
"""Cache adapter protocol."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from riftcache.cache.types import CacheReply


@runtime_checkable
class CacheAdapter(Protocol):
    """Abstract cache interface.

    All cache backends (in-memory, Redis, MongoDB) implement this protocol.
    ``ttl`` is in milliseconds measured from the call; ``0`` stores the
    value with no expiry. ``get`` returns ``None`` for a missing or expired
    key and never raises for a miss.
    """

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int = 0) -> CacheReply: ...

    async def flush(self) -> CacheReply: ...
