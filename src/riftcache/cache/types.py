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
"""Cache value types shared by all backends."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import Any


class CacheReply(StrEnum):
    """Confirmation returned by ``set`` and ``flush``."""

    OK = "OK"
    ERROR = "Error"


@dataclass(slots=True)
class CacheEntry:
    """A stored value with its absolute expiry.

    ``expires_at`` is ``None`` for entries that never expire.
    """

    value: Any
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


def ttl_millis(ttl: int | timedelta | None) -> int:
    """Normalise a TTL to whole milliseconds; ``None`` means no expiry."""
    if ttl is None:
        return 0
    if isinstance(ttl, timedelta):
        ttl = int(ttl.total_seconds() * 1000)
    if ttl < 0:
        raise ValueError(f"ttl must be >= 0 milliseconds, got {ttl}")
    return ttl
