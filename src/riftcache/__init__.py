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
"""riftcache — TTL-aware response cache over memory, Redis and MongoDB."""

from riftcache.cache import (
    BootstrapState,
    CacheAdapter,
    CacheReply,
    InMemoryCache,
    MongoCacheAdapter,
    RedisCacheAdapter,
    cache_put,
    cacheable,
    create_cache_adapter,
)
from riftcache.core.config import Config

__version__ = "0.1.0"

__all__ = [
    "BootstrapState",
    "CacheAdapter",
    "CacheReply",
    "Config",
    "InMemoryCache",
    "MongoCacheAdapter",
    "RedisCacheAdapter",
    "cache_put",
    "cacheable",
    "create_cache_adapter",
]
