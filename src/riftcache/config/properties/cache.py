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
"""Cache configuration properties."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from riftcache.core.config import config_properties


class RedisProperties(BaseModel):
    """Remote key-value backend settings (riftcache.cache.redis.*)."""

    url: str = ""
    key_prefix: str = "fm-riot-api-"
    flush_scope: Literal["database", "namespace"] = "database"


class MongoDBProperties(BaseModel):
    """Document-store backend settings (riftcache.cache.mongodb.*)."""

    uri: str = ""
    database: str = Field(default="riot-api", min_length=1)
    collection: str = Field(default="cache", min_length=1)
    key_index: str = "riot-api-cache-key-index"
    ttl_index: str = "riot-api-cache-ttl-index"


@config_properties(prefix="riftcache.cache")
class CacheProperties(BaseModel):
    """Configuration for the cache (riftcache.cache.*).

    ``provider`` selects the backend once, at construction. ``auto`` picks
    Redis when a Redis URL is set, MongoDB when a MongoDB URI is set, and
    process memory otherwise.
    """

    provider: Literal["auto", "memory", "redis", "mongodb"] = "auto"
    redis: RedisProperties = Field(default_factory=RedisProperties)
    mongodb: MongoDBProperties = Field(default_factory=MongoDBProperties)
