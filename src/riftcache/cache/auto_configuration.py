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
"""Cache backend selection from configuration."""

from __future__ import annotations

import logging

from riftcache.cache.adapters.memory import InMemoryCache
from riftcache.cache.adapters.mongodb import MongoCacheAdapter
from riftcache.cache.adapters.redis import RedisCacheAdapter
from riftcache.cache.ports.outbound import CacheAdapter
from riftcache.config.properties.cache import CacheProperties
from riftcache.core.config import Config
from riftcache.kernel.exceptions import ConfigurationException

_logger = logging.getLogger(__name__)


def detect_provider(props: CacheProperties) -> str:
    """Pick a provider when ``provider`` is ``auto``."""
    if props.redis.url:
        return "redis"
    if props.mongodb.uri:
        return "mongodb"
    return "memory"


def create_cache_adapter(config: Config | None = None) -> CacheAdapter:
    """Build the configured cache backend.

    Called once at startup; every call returns a new, independent adapter.
    Connections are opened lazily by the adapters themselves.
    """
    props = (config or Config.defaults()).bind(CacheProperties)
    provider = props.provider if props.provider != "auto" else detect_provider(props)

    if provider == "redis":
        if not props.redis.url:
            raise ConfigurationException(
                "riftcache.cache.redis.url is required for the redis provider",
                code="CACHE_CONFIG",
            )
        _logger.info("Using Redis cache (prefix '%s')", props.redis.key_prefix)
        return RedisCacheAdapter.from_url(
            props.redis.url,
            key_prefix=props.redis.key_prefix,
            flush_scope=props.redis.flush_scope,
        )

    if provider == "mongodb":
        if not props.mongodb.uri:
            raise ConfigurationException(
                "riftcache.cache.mongodb.uri is required for the mongodb provider",
                code="CACHE_CONFIG",
            )
        _logger.info("Using MongoDB cache '%s.%s'", props.mongodb.database, props.mongodb.collection)
        return MongoCacheAdapter.from_url(
            props.mongodb.uri,
            database=props.mongodb.database,
            collection=props.mongodb.collection,
            key_index=props.mongodb.key_index,
            ttl_index=props.mongodb.ttl_index,
        )

    _logger.info("Using in-memory cache")
    return InMemoryCache()
