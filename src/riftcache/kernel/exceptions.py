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
"""Exception hierarchy for riftcache.

All library exceptions inherit from RiftCacheException, so callers can catch
the base class or a specific subclass.

Categories:
- ConfigurationException: invalid or incomplete cache configuration
- InfrastructureException: backend store failures
- CacheException: failures raised by cache adapters themselves

Cache misses are not errors and never raise. Unacknowledged writes are
reported through ``CacheReply.ERROR`` rather than an exception. Transport
and serialization errors from the underlying drivers propagate unchanged.
"""

from __future__ import annotations


class RiftCacheException(Exception):
    """Base exception for all riftcache errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CACHE_BOOTSTRAP").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(RiftCacheException):
    """Configuration is invalid, e.g. an unknown provider or a missing URL."""


class InfrastructureException(RiftCacheException):
    """Infrastructure failures: database, cache, network."""


class CacheException(InfrastructureException):
    """A cache adapter could not carry out an operation."""


class CacheBootstrapException(CacheException):
    """One-time backend setup (connect, database, collection, indexes) failed.

    Raised to every caller awaiting the bootstrap, and to every later caller,
    so no operation runs against a half-initialized backend.
    """


class CacheNotInitializedException(CacheException):
    """Bootstrap reported success but left no usable collection handle.

    Signals a broken internal invariant; not retryable.
    """
