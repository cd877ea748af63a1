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
"""Declarative caching decorators for async callers."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from riftcache.cache.ports.outbound import CacheAdapter
from riftcache.cache.types import ttl_millis

F = TypeVar("F", bound=Callable[..., Any])


def _resolve_key(func: Callable[..., Any], key: str, args: tuple, kwargs: dict) -> str:
    bound = inspect.signature(func).bind(*args, **kwargs)
    bound.apply_defaults()
    return key.format(**bound.arguments)


def cacheable(
    backend: CacheAdapter,
    key: str,
    ttl: int | timedelta | None = None,
) -> Callable[[F], F]:
    """Cache the return value of an async function, skip execution on hit.

    The `key` parameter supports format-string interpolation with function
    argument names. For example, `key="summoner:{region}:{name}"` expands
    `{region}` and `{name}` from the function's arguments. ``None`` results
    are not cached.

    Args:
        backend: Cache adapter to use.
        key: Key template with {param} placeholders.
        ttl: Time-to-live in milliseconds or as a timedelta; None never expires.
    """
    millis = ttl_millis(ttl)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            resolved_key = _resolve_key(func, key, args, kwargs)

            cached = await backend.get(resolved_key)
            if cached is not None:
                return cached

            result = await func(*args, **kwargs)
            if result is not None:
                await backend.set(resolved_key, result, millis)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def cache_put(
    backend: CacheAdapter,
    key: str,
    ttl: int | timedelta | None = None,
) -> Callable[[F], F]:
    """Always execute the function and refresh the cached result.

    Args:
        backend: Cache adapter to use.
        key: Key template with {param} placeholders.
        ttl: Time-to-live in milliseconds or as a timedelta; None never expires.
    """
    millis = ttl_millis(ttl)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)
            if result is not None:
                await backend.set(_resolve_key(func, key, args, kwargs), result, millis)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
