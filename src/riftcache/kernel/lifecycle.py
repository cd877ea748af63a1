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
"""Lifecycle protocol for cache adapters that own connections.

Adapters wrapping a network client implement start() and stop() so that an
application can validate connectivity at startup and release connections
on shutdown. Adapters without external resources do not need it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Lifecycle(Protocol):
    """Standard lifecycle for infrastructure adapters."""

    async def start(self) -> None:
        """Establish connections and validate connectivity.

        Raise if the backend is unreachable so startup fails fast.
        """
        ...

    async def stop(self) -> None:
        """Release connections and clean up resources."""
        ...
