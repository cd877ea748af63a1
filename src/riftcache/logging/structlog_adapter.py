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
"""StructlogAdapter — renders riftcache's log records through structlog."""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

from riftcache.config.properties.logging import LoggingProperties
from riftcache.core.config import Config

LIBRARY_LOGGER = "riftcache"


class StructlogAdapter:
    """Route the cache's stdlib log records through a structlog formatter.

    The adapters log with ``logging.getLogger(__name__)``: bootstrap progress
    and failures from ``riftcache.cache.adapters.mongodb``, undecodable
    payloads from ``riftcache.cache.adapters.redis``. ``configure`` attaches
    one handler to the ``riftcache`` logger that renders those records as
    console lines or JSON, and applies the levels from
    ``riftcache.logging.level``: ``root`` for the whole library, any other
    entry for that logger name.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream or sys.stdout
        self._handler: logging.Handler | None = None

    def configure(self, config: Config) -> None:
        """Install the handler and levels from the riftcache.logging section."""
        props = config.bind(LoggingProperties)
        levels = {name: str(level).upper() for name, level in props.level.items()}
        json_output = str(props.format).lower() == "json"

        shared: list[structlog.types.Processor] = [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ]
        renderer: structlog.types.Processor
        if json_output:
            shared.append(structlog.processors.format_exc_info)
            renderer = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=False)

        handler = logging.StreamHandler(self._stream)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared,
                processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            )
        )

        library = logging.getLogger(LIBRARY_LOGGER)
        if self._handler is not None:
            library.removeHandler(self._handler)
        library.addHandler(handler)
        library.propagate = False
        self._handler = handler

        self.set_level(LIBRARY_LOGGER, levels.pop("root", "INFO"))
        for name, level in levels.items():
            self.set_level(name, level)

    def set_level(self, name: str, level: str) -> None:
        """Set the log level for a specific stdlib logger."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def close(self) -> None:
        """Detach the handler and hand riftcache records back to the root logger."""
        if self._handler is None:
            return
        library = logging.getLogger(LIBRARY_LOGGER)
        library.removeHandler(self._handler)
        library.propagate = True
        self._handler = None
