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
"""StructlogAdapter — the default LoggingPort, backed by structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from reqbind.config.properties.logging import LoggingProperties
from reqbind.core.config import Config

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    if fmt == "logfmt":
        return structlog.processors.LogfmtRenderer()
    return structlog.dev.ConsoleRenderer()


class StructlogAdapter:
    """Routes structlog through stdlib logging on stdout.

    Events carry whatever is bound in ``structlog.contextvars``; during a
    request that is the request id, method and path set by
    ``RequestContext``.
    """

    def __init__(self) -> None:
        self.properties = LoggingProperties()

    def configure(self, config: Config) -> None:
        self.properties = config.bind(LoggingProperties)
        fmt = self.properties.format.lower()

        structlog.configure(
            processors=[*_SHARED_PROCESSORS, _renderer(fmt)],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=_level(self.properties.level),
            force=True,
        )
        for name, level in self.properties.loggers.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level(level))


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
