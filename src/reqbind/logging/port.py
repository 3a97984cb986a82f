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
"""LoggingPort — the logging backend handed to ``create_app``.

The parser, binder and cleanup hook log through module-level structlog
loggers named ``reqbind.web``. A backend passed as ``logging_adapter``
decides where those events end up: it applies ``reqbind.logging.*``
(root level, per-logger levels, output format) once at startup, and can
change one logger's level afterwards.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from reqbind.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    def configure(self, config: Config) -> None: ...

    def get_logger(self, name: str) -> Any: ...

    def set_level(self, name: str, level: str) -> None: ...
