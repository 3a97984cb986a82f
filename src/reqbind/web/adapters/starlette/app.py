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
"""reqbind web application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from reqbind.container.ordering import sort_by_order
from reqbind.core.config import Config
from reqbind.kernel.exceptions import ReqbindException
from reqbind.logging.port import LoggingPort
from reqbind.logging.structlog_adapter import StructlogAdapter
from reqbind.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from reqbind.web.adapters.starlette.filters import RequestContextFilter
from reqbind.web.errors import reqbind_exception_handler
from reqbind.web.ports.filter import WebFilter


def create_app(
    routes: Sequence[BaseRoute] = (),
    config: Config | None = None,
    filters: Sequence[WebFilter] = (),
    debug: bool = False,
    logging_adapter: LoggingPort | None = None,
    configure_logging: bool = True,
) -> Starlette:
    """Create a Starlette application wired for reqbind.

    Logging is configured from ``reqbind.logging.*`` through
    *logging_adapter* (structlog by default) unless *configure_logging* is
    false. *filters* run after :class:`RequestContextFilter`, ordered by
    ``@order``. ``ReqbindException`` raised by handlers, e.g. a failed
    ``JsonBody`` bind, is rendered as a JSON error.
    """
    config = config or Config.defaults()
    if configure_logging:
        (logging_adapter or StructlogAdapter()).configure(config)

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=[Middleware(WebFilterChainMiddleware, filters=sort_by_order([RequestContextFilter(), *filters]))],
        exception_handlers={ReqbindException: reqbind_exception_handler},
    )
