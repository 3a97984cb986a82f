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
"""ParamsRoute — Starlette routes whose handlers receive bound parameters.

Usage::

    async def show_order(order_id: int, expand: list[str] | None = None) -> dict: ...

    routes = [
        ParamsRoute("/orders/{order_id}", show_order, methods=["GET"]),
        ParamsRoute("/orders/latest", show_order, fixed={"order_id": "0"}),
    ]

For every request the endpoint builds a :class:`ParameterSet` (route
values from the path, fixed values from the route definition), parses the
query string and body, binds the handler's arguments, and deletes any
upload temp files once the handler is done, however it exits.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from reqbind.web.adapters.starlette.request import StarletteInboundRequest, to_multi_values
from reqbind.web.adapters.starlette.response import handle_return_value
from reqbind.web.arguments import ArgumentResolver
from reqbind.web.binder import Binder
from reqbind.web.lifecycle import params_scope
from reqbind.web.parser import RequestParameterParser


async def _maybe_await(result: Any) -> Any:
    """Await the result if it's a coroutine, otherwise return as-is."""
    if inspect.isawaitable(result):
        return await result
    return result


def params_endpoint(
    handler: Callable[..., Any],
    *,
    fixed: Mapping[str, Any] | None = None,
    parser: RequestParameterParser | None = None,
    binder: Binder | None = None,
    status_code: int = 200,
) -> Callable[[Request], Any]:
    """Wrap *handler* into a Starlette endpoint ``(request) -> Response``."""
    parser = parser or RequestParameterParser()
    resolver = ArgumentResolver(handler, binder=binder, request_type=Request)
    fixed_values = to_multi_values(fixed)

    async def endpoint(request: Request) -> Response:
        inbound = StarletteInboundRequest(request, parser.properties)
        route_values = to_multi_values(request.path_params)
        fixed_copy = {key: list(vals) for key, vals in fixed_values.items()}
        try:
            async with params_scope(inbound, route=route_values, fixed=fixed_copy, parser=parser) as params:
                request.state.params = params
                kwargs = resolver.resolve(params, request)
                result = await _maybe_await(handler(**kwargs))
                return handle_return_value(result, status_code)
        finally:
            await request.close()

    endpoint.__name__ = getattr(handler, "__name__", "endpoint")
    endpoint.__doc__ = handler.__doc__
    return endpoint


class ParamsRoute(Route):
    """A Starlette ``Route`` dispatching to a parameter-bound handler."""

    def __init__(
        self,
        path: str,
        handler: Callable[..., Any],
        *,
        fixed: Mapping[str, Any] | None = None,
        methods: list[str] | None = None,
        name: str | None = None,
        status_code: int = 200,
        parser: RequestParameterParser | None = None,
        binder: Binder | None = None,
    ) -> None:
        self.handler = handler
        endpoint = params_endpoint(handler, fixed=fixed, parser=parser, binder=binder, status_code=status_code)
        super().__init__(path, endpoint, methods=methods, name=name or getattr(handler, "__name__", None))
