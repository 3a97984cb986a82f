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
"""WebFilterChainMiddleware — runs the ordered WebFilter chain around the app."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from reqbind.kernel.exceptions import ReqbindException
from reqbind.web.errors import reqbind_exception_handler
from reqbind.web.ports.filter import CallNext, WebFilter


class _CollectedResponse:
    """Collects what the wrapped app sends so filters can see a Response."""

    def __init__(self) -> None:
        self.status = 500
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            self.body += message.get("body", b"")

    def to_response(self) -> Response:
        response = Response(bytes(self.body), status_code=self.status)
        response.raw_headers[:] = self.headers
        return response


class WebFilterChainMiddleware:
    """Pure ASGI middleware running :class:`WebFilter` instances in order.

    *filters* are expected sorted already (see ``sort_by_order``); the first
    one is outermost. A filter whose ``should_not_filter()`` is true is
    passed over. A ``ReqbindException`` raised by a filter becomes a JSON
    error response at that filter's position, so outer filters still see a
    response.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self.filters = list(filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.filters:
            await self.app(scope, receive, send)
            return

        async def run_app(request: Request) -> Response:
            collected = _CollectedResponse()
            await self.app(scope, receive, collected.send)
            return collected.to_response()

        call_next: CallNext = run_app
        for web_filter in reversed(self.filters):
            call_next = _link(web_filter, call_next)

        request = Request(scope, receive, send)
        response: Response = await call_next(request)
        await response(scope, receive, send)


def _link(web_filter: WebFilter, call_next: CallNext) -> CallNext:
    async def step(request: Request) -> Any:
        if web_filter.should_not_filter(request):
            return await call_next(request)
        try:
            return await web_filter.do_filter(request, call_next)
        except ReqbindException as exc:
            return await reqbind_exception_handler(request, exc)

    return step
