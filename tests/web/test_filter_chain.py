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
"""Tests for WebFilterChainMiddleware and RequestContextFilter."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from reqbind.container.ordering import HIGHEST_PRECEDENCE, get_order, order, sort_by_order
from reqbind.context.request_context import RequestContext
from reqbind.kernel.exceptions import PayloadTooLargeException
from reqbind.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from reqbind.web.adapters.starlette.filters import RequestContextFilter
from reqbind.web.filters import OncePerRequestFilter
from reqbind.web.ports.filter import WebFilter

# ---------------------------------------------------------------------------
# Test filters
# ---------------------------------------------------------------------------


@order(HIGHEST_PRECEDENCE + 10)
class HeaderFilter(OncePerRequestFilter):
    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Filter-A"] = "applied"
        return response


@order(5)
class ApiOnlyFilter(OncePerRequestFilter):
    url_patterns = ["/api/*"]

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Api-Filter"] = "applied"
        return response


@order(10)
class ExcludeHealthFilter(OncePerRequestFilter):
    exclude_patterns = ["/health"]

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Excluded-Filter"] = "applied"
        return response


@order(20)
class ShortCircuitFilter(OncePerRequestFilter):
    async def do_filter(self, request, call_next):
        return JSONResponse({"error": "payload rejected"}, status_code=413)


@order(30)
class PostOnlyFilter(OncePerRequestFilter):
    methods = frozenset({"POST"})

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Post-Filter"] = "applied"
        return response


@order(40)
class CountingFilter(OncePerRequestFilter):
    calls = 0

    async def do_filter(self, request, call_next):
        type(self).calls += 1
        return await call_next(request)


@order(50)
class RejectingFilter(OncePerRequestFilter):
    async def do_filter(self, request, call_next):
        raise PayloadTooLargeException("body too large", code="PAYLOAD_TOO_LARGE", context={"limit": 8})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _ok_handler(request: Request) -> PlainTextResponse:
    return PlainTextResponse("OK")


async def _context_handler(request: Request) -> JSONResponse:
    ctx = RequestContext.current()
    return JSONResponse({"request_id": ctx.request_id if ctx else None})


def _make_app(*filters) -> Starlette:
    return Starlette(
        routes=[
            Route("/test", _ok_handler),
            Route("/api/data", _ok_handler),
            Route("/health", _ok_handler),
            Route("/context", _context_handler),
        ],
        middleware=[Middleware(WebFilterChainMiddleware, filters=sort_by_order(list(filters)))],
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFilterChain:
    def test_filters_are_web_filters(self):
        assert isinstance(HeaderFilter(), WebFilter)

    def test_headers_from_every_filter(self):
        client = TestClient(_make_app(HeaderFilter(), ExcludeHealthFilter()))
        resp = client.get("/test")
        assert resp.status_code == 200
        assert resp.text == "OK"
        assert resp.headers["X-Filter-A"] == "applied"
        assert resp.headers["X-Excluded-Filter"] == "applied"

    def test_url_pattern_limits_filter(self):
        client = TestClient(_make_app(ApiOnlyFilter()))
        assert client.get("/api/data").headers.get("X-Api-Filter") == "applied"
        assert "X-Api-Filter" not in client.get("/health").headers

    def test_exclude_pattern_skips_filter(self):
        client = TestClient(_make_app(ExcludeHealthFilter()))
        assert "X-Excluded-Filter" not in client.get("/health").headers

    def test_short_circuit(self):
        client = TestClient(_make_app(ShortCircuitFilter()))
        resp = client.get("/test")
        assert resp.status_code == 413
        assert resp.json() == {"error": "payload rejected"}

    def test_no_filters_passes_through(self):
        resp = TestClient(_make_app()).get("/test")
        assert resp.status_code == 200


class TestRequestContextFilter:
    def test_runs_first(self):
        chain = sort_by_order([HeaderFilter(), RequestContextFilter()])
        assert isinstance(chain[0], RequestContextFilter)
        assert get_order(RequestContextFilter) == HIGHEST_PRECEDENCE

    def test_generates_request_id(self):
        resp = TestClient(_make_app(RequestContextFilter())).get("/context")
        request_id = resp.json()["request_id"]
        assert request_id
        assert resp.headers["X-Request-Id"] == request_id

    def test_honors_incoming_request_id(self):
        client = TestClient(_make_app(RequestContextFilter()))
        resp = client.get("/context", headers={"X-Request-Id": "abc-123"})
        assert resp.json() == {"request_id": "abc-123"}
        assert resp.headers["X-Request-Id"] == "abc-123"

    def test_context_cleared_after_request(self):
        TestClient(_make_app(RequestContextFilter())).get("/context")
        assert RequestContext.current() is None


class TestOncePerRequestFilter:
    def test_method_restriction(self):
        client = TestClient(_make_app(PostOnlyFilter()))
        assert "X-Post-Filter" not in client.get("/test").headers
        resp = client.post("/test")
        assert resp.status_code == 405
        assert resp.headers["X-Post-Filter"] == "applied"

    def test_runs_once_when_chained_twice(self):
        CountingFilter.calls = 0
        inner = _make_app(CountingFilter())
        outer = WebFilterChainMiddleware(inner, filters=[CountingFilter()])
        TestClient(outer).get("/test")
        assert CountingFilter.calls == 1


class TestFilterExceptions:
    def test_reqbind_exception_becomes_json_error(self):
        client = TestClient(_make_app(RequestContextFilter(), RejectingFilter()))
        resp = client.get("/test", headers={"X-Request-Id": "r-1"})
        assert resp.status_code == 413
        error = resp.json()["error"]
        assert error["code"] == "PAYLOAD_TOO_LARGE"
        assert error["context"] == {"limit": 8}
        assert error["request_id"] == "r-1"
        assert resp.headers["X-Request-Id"] == "r-1"
