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
"""RequestContextFilter — opens a RequestContext for every HTTP request."""

from __future__ import annotations

from typing import Any

from reqbind.container.ordering import HIGHEST_PRECEDENCE, order
from reqbind.context.request_context import RequestContext
from reqbind.web.filters import OncePerRequestFilter
from reqbind.web.ports.filter import CallNext

REQUEST_ID_HEADER = "X-Request-Id"


@order(HIGHEST_PRECEDENCE)
class RequestContextFilter(OncePerRequestFilter):
    """Outermost filter: request id plus ``method`` and ``path`` log fields.

    The id comes from the ``X-Request-Id`` request header when present and
    is echoed back on the response.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        ctx = RequestContext.init(
            request.headers.get(REQUEST_ID_HEADER),
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = ctx.request_id
            return response
        finally:
            RequestContext.clear()
