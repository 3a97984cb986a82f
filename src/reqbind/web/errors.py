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
"""Error responses for recoverable reqbind exceptions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from reqbind.context.request_context import RequestContext
from reqbind.kernel.exceptions import (
    BindingException,
    PayloadTooLargeException,
    ReqbindException,
)

_STATUS_MAP: list[tuple[type[ReqbindException], int]] = [
    (PayloadTooLargeException, 413),
    (BindingException, 400),
]


def _get_status_code(exc: ReqbindException) -> int:
    for exc_type, status in _STATUS_MAP:
        if isinstance(exc, exc_type):
            return status
    return 400


async def reqbind_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a ReqbindException as a structured JSON error."""
    assert isinstance(exc, ReqbindException)
    ctx = RequestContext.current()
    status = _get_status_code(exc)
    body: dict[str, Any] = {
        "error": {
            "message": str(exc),
            "code": exc.code or type(exc).__name__,
            "request_id": ctx.request_id if ctx is not None else None,
            "timestamp": datetime.now(UTC).isoformat(),
            "status": status,
            "path": request.url.path,
        }
    }
    if exc.context:
        body["error"]["context"] = exc.context
    return JSONResponse(body, status_code=status)
