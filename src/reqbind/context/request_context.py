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
"""Request-scoped context.

``RequestContextFilter`` opens one per HTTP request. Its id and any
``log_fields`` are bound into structlog's contextvars for the lifetime of
the context, which is how parser and binder log lines are tied to the
request that produced them.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any

import structlog

_current: ContextVar[RequestContext | None] = ContextVar("reqbind_request_context", default=None)


class RequestContext:
    """Per-request id, log fields and free-form attributes."""

    def __init__(self, request_id: str | None = None, **log_fields: Any) -> None:
        self.request_id = request_id or uuid.uuid4().hex
        self.log_fields = {"request_id": self.request_id, **log_fields}
        self._attributes: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    @classmethod
    def init(cls, request_id: str | None = None, **log_fields: Any) -> RequestContext:
        """Open a context for the current task, replacing any previous one."""
        cls.clear()
        ctx = cls(request_id, **log_fields)
        _current.set(ctx)
        structlog.contextvars.bind_contextvars(**ctx.log_fields)
        return ctx

    @classmethod
    def current(cls) -> RequestContext | None:
        return _current.get()

    @classmethod
    def clear(cls) -> None:
        ctx = _current.get()
        if ctx is not None:
            structlog.contextvars.unbind_contextvars(*ctx.log_fields)
        _current.set(None)
