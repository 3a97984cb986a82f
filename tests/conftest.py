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
"""Shared fixtures: an in-memory InboundRequest and a log recorder."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest

from reqbind.web.params import MultiValues
from reqbind.web.ports.request import MultipartForm


class FakeRequest:
    """InboundRequest backed by plain data, for parser tests."""

    def __init__(
        self,
        content_type: str = "",
        query: MultiValues | None = None,
        form: MultiValues | Exception | None = None,
        multipart: MultipartForm | Exception | None = None,
        body: list[bytes] | None = None,
        body_error: Exception | None = None,
        method: str = "POST",
        url: str = "http://testserver/orders",
    ) -> None:
        self.method = method
        self.url = url
        self.content_type = content_type
        self._query = query or {}
        self._form = form
        self._multipart = multipart
        self._body = body
        self._body_error = body_error
        self.form_calls = 0
        self.multipart_calls = 0

    def get_query(self) -> MultiValues:
        return self._query

    async def get_form(self) -> MultiValues:
        self.form_calls += 1
        if isinstance(self._form, Exception):
            raise self._form
        return self._form or {}

    async def get_multipart_form(self) -> MultipartForm:
        self.multipart_calls += 1
        if isinstance(self._multipart, Exception):
            raise self._multipart
        return self._multipart or MultipartForm()

    def get_body(self) -> AsyncIterator[bytes] | None:
        if self._body is None:
            return None
        return self._stream()

    async def _stream(self) -> AsyncIterator[bytes]:
        for chunk in self._body or []:
            yield chunk
        if self._body_error is not None:
            raise self._body_error


class RecordingLogger:
    """Stands in for a structlog logger and records every call."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str):
        def log(event: str, **kwargs: Any) -> None:
            self.events.append((level, event, kwargs))

        return log

    def __getattr__(self, level: str):
        return self._record(level)

    def names(self) -> list[str]:
        return [event for _, event, _ in self.events]


@pytest.fixture
def make_request():
    return FakeRequest


@pytest.fixture
def record_logs(monkeypatch):
    """Replace ``logger`` in the given module with a RecordingLogger."""

    def _patch(module: Any) -> RecordingLogger:
        recorder = RecordingLogger()
        monkeypatch.setattr(module, "logger", recorder)
        return recorder

    return _patch
