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
"""InboundRequest protocol — what the parameter parser needs from a request.

Keeps vendor request types (e.g. Starlette) confined to the adapter layer.
"""

from __future__ import annotations

from collections.abc import AsyncIterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from reqbind.web.params import MultiValues, UploadedFile


@dataclass
class MultipartForm:
    """A decoded multipart body split into plain values and file uploads."""

    values: MultiValues = field(default_factory=dict)
    files: dict[str, list[UploadedFile]] = field(default_factory=dict)


@runtime_checkable
class InboundRequest(Protocol):
    """Protocol for a single inbound HTTP request.

    ``content_type`` is the bare media type, lower-cased and without
    parameters (``multipart/form-data``, not
    ``multipart/form-data; boundary=...``).
    """

    @property
    def method(self) -> str: ...

    @property
    def url(self) -> str: ...

    @property
    def content_type(self) -> str: ...

    def get_query(self) -> MultiValues:
        """Query-string parameters."""
        ...

    async def get_form(self) -> MultiValues:
        """Decode a url-encoded body. May raise on malformed input."""
        ...

    async def get_multipart_form(self) -> MultipartForm:
        """Decode a multipart body. May raise on malformed input."""
        ...

    def get_body(self) -> AsyncIterable[bytes] | None:
        """The raw body as a chunk stream, or None when there is no body."""
        ...
