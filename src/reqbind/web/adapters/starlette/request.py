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
"""StarletteInboundRequest — InboundRequest adapter over ``starlette.requests.Request``."""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Mapping
from typing import Any

from starlette.datastructures import FormData
from starlette.datastructures import UploadFile as StarletteUploadFile
from starlette.requests import Request

from reqbind.config.properties.params import ParamsProperties
from reqbind.web.params import MultiValues, UploadedFile
from reqbind.web.ports.request import MultipartForm


def to_multi_values(items: Iterable[tuple[str, Any]] | Mapping[str, Any] | None) -> MultiValues:
    """Build a MultiValues map from ``(key, value)`` pairs or a mapping.

    Mapping values may be a single value or a list of values.
    """
    values: MultiValues = {}
    if items is None:
        return values
    if isinstance(items, Mapping):
        for key, value in items.items():
            if isinstance(value, (list, tuple)):
                values.setdefault(key, []).extend(str(v) for v in value)
            else:
                values.setdefault(key, []).append(str(value))
        return values
    for key, value in items:
        values.setdefault(key, []).append(str(value))
    return values


def _to_uploaded_file(upload: StarletteUploadFile) -> UploadedFile:
    return UploadedFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        size=upload.size or 0,
        _file=upload.file,
        headers=dict(upload.headers),
    )


class StarletteInboundRequest:
    """Exposes a Starlette request through the InboundRequest protocol.

    Multipart and url-encoded bodies are decoded by Starlette (which uses
    ``python-multipart``), bounded by ``max_files`` / ``max_fields``.
    """

    def __init__(self, request: Request, properties: ParamsProperties | None = None) -> None:
        self._request = request
        self._properties = properties or ParamsProperties()

    @property
    def request(self) -> Request:
        return self._request

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def url(self) -> str:
        return str(self._request.url)

    @property
    def content_type(self) -> str:
        raw = self._request.headers.get("content-type", "")
        return raw.split(";", 1)[0].strip().lower()

    def get_query(self) -> MultiValues:
        return to_multi_values(self._request.query_params.multi_items())

    async def _form(self) -> FormData:
        return await self._request.form(
            max_files=self._properties.max_files,
            max_fields=self._properties.max_fields,
        )

    async def get_form(self) -> MultiValues:
        form = await self._form()
        return to_multi_values((k, v) for k, v in form.multi_items() if isinstance(v, str))

    async def get_multipart_form(self) -> MultipartForm:
        form = await self._form()
        multipart = MultipartForm()
        for key, value in form.multi_items():
            if isinstance(value, StarletteUploadFile):
                multipart.files.setdefault(key, []).append(_to_uploaded_file(value))
            else:
                multipart.values.setdefault(key, []).append(value)
        return multipart

    def get_body(self) -> AsyncIterable[bytes] | None:
        headers = self._request.headers
        if "content-length" not in headers and "transfer-encoding" not in headers:
            return None
        return self._request.stream()
