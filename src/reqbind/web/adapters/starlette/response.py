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
"""Turn handler results into Starlette responses."""

from __future__ import annotations

from typing import Any

from starlette.responses import JSONResponse, Response

from reqbind.web.converters import type_adapter


def handle_return_value(result: Any, status_code: int = 200) -> Response:
    """Convert a handler's return value into a Response.

    ``None`` gives an empty 204 (or *status_code* when it is not 200), a
    ``Response`` is used as is, ``bytes`` are sent as
    ``application/octet-stream``. Anything else is dumped to JSON through
    Pydantic, so models, dataclasses, UUIDs and datetimes serialize
    without extra work.
    """
    if result is None:
        return Response(status_code=204 if status_code == 200 else status_code)
    if isinstance(result, Response):
        return result
    if isinstance(result, bytes):
        return Response(result, status_code=status_code, media_type="application/octet-stream")
    return JSONResponse(type_adapter(type(result)).dump_python(result, mode="json"), status_code=status_code)
