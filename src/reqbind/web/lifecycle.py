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
"""Per-request lifecycle: parse on entry, delete temp files on exit."""

from __future__ import annotations

import contextlib
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from reqbind.web.params import MultiValues, ParameterSet
from reqbind.web.parser import RequestParameterParser
from reqbind.web.ports.request import InboundRequest

logger = structlog.get_logger("reqbind.web")


def cleanup_temp_files(params: ParameterSet) -> int:
    """Delete every temp file recorded on *params*; return how many were removed.

    Each handle is closed and its file removed once. Failures are logged and
    do not propagate.
    """
    handles, params.temp_files = params.temp_files, []
    removed = 0
    for handle in handles:
        with contextlib.suppress(OSError):
            handle.close()
        path = getattr(handle, "name", None)
        if not isinstance(path, (str, os.PathLike)):
            logger.warning("upload_temp_file_without_path", handle=repr(handle))
            continue
        try:
            os.remove(path)
        except (OSError, TypeError) as exc:
            logger.warning("upload_temp_file_remove_failed", path=os.fspath(path), error=str(exc))
        else:
            removed += 1
    return removed


@asynccontextmanager
async def params_scope(
    request: InboundRequest,
    *,
    route: MultiValues | None = None,
    fixed: MultiValues | None = None,
    parser: RequestParameterParser | None = None,
) -> AsyncIterator[ParameterSet]:
    """Parse *request* into a fresh ParameterSet and clean it up on exit.

    Usage::

        async with params_scope(StarletteInboundRequest(request), route=path_params) as params:
            return await handler(params)

    Temp files are deleted however the block exits.
    """
    params = ParameterSet(route=route, fixed=fixed)
    try:
        await (parser or RequestParameterParser()).parse(params, request)
        yield params
    finally:
        cleanup_temp_files(params)
