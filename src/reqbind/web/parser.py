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
"""RequestParameterParser — populates a ParameterSet from an inbound request.

Parsing never fails the request: malformed bodies are logged and the
affected source is left empty.
"""

from __future__ import annotations

import structlog

from reqbind.config.properties.params import ParamsProperties
from reqbind.core.config import Config
from reqbind.web.limits import DEFAULT_CHUNK_SIZE, async_limit_reader
from reqbind.web.params import ParameterSet
from reqbind.web.ports.request import InboundRequest
from reqbind.web.resolver import ParameterResolver

logger = structlog.get_logger("reqbind.web")

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"
JSON_CONTENT_TYPES = frozenset({"application/json", "text/json"})


class RequestParameterParser:
    """Parses query string and body of a request into a :class:`ParameterSet`."""

    def __init__(
        self,
        properties: ParamsProperties | None = None,
        resolver: ParameterResolver | None = None,
    ) -> None:
        self._properties = properties or ParamsProperties()
        self._resolver = resolver or ParameterResolver()

    @classmethod
    def from_config(cls, config: Config) -> RequestParameterParser:
        """Parser using ``reqbind.params.*`` from *config*."""
        return cls(config.bind(ParamsProperties))

    @property
    def properties(self) -> ParamsProperties:
        return self._properties

    async def parse(self, params: ParameterSet, request: InboundRequest) -> ParameterSet:
        """Fill *params* from *request* and compute the unified view.

        ``params.route`` and ``params.fixed`` are expected to be set already
        by the router.
        """
        params.query = request.get_query()

        content_type = request.content_type
        if content_type == FORM_URLENCODED:
            try:
                params.form = await request.get_form()
            except Exception as exc:
                logger.warning("params_form_parse_failed", method=request.method, url=request.url, error=str(exc))

        elif content_type == MULTIPART_FORM_DATA:
            try:
                multipart = await request.get_multipart_form()
            except Exception as exc:
                logger.warning(
                    "params_multipart_parse_failed", method=request.method, url=request.url, error=str(exc)
                )
            else:
                params.form = multipart.values
                params.files = multipart.files

        elif content_type in JSON_CONTENT_TYPES:
            await self.populate_json(params, request)

        self._resolver.resolve(params)
        return params

    async def populate_json(self, params: ParameterSet, request: InboundRequest) -> None:
        """Read the body, up to ``max_json_size`` bytes, into ``params.json``.

        A missing body is only a warning. A body that ends early
        (``EOFError``) keeps whatever was read; any other read failure,
        including an oversized body, clears ``params.json``.
        """
        body = request.get_body()
        if body is None:
            logger.warning("json_post_received_with_empty_body", method=request.method, url=request.url)
            return

        reader = async_limit_reader(body, self._properties.max_json_size)
        parts: list[bytes] = []
        try:
            while chunk := await reader.read(DEFAULT_CHUNK_SIZE):
                parts.append(chunk)
        except EOFError:
            pass
        except Exception as exc:
            logger.error("failed_to_read_json_body", method=request.method, url=request.url, error=str(exc))
            params.json = b""
            return

        params.json = b"".join(parts)


async def parse_params(
    params: ParameterSet,
    request: InboundRequest,
    properties: ParamsProperties | None = None,
) -> ParameterSet:
    """Parse *request* into *params* with a one-off parser."""
    return await RequestParameterParser(properties).parse(params, request)
