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
"""Starlette adapter for reqbind."""

from reqbind.web.adapters.starlette.app import create_app
from reqbind.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from reqbind.web.adapters.starlette.request import StarletteInboundRequest, to_multi_values
from reqbind.web.adapters.starlette.response import handle_return_value
from reqbind.web.adapters.starlette.routing import ParamsRoute, params_endpoint

__all__ = [
    "ParamsRoute",
    "StarletteInboundRequest",
    "WebFilterChainMiddleware",
    "create_app",
    "handle_return_value",
    "params_endpoint",
    "to_multi_values",
]
