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
"""reqbind web layer — parameter parsing, resolution and binding."""

from reqbind.web.arguments import ArgumentResolver
from reqbind.web.binder import Binder, default_binder
from reqbind.web.converters import ConverterService, ValueConverter, default_converters, zero_value
from reqbind.web.filters import OncePerRequestFilter
from reqbind.web.lifecycle import cleanup_temp_files, params_scope
from reqbind.web.limits import AsyncBoundedReader, BoundedReader, async_limit_reader, limit_reader
from reqbind.web.params import JsonBody, MultiValues, ParameterSet, Ref, UploadedFile
from reqbind.web.parser import RequestParameterParser, parse_params
from reqbind.web.ports.filter import CallNext, WebFilter
from reqbind.web.ports.request import InboundRequest, MultipartForm
from reqbind.web.resolver import ParameterResolver, calc_values

__all__ = [
    # Data model
    "JsonBody",
    "MultiValues",
    "ParameterSet",
    "Ref",
    "UploadedFile",
    # Parsing
    "AsyncBoundedReader",
    "BoundedReader",
    "InboundRequest",
    "MultipartForm",
    "ParameterResolver",
    "RequestParameterParser",
    "async_limit_reader",
    "calc_values",
    "limit_reader",
    "parse_params",
    # Binding
    "ArgumentResolver",
    "Binder",
    "ConverterService",
    "ValueConverter",
    "default_binder",
    "default_converters",
    "zero_value",
    # Lifecycle and filters
    "CallNext",
    "OncePerRequestFilter",
    "WebFilter",
    "cleanup_temp_files",
    "params_scope",
]
