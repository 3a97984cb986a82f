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
"""reqbind — unified request parameters, bounded body reading and typed binding."""

from reqbind.kernel.exceptions import (
    BindContractViolation,
    BindingException,
    InvalidRequestException,
    PayloadTooLargeException,
    ReqbindException,
)
from reqbind.web.binder import Binder
from reqbind.web.params import JsonBody, ParameterSet, Ref, UploadedFile
from reqbind.web.parser import RequestParameterParser, parse_params

__version__ = "0.1.0"

__all__ = [
    "BindContractViolation",
    "Binder",
    "BindingException",
    "InvalidRequestException",
    "JsonBody",
    "ParameterSet",
    "PayloadTooLargeException",
    "Ref",
    "ReqbindException",
    "RequestParameterParser",
    "UploadedFile",
    "__version__",
    "parse_params",
]
