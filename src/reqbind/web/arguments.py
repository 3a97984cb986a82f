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
"""ArgumentResolver — inspects handler signatures and binds arguments from a ParameterSet."""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import Any, get_args, get_origin

from pydantic import ValidationError

from reqbind.web.binder import Binder, default_binder
from reqbind.web.converters import NOT_FOUND, type_adapter
from reqbind.web.params import JsonBody, ParameterSet, Ref

_MISSING = object()

PARAMS = "params"
REQUEST = "request"
JSON = "json"
VALUE = "value"


@dataclass
class ResolvedArgument:
    """Metadata for a single handler argument."""

    name: str
    kind: str
    target: Any
    default: Any = _MISSING


class ArgumentResolver:
    """Inspects a handler's signature once and binds its arguments per request.

    - an argument annotated ``ParameterSet`` receives the set itself;
    - an argument annotated with the adapter's request type receives the
      raw request (see *request_type*);
    - ``JsonBody[T]`` receives the whole JSON body validated as ``T``;
    - any other annotated argument is bound by name, with the JSON body as
      fallback. When neither the request parameters nor a JSON body that
      validates as its type supply a value, its default is used if it has one.
    """

    def __init__(self, handler: Any, binder: Binder | None = None, request_type: type | None = None) -> None:
        self._binder = binder or default_binder()
        self._request_type = request_type
        self.arguments = self._inspect(handler)

    def _inspect(self, handler: Any) -> list[ResolvedArgument]:
        hints = typing.get_type_hints(handler, include_extras=True)
        sig = inspect.signature(handler)
        arguments: list[ResolvedArgument] = []

        for name, param in sig.parameters.items():
            if name == "self":
                continue

            hint = hints.get(name)
            if hint is None:
                continue

            default = param.default if param.default is not inspect.Parameter.empty else _MISSING

            if hint is ParameterSet:
                kind, target = PARAMS, hint
            elif self._request_type is not None and hint is self._request_type:
                kind, target = REQUEST, hint
            elif get_origin(hint) is JsonBody:
                args = get_args(hint)
                kind, target = JSON, args[0] if args else Any
            else:
                kind, target = VALUE, hint

            arguments.append(ResolvedArgument(name=name, kind=kind, target=target, default=default))

        return arguments

    def resolve(self, params: ParameterSet, request: Any = None) -> dict[str, Any]:
        """Bind every inspected argument. ``JsonBody`` failures raise BindingException."""
        kwargs: dict[str, Any] = {}
        for argument in self.arguments:
            kwargs[argument.name] = self._resolve_one(params, request, argument)
        return kwargs

    def _resolve_one(self, params: ParameterSet, request: Any, argument: ResolvedArgument) -> Any:
        if argument.kind == PARAMS:
            return params
        if argument.kind == REQUEST:
            return request
        if argument.kind == JSON:
            ref: Ref[Any] = Ref(argument.target)
            self._binder.bind_json(params, ref)
            return ref.value

        if argument.default is _MISSING:
            return self._binder.bind_value(params, argument.name, argument.target)

        value = self._binder.service.convert(params, argument.name, argument.target)
        if value is not NOT_FOUND:
            return value
        if params.json:
            try:
                return type_adapter(argument.target).validate_json(params.json)
            except ValidationError:
                return argument.default
        return argument.default
