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
"""Binder — typed access to request parameters.

Two ways in:

- :meth:`Binder.bind` writes one named parameter into a :class:`Ref`,
  converted to the Ref's type. Unparseable input yields the type's zero
  value. A destination that is not a writable Ref is a programming error
  and raises :class:`BindContractViolation`.
- :meth:`Binder.bind_json` deserializes the whole JSON body into a
  destination and raises :class:`BindingException` when it cannot.
"""

from __future__ import annotations

import dataclasses
from functools import lru_cache
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from reqbind.config.properties.params import ParamsProperties
from reqbind.kernel.exceptions import BindContractViolation, BindingException, InvalidRequestException
from reqbind.web.converters import ConverterService, default_converters, type_adapter
from reqbind.web.params import ParameterSet, Ref

logger = structlog.get_logger("reqbind.web")


class Binder:
    """Binds request parameters to typed destinations."""

    def __init__(
        self,
        service: ConverterService | None = None,
        properties: ParamsProperties | None = None,
    ) -> None:
        if service is None:
            temp_dir = properties.temp_dir if properties is not None else None
            service = ConverterService(default_converters(temp_dir=temp_dir))
        self._service = service

    @property
    def service(self) -> ConverterService:
        return self._service

    def bind_value(self, params: ParameterSet, name: str, target: Any) -> Any:
        """Look up *name* and convert it to *target*.

        Consults ``params.values`` and ``params.files``, then the JSON body
        as a fallback. Never raises for bad input: returns the zero value.
        """
        return self._service.lookup(params, name, target)

    def bind(self, params: ParameterSet, dest: Any, name: str) -> None:
        """Bind the parameter *name* into *dest*, which must be a settable Ref.

        The JSON body is set aside for the duration of the bind so a named
        bind never picks up the whole-body payload.
        """
        if not isinstance(dest, Ref):
            logger.critical("bind_non_reference", name=name, dest_type=type(dest).__name__)
            raise BindContractViolation(f"non-reference passed to bind: {name}")
        if not dest.settable:
            logger.critical("bind_non_settable", name=name)
            raise BindContractViolation(f"non-settable reference passed to bind: {name}")

        json_data = params.json
        params.json = b""
        try:
            dest.value = self.bind_value(params, name, dest.type)
        finally:
            params.json = json_data

    def bind_json(self, params: ParameterSet, dest: Any) -> None:
        """Deserialize ``params.json`` into *dest*.

        Accepted destinations: a settable :class:`Ref` (value replaced), a
        ``dict`` (updated), a ``list`` (contents replaced), or a non-frozen
        Pydantic model or dataclass instance (fields assigned). The body is
        fully validated before *dest* is touched.

        Raises:
            BindingException: *dest* is not a reference, or the payload does
                not match the destination's type.
            InvalidRequestException: the body is not well-formed JSON.
        """
        target = _json_target(dest)
        if target is None:
            logger.warning("bind_json_not_a_reference", dest_type=type(dest).__name__)
            raise BindingException(
                f"bind_json requires a reference destination, got {type(dest).__name__}",
                code="INVALID_BIND_TARGET",
            )

        try:
            value = type_adapter(target).validate_json(params.json)
        except ValidationError as exc:
            logger.warning("bind_json_unmarshal_failed", error=str(exc))
            errors = exc.errors(include_url=False, include_context=False, include_input=False)
            if any(e["type"] == "json_invalid" for e in errors):
                raise InvalidRequestException(
                    f"Invalid JSON: {errors[0]['msg']}",
                    code="INVALID_JSON",
                    context={"errors": errors},
                ) from exc
            raise BindingException(
                f"JSON body does not match {getattr(target, '__name__', target)}",
                code="JSON_BIND_FAILED",
                context={"errors": errors},
            ) from exc

        _assign(dest, value)


def _json_target(dest: Any) -> Any:
    """Type to validate the body against, or None if *dest* cannot be written."""
    if isinstance(dest, Ref):
        return dest.type if dest.settable else None
    if isinstance(dest, type):
        return None
    if isinstance(dest, BaseModel):
        return None if type(dest).model_config.get("frozen") else type(dest)
    if dataclasses.is_dataclass(dest):
        return None if type(dest).__dataclass_params__.frozen else type(dest)  # type: ignore[attr-defined]
    if isinstance(dest, dict):
        return dict[str, Any]
    if isinstance(dest, list):
        return list[Any]
    return None


def _assign(dest: Any, value: Any) -> None:
    if isinstance(dest, Ref):
        dest.value = value
    elif isinstance(dest, BaseModel):
        for field_name in value.model_fields_set:
            setattr(dest, field_name, getattr(value, field_name))
    elif dataclasses.is_dataclass(dest):
        for field in dataclasses.fields(dest):
            setattr(dest, field.name, getattr(value, field.name))
    elif isinstance(dest, dict):
        dest.update(value)
    else:
        dest[:] = value


@lru_cache(maxsize=1)
def default_binder() -> Binder:
    """Process-wide Binder with the built-in converters."""
    return Binder()
