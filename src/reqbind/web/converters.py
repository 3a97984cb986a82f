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
"""Value converters — turn raw request parameters into typed values.

Converters form a chain of responsibility: :class:`ConverterService` asks
each registered converter whether it handles a target type and delegates
to the first one that does. One converter exists per target-type family:

- :class:`FileConverter` — ``UploadedFile``, ``list[UploadedFile]``,
  ``bytes``, ``Path`` and ``IO[bytes]`` (the latter two materialize the
  upload into a temp file owned by the :class:`ParameterSet`)
- :class:`ScalarConverter` — ``str``, ``int``, ``float``, ``bool``,
  ``Decimal``, ``UUID``, dates and times
- :class:`EnumConverter` — ``Enum`` subclasses, by value then by name
- :class:`SequenceConverter` — ``list[T]``, ``tuple[T, ...]``, ``set[T]``
  from repeated keys, ``name[]`` and ``name[0]``, ``name[1]`` ...
- :class:`MappingConverter` — ``dict[K, V]`` from ``name[key]``
- :class:`StructConverter` — Pydantic models and dataclasses from
  ``name.field`` / ``name[field]``

Values that are present but cannot be converted become the target type's
zero value (see :func:`zero_value`); they never raise.
"""

from __future__ import annotations

import dataclasses
import enum
import re
import shutil
import tempfile
import types
import typing
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import IO, Annotated, Any, BinaryIO, Protocol, Union, get_args, get_origin, runtime_checkable
from uuid import UUID

from pydantic import BaseModel, TypeAdapter

from reqbind.web.params import ParameterSet, UploadedFile


class _NotFound:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Any = _NotFound()
"""Returned by converters when the request carries nothing for a name."""

_CONVERSION_ERRORS = (ValueError, TypeError, KeyError)

_SCALAR_TYPES = frozenset({str, int, float, bool, Decimal, UUID, date, datetime, time, timedelta})
_ZERO_FACTORIES = frozenset({str, int, float, bool, bytes, Decimal, list, tuple, set, frozenset, dict})
_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_TRUTHY_CHECKBOX = frozenset({"on", "checked"})


# ---------------------------------------------------------------------------
# Type helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=512)
def type_adapter(target: Any) -> TypeAdapter[Any]:
    """Cached Pydantic TypeAdapter for *target*."""
    return TypeAdapter(target)


def strip_annotated(target: Any) -> Any:
    while get_origin(target) is Annotated:
        target = get_args(target)[0]
    return target


def unwrap_optional(target: Any) -> tuple[Any, bool]:
    """Return ``(inner, True)`` for ``Optional[inner]``, else ``(target, False)``."""
    target = strip_annotated(target)
    if get_origin(target) in (Union, types.UnionType):
        args = [a for a in get_args(target) if a is not type(None)]
        if len(args) == 1 and len(args) != len(get_args(target)):
            return args[0], True
    return target, False


def zero_value(target: Any) -> Any:
    """The value a failed conversion to *target* produces.

    ``target()`` for builtin scalars and collections (``0``, ``""``,
    ``False``, ``[]``, ``{}`` ...); ``None`` for optionals and everything
    else.
    """
    inner, optional = unwrap_optional(target)
    if optional:
        return None
    origin = get_origin(inner) or inner
    if origin in _ZERO_FACTORIES:
        return origin()
    return None


def _is_class(target: Any) -> bool:
    return isinstance(target, type) and get_origin(target) is None


def _is_struct(target: Any) -> bool:
    if not _is_class(target):
        return False
    return issubclass(target, BaseModel) or dataclasses.is_dataclass(target)


def _struct_fields(target: type) -> dict[str, Any]:
    if issubclass(target, BaseModel):
        return {name: info.annotation for name, info in target.model_fields.items()}
    hints = typing.get_type_hints(target)
    return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(target)}


def _first(params: ParameterSet, name: str) -> str | Any:
    found = params.values.get(name)
    return found[0] if found else NOT_FOUND


# ---------------------------------------------------------------------------
# Converter protocol and chain
# ---------------------------------------------------------------------------


@runtime_checkable
class ValueConverter(Protocol):
    """Converts the parameter(s) named *name* into a value of *target*.

    Returns :data:`NOT_FOUND` when the request carries nothing for *name*.
    Raises ``ValueError`` / ``TypeError`` when the input cannot be converted.
    """

    def can_convert(self, target: Any) -> bool: ...

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any: ...


@runtime_checkable
class RawValueConverter(ValueConverter, Protocol):
    """A converter that can also coerce a single raw string."""

    def coerce(self, raw: str, target: Any) -> Any: ...


class ConverterService:
    """Chain of responsibility over :class:`ValueConverter` instances.

    Iterates through registered converters and uses the first match.
    """

    def __init__(self, converters: list[ValueConverter]) -> None:
        self._converters = converters

    @property
    def converters(self) -> list[ValueConverter]:
        return list(self._converters)

    def find(self, target: Any) -> ValueConverter | None:
        for converter in self._converters:
            if converter.can_convert(target):
                return converter
        return None

    def convert(self, params: ParameterSet, name: str, target: Any) -> Any:
        """Convert *name* to *target*.

        Returns :data:`NOT_FOUND` when nothing was supplied, the zero value
        when something was supplied but could not be converted.
        """
        inner, optional = unwrap_optional(target)
        converter = self.find(inner)
        if converter is None:
            return NOT_FOUND
        try:
            return converter.convert(params, name, inner, self)
        except _CONVERSION_ERRORS:
            return zero_value(target)

    def coerce(self, raw: str, target: Any) -> Any:
        """Coerce one raw string to *target*, zero value on failure."""
        inner, _ = unwrap_optional(target)
        for converter in self._converters:
            if isinstance(converter, RawValueConverter) and converter.can_convert(inner):
                try:
                    return converter.coerce(raw, inner)
                except _CONVERSION_ERRORS:
                    return zero_value(target)
        return zero_value(target)

    def lookup(self, params: ParameterSet, name: str, target: Any) -> Any:
        """Convert *name* to *target*, falling back to the JSON body.

        When the request carries nothing for *name* and ``params.json`` is
        non-empty, the whole JSON body is validated against *target*. The
        result is always a value: the zero value stands in for anything
        missing or unparseable.
        """
        value = self.convert(params, name, target)
        if value is not NOT_FOUND:
            return value
        if params.json:
            try:
                return type_adapter(target).validate_json(params.json)
            except _CONVERSION_ERRORS:
                return zero_value(target)
        return zero_value(target)


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


class ScalarConverter:
    """Scalars coerced in Pydantic's lax mode (``"42"`` -> ``42``)."""

    def can_convert(self, target: Any) -> bool:
        return target in _SCALAR_TYPES

    def coerce(self, raw: str, target: Any) -> Any:
        if target is str:
            return raw
        if raw == "":
            return zero_value(target)
        if target is bool and raw.lower() in _TRUTHY_CHECKBOX:
            return True
        return type_adapter(target).validate_python(raw)

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any:
        raw = _first(params, name)
        if raw is NOT_FOUND:
            return NOT_FOUND
        return self.coerce(raw, target)


class EnumConverter:
    def can_convert(self, target: Any) -> bool:
        return _is_class(target) and issubclass(target, enum.Enum)

    def coerce(self, raw: str, target: Any) -> Any:
        try:
            return type_adapter(target).validate_python(raw)
        except ValueError:
            return target[raw]

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any:
        raw = _first(params, name)
        if raw is NOT_FOUND:
            return NOT_FOUND
        return self.coerce(raw, target)


class FileConverter:
    """Uploaded files, and ``bytes`` from an upload or a plain value.

    ``Path`` and ``IO[bytes]`` targets copy the upload into a server-side
    temp file; the handle is recorded in ``params.temp_files`` so the
    request-end cleanup deletes it.
    """

    _TEMP_TARGETS = (Path, IO[bytes], BinaryIO, IO)

    def __init__(self, temp_dir: str | None = None) -> None:
        self._temp_dir = temp_dir

    def can_convert(self, target: Any) -> bool:
        if target in (UploadedFile, bytes) or target in self._TEMP_TARGETS:
            return True
        return get_origin(target) is list and get_args(target) == (UploadedFile,)

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any:
        uploads = params.files.get(name)

        if target is bytes:
            if uploads:
                return uploads[0].read_sync()
            raw = _first(params, name)
            return NOT_FOUND if raw is NOT_FOUND else raw.encode()

        if not uploads:
            return NOT_FOUND
        if target is UploadedFile:
            return uploads[0]
        if get_origin(target) is list:
            return list(uploads)

        handle = self._materialize(params, uploads[0])
        if target is Path:
            return Path(handle.name)
        return handle

    def _materialize(self, params: ParameterSet, upload: UploadedFile) -> IO[bytes]:
        suffix = Path(upload.filename or "").suffix
        handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
            mode="w+b", suffix=suffix, prefix="reqbind-upload-", dir=self._temp_dir, delete=False
        )
        params.add_temp_file(handle)
        source = upload.file
        if hasattr(source, "seek"):
            source.seek(0)
        shutil.copyfileobj(source, handle)
        handle.flush()
        handle.seek(0)
        return handle


class SequenceConverter:
    """Homogeneous sequences.

    Elements come from, in order: repeated ``name`` values, repeated
    ``name[]`` values, then indexed keys ``name[0]``, ``name[1]`` ...
    sorted by index (indexed keys may also address struct fields, as in
    ``name[0].sku``). Elements that fail to convert become zero values.
    """

    def can_convert(self, target: Any) -> bool:
        origin = get_origin(target) or target
        if origin not in _SEQUENCE_TYPES:
            return False
        args = get_args(target)
        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            return False
        return True

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any:
        origin = get_origin(target) or target
        args = get_args(target)
        elem = args[0] if args else str

        raws = params.values.get(name, []) + params.values.get(f"{name}[]", [])
        items = [service.coerce(raw, elem) for raw in raws]

        pattern = re.compile(rf"^{re.escape(name)}\[(\d+)\](?:$|[.\[])")
        indexes = sorted({int(m.group(1)) for key in params.values if (m := pattern.match(key))})
        for index in indexes:
            value = service.convert(params, f"{name}[{index}]", elem)
            items.append(zero_value(elem) if value is NOT_FOUND else value)

        if not raws and not indexes:
            return NOT_FOUND
        return items if origin is list else origin(items)


class MappingConverter:
    """``dict[K, V]`` from keys shaped ``name[key]``."""

    def can_convert(self, target: Any) -> bool:
        return (get_origin(target) or target) is dict

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any:
        args = get_args(target)
        key_type, value_type = args if len(args) == 2 else (str, str)

        pattern = re.compile(rf"^{re.escape(name)}\[([^\]]+)\]$")
        result: dict[Any, Any] = {}
        for key, vals in params.values.items():
            m = pattern.match(key)
            if m is None or not vals:
                continue
            result[service.coerce(m.group(1), key_type)] = service.coerce(vals[0], value_type)

        return result if result else NOT_FOUND


class StructConverter:
    """Pydantic models and dataclasses, one field at a time.

    A field ``sku`` of parameter ``item`` is read from ``item.sku`` or
    ``item[sku]``, converted with the field's own type (so nesting works),
    and the collected fields are validated into the target type.
    """

    def can_convert(self, target: Any) -> bool:
        return _is_struct(target)

    def convert(self, params: ParameterSet, name: str, target: Any, service: ConverterService) -> Any:
        data: dict[str, Any] = {}
        for field_name, field_type in _struct_fields(target).items():
            for key in (f"{name}.{field_name}", f"{name}[{field_name}]"):
                value = service.convert(params, key, field_type)
                if value is not NOT_FOUND:
                    data[field_name] = value
                    break

        if not data:
            return NOT_FOUND
        if issubclass(target, BaseModel):
            return target.model_validate(data)
        return type_adapter(target).validate_python(data)


def default_converters(temp_dir: str | None = None) -> list[ValueConverter]:
    """The built-in converter chain, most specific first."""
    return [
        FileConverter(temp_dir=temp_dir),
        ScalarConverter(),
        EnumConverter(),
        SequenceConverter(),
        MappingConverter(),
        StructConverter(),
    ]
