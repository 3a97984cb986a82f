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
"""Request parameter data model.

A :class:`ParameterSet` holds every per-source map of one inbound request
plus the unified, precedence-resolved view handed to handler code::

    params.get("page")              # first unified value or None
    params.get_all("tag")           # every unified value
    params.bind(ref, "page")        # typed named bind into a Ref
    params.bind_json(order)         # whole JSON body into a destination
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any, Generic, TypeVar, cast

if TYPE_CHECKING:
    from reqbind.web.binder import Binder

T = TypeVar("T")

MultiValues = dict[str, list[str]]
"""Parameter name -> values in arrival order."""

_UNSET: Any = object()


class UploadedFile:
    """Represents an uploaded file from a multipart request.

    Attributes:
        filename: Original filename from the client.
        content_type: MIME type of the uploaded file.
        size: File size in bytes.
        headers: Part headers sent with the file.
    """

    def __init__(
        self,
        filename: str,
        content_type: str,
        size: int,
        _file: Any,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._filename = filename
        self._content_type = content_type
        self._size = size
        self._file = _file
        self._headers = headers or {}

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def content_type(self) -> str:
        return self._content_type

    @property
    def size(self) -> int:
        return self._size

    @property
    def headers(self) -> dict[str, str]:
        return self._headers

    @property
    def file(self) -> Any:
        """The underlying file handle."""
        return self._file

    def read_sync(self) -> bytes:
        """Read the entire file content from the start, synchronously."""
        if hasattr(self._file, "seek"):
            self._file.seek(0)
        if hasattr(self._file, "read"):
            return cast(bytes, self._file.read())
        return b""

    async def read(self) -> bytes:
        """Read the entire file content into memory."""
        if hasattr(self._file, "read"):
            data = self._file.read()
            if hasattr(data, "__await__"):
                return cast(bytes, await data)
            return cast(bytes, data)
        return b""

    async def seek(self, offset: int) -> None:
        if hasattr(self._file, "seek"):
            result = self._file.seek(offset)
            if hasattr(result, "__await__"):
                await result

    async def save(self, path: Any) -> None:
        """Save the file to the given path."""
        from pathlib import Path

        content = await self.read()
        Path(path).write_bytes(content)

    def __repr__(self) -> str:
        return f"UploadedFile(filename={self._filename!r}, content_type={self._content_type!r}, size={self._size})"


class Ref(Generic[T]):
    """A typed, writable cell used as the destination of a named bind.

    ``Ref(int)`` starts unset; ``Ref(list[str], value=[])`` starts with a
    value. A frozen Ref is read-only and is rejected by named binds.
    """

    __slots__ = ("_type", "_value", "_frozen")

    def __init__(self, type_: Any, value: Any = _UNSET, *, frozen: bool = False) -> None:
        self._type = type_
        self._value = value
        self._frozen = frozen

    @property
    def type(self) -> Any:
        return self._type

    @property
    def settable(self) -> bool:
        return not self._frozen

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T | None:
        return None if self._value is _UNSET else cast(T, self._value)

    @value.setter
    def value(self, value: T) -> None:
        if self._frozen:
            raise AttributeError("cannot assign to a frozen Ref")
        self._value = value

    def __repr__(self) -> str:
        name = getattr(self._type, "__name__", repr(self._type))
        return f"Ref[{name}]({self.value!r})"


class ParameterSet:
    """Per-request parameter sources and their unified view.

    ``query``, ``route``, ``fixed`` and ``form`` are the individual sources;
    ``values`` is derived from them by
    :class:`~reqbind.web.resolver.ParameterResolver` once every source has
    been parsed. ``files`` is only populated for multipart bodies and
    ``json`` only for JSON bodies. ``temp_files`` holds server-side temporary
    files that are deleted when the request finishes.
    """

    def __init__(
        self,
        *,
        query: MultiValues | None = None,
        route: MultiValues | None = None,
        fixed: MultiValues | None = None,
        form: MultiValues | None = None,
        files: dict[str, list[UploadedFile]] | None = None,
        json: bytes = b"",
    ) -> None:
        self.query: MultiValues = query if query is not None else {}
        self.route: MultiValues = route if route is not None else {}
        self.fixed: MultiValues = fixed if fixed is not None else {}
        self.form: MultiValues = form if form is not None else {}
        self.files: dict[str, list[UploadedFile]] = files if files is not None else {}
        self.json: bytes = json
        self.values: MultiValues = {}
        self.temp_files: list[IO[bytes]] = []

    def get(self, name: str, default: str | None = None) -> str | None:
        """First unified value for *name*."""
        found = self.values.get(name)
        return found[0] if found else default

    def get_all(self, name: str) -> list[str]:
        """Every unified value for *name*, in order."""
        return list(self.values.get(name, ()))

    def __contains__(self, name: object) -> bool:
        return name in self.values or name in self.files

    def add_temp_file(self, handle: IO[bytes]) -> None:
        """Record a server-side temp file for deletion at request end."""
        self.temp_files.append(handle)

    def bind(self, dest: Any, name: str, binder: Binder | None = None) -> None:
        """Named bind of *name* into *dest* (see :meth:`Binder.bind`)."""
        from reqbind.web.binder import default_binder

        (binder or default_binder()).bind(self, dest, name)

    def bind_json(self, dest: Any, binder: Binder | None = None) -> None:
        """Whole-payload JSON bind into *dest* (see :meth:`Binder.bind_json`)."""
        from reqbind.web.binder import default_binder

        (binder or default_binder()).bind_json(self, dest)

    def __repr__(self) -> str:
        return (
            f"ParameterSet(values={self.values!r}, files={sorted(self.files)!r}, "
            f"json={len(self.json)} bytes, temp_files={len(self.temp_files)})"
        )


class JsonBody(Generic[T]):
    """Handler argument marker: the whole JSON body validated as ``T``.

    Usage::

        async def create_order(order: JsonBody[CreateOrder]) -> dict: ...
    """
