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
"""Size-bounded readers for request bodies.

Unlike a truncating reader, these fail with
:class:`~reqbind.kernel.exceptions.PayloadTooLargeException` once the
source proves to be larger than the allowed size, so an oversized body is
never mistaken for a complete one.

Use the factories, which take the *inclusive* maximum size::

    reader = limit_reader(io.BytesIO(data), max_size=1024)
    body = reader.readall()      # ok for len(data) <= 1024

    reader = async_limit_reader(request.stream(), max_size=1024)
    body = await reader.readall()
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import Any, Protocol

from reqbind.kernel.exceptions import PayloadTooLargeException

DEFAULT_CHUNK_SIZE = 64 * 1024


class SupportsRead(Protocol):
    def read(self, size: int = ..., /) -> bytes: ...


def _too_large(limit: int) -> PayloadTooLargeException:
    return PayloadTooLargeException(
        "content larger than maximum limit",
        code="PAYLOAD_TOO_LARGE",
        context={"limit": limit - 1},
    )


class BoundedReader:
    """Reads at most ``limit`` bytes from a file-like source.

    Every read is capped at the remaining budget. Once the budget is used
    up, the next read raises instead of returning ``b""``: hitting the
    budget means the source held more data than allowed. A source that ends
    while budget remains ends normally.
    """

    def __init__(self, source: SupportsRead, limit: int) -> None:
        self._source = source
        self._limit = limit
        self._remaining = limit

    @property
    def remaining(self) -> int:
        return self._remaining

    def read(self, size: int = -1) -> bytes:
        """Read up to *size* bytes (all remaining budget when negative).

        Returns ``b""`` at end of stream.
        """
        if self._remaining <= 0:
            raise _too_large(self._limit)

        if size < 0 or size > self._remaining:
            size = self._remaining
        chunk = self._source.read(size)
        self._remaining -= len(chunk)
        return chunk

    def readall(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
        """Read until end of stream, raising if the limit is exceeded."""
        parts: list[bytes] = []
        while chunk := self.read(chunk_size):
            parts.append(chunk)
        return b"".join(parts)


class AsyncBoundedReader:
    """Async counterpart of :class:`BoundedReader` over a chunk iterator.

    The source is any async iterable of ``bytes`` chunks, such as
    ``starlette.requests.Request.stream()``. Chunks are pulled only while
    the caller's request cannot be satisfied from the buffer.
    """

    def __init__(self, source: AsyncIterable[bytes], limit: int) -> None:
        self._source: AsyncIterator[bytes] = aiter(source)
        self._limit = limit
        self._remaining = limit
        self._buffer = bytearray()
        self._eof = False
        self._error: Exception | None = None

    @property
    def remaining(self) -> int:
        return self._remaining

    async def read(self, size: int = -1) -> bytes:
        """Read up to *size* bytes; ``b""`` at end of stream.

        If the source fails after some data was buffered, that data is
        returned first and the failure is raised by the next read.
        """
        if self._remaining <= 0:
            raise _too_large(self._limit)
        if self._error is not None and not self._buffer:
            error, self._error = self._error, None
            raise error

        if size < 0 or size > self._remaining:
            size = self._remaining
        while len(self._buffer) < size and not self._eof:
            try:
                self._buffer += await anext(self._source)
            except StopAsyncIteration:
                self._eof = True
            except Exception as exc:
                if not self._buffer:
                    raise
                self._error = exc
                self._eof = True

        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        self._remaining -= len(data)
        return data

    async def readall(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
        parts: list[bytes] = []
        while chunk := await self.read(chunk_size):
            parts.append(chunk)
        return b"".join(parts)


def limit_reader(source: SupportsRead, max_size: int) -> BoundedReader:
    """Wrap *source* so that up to and including *max_size* bytes can be read."""
    return BoundedReader(source, max_size + 1)


def async_limit_reader(source: AsyncIterable[bytes] | Any, max_size: int) -> AsyncBoundedReader:
    """Async variant of :func:`limit_reader`."""
    return AsyncBoundedReader(source, max_size + 1)
