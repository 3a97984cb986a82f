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
"""OncePerRequestFilter — base WebFilter scoped by path and method."""

from __future__ import annotations

import abc
from fnmatch import fnmatch
from typing import Any

from reqbind.web.ports.filter import CallNext

_APPLIED_KEY = "reqbind.applied_filters"


class OncePerRequestFilter(abc.ABC):
    """Base class for filters that run at most once for a given request.

    ``url_patterns`` and ``exclude_patterns`` are ``fnmatch`` globs over the
    request path; an empty ``url_patterns`` matches every path. ``methods``
    restricts the filter to those HTTP methods. The filter records itself
    in the ASGI scope, so the same request reaching it again (a mounted
    sub-app with its own chain, for instance) skips it.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []
    methods: frozenset[str] = frozenset()

    def should_not_filter(self, request: Any) -> bool:
        applied: set[str] = request.scope.setdefault(_APPLIED_KEY, set())
        if self.filter_name in applied:
            return True

        path: str = request.url.path
        if self.methods and request.method not in self.methods:
            return True
        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True
        if any(fnmatch(path, p) for p in self.exclude_patterns):
            return True

        applied.add(self.filter_name)
        return False

    @property
    def filter_name(self) -> str:
        return f"{type(self).__module__}.{type(self).__qualname__}"

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Handle *request*; call ``await call_next(request)`` to continue the chain."""
