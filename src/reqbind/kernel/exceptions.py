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
"""Exception hierarchy for reqbind.

Recoverable failures inherit from ReqbindException so callers can catch
them in one place. Misuse of the binding API is not recoverable and is
signalled with BindContractViolation instead.

Categories:
- BusinessException: malformed or oversized request input
- BindingException: whole-payload and handler-argument binding failures
- BindContractViolation: caller passed a destination that cannot be written
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class ReqbindException(Exception):
    """Base exception for all recoverable reqbind errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "PAYLOAD_TOO_LARGE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(ReqbindException):
    """Request input violates a rule of the parameter pipeline."""


class PayloadTooLargeException(BusinessException):
    """The request payload exceeds the maximum allowed size."""


class BindingException(BusinessException):
    """A value could not be bound into the requested destination."""


class InvalidRequestException(BindingException):
    """Request body is syntactically invalid (e.g. malformed JSON)."""


# =============================================================================
# Contract violations
# =============================================================================


class BindContractViolation(AssertionError):
    """A named bind was given a destination that is not a writable reference.

    This is a programming error in the calling code, not a runtime
    condition. It sits outside ``ReqbindException``, so
    handlers catching recoverable errors never swallow it.
    """
