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
"""Tests for the reqbind exception hierarchy."""

from reqbind.kernel.exceptions import (
    BindContractViolation,
    BindingException,
    BusinessException,
    InvalidRequestException,
    PayloadTooLargeException,
    ReqbindException,
)


class TestReqbindException:
    def test_basic_creation(self):
        exc = ReqbindException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = ReqbindException("too big", code="PAYLOAD_TOO_LARGE", context={"limit": 10})
        assert exc.code == "PAYLOAD_TOO_LARGE"
        assert exc.context == {"limit": 10}

    def test_context_not_shared(self):
        ReqbindException("a").context["key"] = "value"
        assert ReqbindException("b").context == {}


class TestExceptionHierarchy:
    def test_business_is_reqbind(self):
        assert issubclass(BusinessException, ReqbindException)

    def test_payload_too_large_is_business(self):
        assert issubclass(PayloadTooLargeException, BusinessException)

    def test_invalid_request_is_binding(self):
        assert issubclass(InvalidRequestException, BindingException)
        assert issubclass(BindingException, BusinessException)

    def test_contract_violation_is_not_recoverable(self):
        assert issubclass(BindContractViolation, AssertionError)
        assert not issubclass(BindContractViolation, ReqbindException)
