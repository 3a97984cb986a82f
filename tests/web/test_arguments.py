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
"""Tests for ArgumentResolver."""

from typing import Optional

import pytest
from pydantic import BaseModel

from reqbind.kernel.exceptions import BindingException
from reqbind.web.arguments import JSON, PARAMS, REQUEST, VALUE, ArgumentResolver
from reqbind.web.params import JsonBody, ParameterSet


class Order(BaseModel):
    id: int
    note: str = ""


class FakeHttpRequest:
    pass


def _params(values: dict | None = None, json: bytes = b"") -> ParameterSet:
    params = ParameterSet(json=json)
    params.values = values or {}
    return params


class TestInspection:
    def test_classifies_arguments(self):
        async def handler(params: ParameterSet, request: FakeHttpRequest, body: JsonBody[Order], page: int):
            pass

        resolver = ArgumentResolver(handler, request_type=FakeHttpRequest)
        kinds = {arg.name: arg.kind for arg in resolver.arguments}
        assert kinds == {"params": PARAMS, "request": REQUEST, "body": JSON, "page": VALUE}

    def test_unannotated_arguments_are_skipped(self):
        async def handler(anything, page: int):
            pass

        assert [arg.name for arg in ArgumentResolver(handler).arguments] == ["page"]

    def test_request_type_without_adapter_is_a_value(self):
        async def handler(request: FakeHttpRequest):
            pass

        assert ArgumentResolver(handler).arguments[0].kind == VALUE


class TestResolution:
    def test_passes_params_and_request(self):
        async def handler(params: ParameterSet, request: FakeHttpRequest):
            pass

        params = _params()
        request = FakeHttpRequest()
        kwargs = ArgumentResolver(handler, request_type=FakeHttpRequest).resolve(params, request)
        assert kwargs["params"] is params
        assert kwargs["request"] is request

    def test_binds_named_values(self):
        async def handler(page: int, tags: list[str]):
            pass

        kwargs = ArgumentResolver(handler).resolve(_params({"page": ["2"], "tags": ["a", "b"]}))
        assert kwargs == {"page": 2, "tags": ["a", "b"]}

    def test_default_used_when_absent(self):
        async def handler(page: int = 1, sort: Optional[str] = None):
            pass

        assert ArgumentResolver(handler).resolve(_params()) == {"page": 1, "sort": None}

    def test_default_ignored_when_supplied(self):
        async def handler(page: int = 1):
            pass

        assert ArgumentResolver(handler).resolve(_params({"page": ["5"]})) == {"page": 5}

    def test_missing_without_default_is_zero(self):
        async def handler(page: int):
            pass

        assert ArgumentResolver(handler).resolve(_params()) == {"page": 0}

    def test_json_body_argument(self):
        async def handler(order: JsonBody[Order]):
            pass

        kwargs = ArgumentResolver(handler).resolve(_params(json=b'{"id": 4, "note": "x"}'))
        assert kwargs["order"] == Order(id=4, note="x")

    def test_json_body_failure_raises(self):
        async def handler(order: JsonBody[Order]):
            pass

        with pytest.raises(BindingException):
            ArgumentResolver(handler).resolve(_params(json=b'{"id": "x"}'))

    def test_value_falls_back_to_json_body(self):
        async def handler(order: Order):
            pass

        kwargs = ArgumentResolver(handler).resolve(_params(json=b'{"id": 9}'))
        assert kwargs["order"] == Order(id=9)

    def test_default_kept_when_json_body_does_not_fit(self):
        async def handler(page: int = 7):
            pass

        assert ArgumentResolver(handler).resolve(_params(json=b'{"sku": "a"}')) == {"page": 7}

    def test_defaulted_argument_takes_fitting_json_body(self):
        async def handler(order: Optional[Order] = None):
            pass

        kwargs = ArgumentResolver(handler).resolve(_params(json=b'{"id": 3}'))
        assert kwargs["order"] == Order(id=3)

    def test_supplied_value_wins_over_json_body_and_default(self):
        async def handler(page: int = 7):
            pass

        assert ArgumentResolver(handler).resolve(_params({"page": ["2"]}, json=b"[]")) == {"page": 2}
