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
"""Tests for ParameterResolver — trust ordering and single-source fast paths."""

from reqbind.web.params import ParameterSet
from reqbind.web.resolver import ParameterResolver, calc_values


class TestCalcValuesFastPaths:
    def test_all_sources_empty_gives_empty_map(self):
        assert calc_values({}, {}, {}, {}) == {}

    def test_only_query_is_returned_as_is(self):
        query = {"page": ["2"], "tag": ["a", "b"]}
        result = calc_values(query, {}, {}, {})
        assert result is query

    def test_only_route_is_returned_as_is(self):
        route = {"id": ["7"]}
        assert calc_values({}, route, {}, {}) is route

    def test_only_fixed_is_returned_as_is(self):
        fixed = {"mode": ["admin"]}
        assert calc_values({}, {}, fixed, {}) is fixed

    def test_only_form_is_returned_as_is(self):
        form = {"name": ["Widget"], "qty": ["3"]}
        assert calc_values({}, {}, {}, form) is form


class TestCalcValuesPrecedence:
    def test_route_overrides_query(self):
        result = calc_values({"id": ["from-query"]}, {"id": ["from-route"]}, {}, {})
        assert result["id"] == ["from-route"]

    def test_fixed_overrides_route(self):
        result = calc_values({}, {"id": ["from-route"]}, {"id": ["from-fixed"]}, {})
        assert result["id"] == ["from-fixed"]

    def test_fixed_overrides_query_and_form(self):
        result = calc_values({"k": ["q"]}, {}, {"k": ["f"]}, {"k": ["form"]})
        assert result["k"] == ["f"]

    def test_query_and_form_accumulate_in_order(self):
        result = calc_values({"tag": ["q1", "q2"]}, {}, {}, {"tag": ["f1"]})
        assert result["tag"] == ["q1", "q2", "f1"]

    def test_route_overrides_accumulated_query_and_form(self):
        result = calc_values({"id": ["q"]}, {"id": ["r"]}, {}, {"id": ["f"]})
        assert result["id"] == ["r"]

    def test_keys_from_every_source_are_kept(self):
        result = calc_values({"a": ["1"]}, {"b": ["2"]}, {"c": ["3"]}, {"d": ["4"]})
        assert result == {"a": ["1"], "b": ["2"], "c": ["3"], "d": ["4"]}

    def test_merge_does_not_mutate_sources(self):
        query = {"tag": ["q"]}
        form = {"tag": ["f"]}
        calc_values(query, {}, {}, form)
        assert query == {"tag": ["q"]}
        assert form == {"tag": ["f"]}


class TestParameterResolver:
    def test_resolve_stores_unified_values(self):
        params = ParameterSet(query={"page": ["1"]}, route={"id": ["9"]})
        resolved = ParameterResolver().resolve(params)
        assert params.values is resolved
        assert params.values == {"page": ["1"], "id": ["9"]}

    def test_calc_values_does_not_store(self):
        params = ParameterSet(fixed={"x": ["1"]})
        assert ParameterResolver().calc_values(params) == {"x": ["1"]}
        assert params.values == {}
