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
"""ParameterResolver — merges the per-source maps into the unified view."""

from __future__ import annotations

from reqbind.web.params import MultiValues, ParameterSet


def calc_values(
    query: MultiValues,
    route: MultiValues,
    fixed: MultiValues,
    form: MultiValues,
) -> MultiValues:
    """Return a unified view of the component parameter maps.

    Order of trust, least to most: query, form, route, fixed. Query and
    form values accumulate per key; route and fixed values replace them.
    """
    num_params = len(query) + len(fixed) + len(route) + len(form)

    if num_params == 0:
        return {}

    # Only one source has anything: hand it back as is, without copying.
    if num_params == len(query):
        return query
    if num_params == len(route):
        return route
    if num_params == len(fixed):
        return fixed
    if num_params == len(form):
        return form

    values: MultiValues = {}

    # ?query string parameters first
    for key, vals in query.items():
        values.setdefault(key, []).extend(vals)

    # form parameters append
    for key, vals in form.items():
        values.setdefault(key, []).extend(vals)

    # /:path parameters overwrite
    for key, vals in route.items():
        values[key] = vals

    # fixed route parameters overwrite
    for key, vals in fixed.items():
        values[key] = vals

    return values


class ParameterResolver:
    """Computes and stores :attr:`ParameterSet.values` for a request."""

    def calc_values(self, params: ParameterSet) -> MultiValues:
        return calc_values(params.query, params.route, params.fixed, params.form)

    def resolve(self, params: ParameterSet) -> MultiValues:
        params.values = self.calc_values(params)
        return params.values
