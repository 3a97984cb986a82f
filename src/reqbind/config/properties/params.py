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
"""Request parameter parsing configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from reqbind.core.config import config_properties

MAX_JSON_SIZE = 50 << 20


@config_properties(prefix="reqbind.params")
@dataclass
class ParamsProperties:
    """Configuration for request parameter parsing (reqbind.params.*).

    ``max_json_size`` is inclusive: a body of exactly that many bytes is read.
    """

    max_json_size: int = MAX_JSON_SIZE
    max_files: int = 1000
    max_fields: int = 1000
    temp_dir: str | None = None
