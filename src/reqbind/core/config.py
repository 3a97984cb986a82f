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
"""Configuration: packaged defaults, YAML/TOML files, env overrides, typed binding.

Values are addressed with dotted keys (``reqbind.params.max_json_size``).
Lookup order, first hit wins:

1. ``REQBIND_*`` environment variables (``REQBIND_PARAMS_MAX_JSON_SIZE``)
2. the loaded file(s), profile overlays on top of the base file
3. packaged defaults (``reqbind/resources/reqbind-defaults.yaml``)
4. the defaults of the ``@config_properties`` dataclass being bound

String values may embed ``${NAME}`` or ``${NAME:fallback}`` placeholders,
resolved against the environment first and then other config keys.
"""

from __future__ import annotations

import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]
from pydantic import TypeAdapter

T = TypeVar("T")

_PREFIX_ATTR = "__reqbind_config_prefix__"
_ENV_PREFIX = "REQBIND_"
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10
_DEFAULTS_RESOURCE = "reqbind-defaults.yaml"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Declare the config section a dataclass binds to.

    Usage::

        @config_properties(prefix="reqbind.params")
        @dataclass
        class ParamsProperties:
            max_json_size: int = 50 << 20
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """Environment variable overriding *key*: ``reqbind.params.max_files`` -> ``REQBIND_PARAMS_MAX_FILES``."""
    return _ENV_PREFIX + key.removeprefix("reqbind.").upper().replace(".", "_").replace("-", "_")


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with path.open("rb") as f:
            return tomllib.load(f)
    with path.open() as f:
        return yaml.safe_load(f) or {}


def _packaged_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("reqbind.resources").joinpath(_DEFAULTS_RESOURCE)
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}


class Config:
    """Nested configuration data with dotted-key access."""

    def __init__(self, data: dict[str, Any] | None = None, sources: list[str] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources = sources or []

    @property
    def loaded_sources(self) -> list[str]:
        """Where the data came from, in merge order."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def defaults(cls) -> Config:
        return cls(_packaged_defaults(), [_DEFAULTS_RESOURCE])

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load *path* (YAML, or TOML by suffix) over the packaged defaults.

        For each active profile, ``<stem>-<profile><suffix>`` next to *path*
        is merged on top if it exists. A missing base file is not an error.
        """
        path = Path(path)
        data: dict[str, Any] = _packaged_defaults() if load_defaults else {}
        sources = [_DEFAULTS_RESOURCE] if load_defaults else []

        candidates = [path] + [path.with_name(f"{path.stem}-{p}{path.suffix}") for p in active_profiles or []]
        if path.exists():
            for candidate in candidates:
                if candidate.exists():
                    data = _merge(data, _read_file(candidate))
                    sources.append(str(candidate))

        return cls(data, sources)

    def get(self, key: str, default: Any = None) -> Any:
        """Value for dotted *key*; env overrides win and placeholders are resolved."""
        env_value = os.environ.get(env_key(key))
        if env_value is not None:
            return env_value

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Build a ``@config_properties`` dataclass from its config section.

        Every field is read through :meth:`get`. Values are validated with
        Pydantic in lax mode, so env var strings such as ``"9"`` or
        ``"true"`` become ``int`` and ``bool`` fields.

        Raises:
            ValueError: *config_cls* is not decorated, or a value does not
                fit its field.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        values: dict[str, Any] = {}
        for name in getattr(config_cls, "__dataclass_fields__", {}):
            value = self.get(f"{prefix}.{name}")
            if value is not None:
                values[name] = value
        return TypeAdapter(config_cls).validate_python(values)

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _resolve(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"placeholder nesting too deep in {value!r}")

        def substitute(match: re.Match[str]) -> str:
            name, _, fallback = match.group(1).partition(":")
            found = os.environ.get(name)
            if found is None:
                ref = self._lookup(name)
                found = None if ref is None else str(ref)
            if found is None:
                if ":" not in match.group(1):
                    raise ValueError(f"unresolved placeholder ${{{name}}}")
                return fallback
            return self._resolve(found, depth + 1) if "${" in found else found

        return _PLACEHOLDER.sub(substitute, value)
