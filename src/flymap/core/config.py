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
"""Layered flymap configuration.

Sources, lowest to highest priority:

1. Library defaults (``flymap/resources/flymap-defaults.yaml``)
2. A YAML or TOML file, then its ``{stem}-{profile}{suffix}`` overlays
3. ``FLYMAP_*`` environment variables (``flymap.mapper.max_depth`` is
   ``FLYMAP_MAPPER_MAX_DEPTH``)

Settings classes opt in with :func:`config_properties` and are populated
by :meth:`Config.bind`.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

from flymap.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_CONFIG_PROPERTIES_ATTR = "__flymap_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Bind a dataclass or pydantic model to the configuration section at *prefix*."""

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """Environment variable overriding the dotted *key*."""
    return "FLYMAP_" + key.removeprefix("flymap.").upper().replace(".", "_").replace("-", "_")


class Config:
    """Nested settings with dot-notation lookup."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load *path* over the library defaults; a missing file leaves only the defaults."""
        path = Path(path)
        layers = [_library_defaults()] if load_defaults else []
        if path.is_file():
            layers.append(_read(path))
            for profile in active_profiles or []:
                overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if overlay.is_file():
                    layers.append(_read(overlay))

        data: dict[str, Any] = {}
        for layer in layers:
            data = _merge(data, layer)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        env_val = os.environ.get(env_key(key))
        if env_val is not None:
            return env_val
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return default if current is None else current

    def get_section(self, prefix: str) -> dict[str, Any]:
        section = self.get(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Build *config_cls* from its ``@config_properties`` section.

        Environment strings are parsed as YAML scalars before they reach a
        non-``str`` field, so ``"16"`` binds to an ``int`` and ``"true"`` to
        a ``bool``. Pydantic models validate the collected values themselves.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(f"{config_cls.__name__} is not decorated with @config_properties")

        model_fields = getattr(config_cls, "model_fields", None)
        if isinstance(model_fields, dict):
            values = {name: self.get(f"{prefix}.{name}") for name in model_fields}
            try:
                return config_cls.model_validate(  # type: ignore[attr-defined]
                    {name: value for name, value in values.items() if value is not None}
                )
            except ValueError as exc:
                raise ConfigurationException(
                    f"Invalid configuration for {config_cls.__name__} (prefix '{prefix}'): {exc}"
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            if isinstance(value, str) and hints.get(field.name) is not str:
                value = yaml.safe_load(value)
            kwargs[field.name] = value
        return config_cls(**kwargs)


def _read(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _library_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("flymap.resources").joinpath("flymap-defaults.yaml")
    return yaml.safe_load(resource.read_text()) or {}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
