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
"""Mapping profiles and the configuration object that assembles a mapper."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import structlog

from flymap.logging import configure_logging
from flymap.mapping.properties import MapperProperties
from flymap.mapping.registry import DynamicMapper

if TYPE_CHECKING:
    from flymap.core.config import Config

logger = structlog.get_logger("flymap.mapping.profile")

Registration = Callable[[DynamicMapper], Any]


@runtime_checkable
class MappingProfile(Protocol):
    """A reusable batch of registrations."""

    def configure(self, registry: DynamicMapper) -> None: ...


class Profile(ABC):
    """Convenience base for named profiles; ``name`` defaults to the class name."""

    name: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("name"):
            cls.name = cls.__name__

    @abstractmethod
    def configure(self, registry: DynamicMapper) -> None: ...


class MapperConfiguration:
    """Collects profiles and inline registrations, then builds a mapper.

    Registrations run in the order they were added against a fresh
    :class:`DynamicMapper`, so later registrations for the same pair win.

    Usage::

        mapper = (
            MapperConfiguration()
            .add_profile(ReservationMappingProfile)
            .add_registration(lambda r: r.register_mapping(A, B, lambda b: b.auto_map()))
            .build_mapper()
        )
    """

    def __init__(self) -> None:
        self._registrations: list[tuple[str, Registration]] = []

    @property
    def registration_names(self) -> list[str]:
        return [name for name, _ in self._registrations]

    def add_profile(self, profile: MappingProfile | type[MappingProfile]) -> MapperConfiguration:
        """Add a profile instance, or a profile class instantiated without arguments."""
        if profile is None:
            raise TypeError("profile must not be None")
        if isinstance(profile, type):
            profile = profile()
        if not isinstance(profile, MappingProfile):
            raise TypeError(f"{type(profile).__name__} does not implement configure(registry)")
        name = getattr(profile, "name", "") or type(profile).__name__
        self._registrations.append((name, profile.configure))
        return self

    def add_registration(self, registration: Registration) -> MapperConfiguration:
        """Add an inline callback receiving the registry."""
        if registration is None:
            raise TypeError("registration must not be None")
        name = getattr(registration, "__name__", "registration")
        self._registrations.append((name, registration))
        return self

    def build_mapper(self, config: Config | None = None) -> DynamicMapper:
        """Apply every registration, in order, to a new mapper.

        When *config* is given, mapper settings are bound from its
        ``flymap.mapper`` section and ``flymap.logging`` is applied.
        """
        if config is None:
            properties = MapperProperties()
        else:
            configure_logging(config)
            properties = config.bind(MapperProperties)
        mapper = DynamicMapper(properties)
        for name, registration in self._registrations:
            registration(mapper)
            logger.debug("registration_applied", registration=name)
        logger.info(
            "mapper_built",
            registrations=len(self._registrations),
            pairs=len(mapper.registered_pairs()),
        )
        return mapper
