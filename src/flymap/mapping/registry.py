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
"""DynamicMapper: the type-pair registry and the public ``map`` entry points.

Registrations are last-write-wins. A definition carrying a reverse function
also stores its derived reverse under the swapped pair, replacing anything
registered there before.

Storage is copy-on-write: writers publish a new dict under a lock, readers
use whichever dict reference is current. A ``map`` call in flight sees
either the old or the new definition, never a mix.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from contextvars import ContextVar
from typing import Any, TypeVar

import structlog

from flymap.kernel.exceptions import MappingDepthExceededException, MappingNotRegisteredException
from flymap.mapping.builder import MappingBuilder
from flymap.mapping.context import MappingContext
from flymap.mapping.definition import MappingDefinition, TypePair
from flymap.mapping.properties import MapperProperties

S = TypeVar("S")
T = TypeVar("T")

logger = structlog.get_logger("flymap.mapping.registry")

_depth: ContextVar[int] = ContextVar("flymap_mapping_depth", default=0)


class DynamicMapper:
    """Runtime mapper translating between registered model pairs.

    Usage::

        mapper = DynamicMapper()
        mapper.register_mapping(Address, PartnerAddress, lambda b: b.auto_map(
            {"street": "street_address", "city": "city_name", "postal_code": "zip"}
        ))

        partner = mapper.map(address, PartnerAddress)
        address = mapper.map(partner, Address)  # generated reverse
    """

    def __init__(self, properties: MapperProperties | None = None) -> None:
        self._properties = properties if properties is not None else MapperProperties()
        self._definitions: dict[TypePair, MappingDefinition] = {}
        self._lock = threading.Lock()

    @property
    def properties(self) -> MapperProperties:
        return self._properties

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, definition: MappingDefinition) -> None:
        """Store *definition*, plus its derived reverse when it has one."""
        if definition is None:
            raise TypeError("definition must not be None")
        entries = [definition]
        if definition.reverse is not None:
            entries.append(definition.create_reverse())

        with self._lock:
            updated = dict(self._definitions)
            for entry in entries:
                if entry.key in updated:
                    logger.debug("mapping_replaced", pair=entry.key.describe())
                updated[entry.key] = entry
            self._definitions = updated

        logger.debug(
            "mapping_registered",
            pair=definition.key.describe(),
            reverse=definition.reverse is not None,
        )

    def register_mapping(
        self,
        source_type: type[S],
        target_type: type[T],
        configure: Callable[[MappingBuilder[S, T]], Any],
    ) -> MappingDefinition:
        """Configure a :class:`MappingBuilder` with *configure*, build and register it."""
        if configure is None:
            raise TypeError("configure must not be None")
        builder = MappingBuilder(source_type, target_type)
        configure(builder)
        definition = builder.build()
        self.register(definition)
        return definition

    def has_mapping(self, source_type: type, target_type: type) -> bool:
        return TypePair(source_type, target_type) in self._definitions

    def registered_pairs(self) -> list[TypePair]:
        return list(self._definitions)

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def map(self, source: Any, target_type: type[T], context: MappingContext | None = None) -> T | None:
        """Map *source* to *target_type*, dispatching on the runtime type of *source*.

        Returns ``None`` for a ``None`` source without a lookup.

        Raises:
            MappingNotRegisteredException: When the pair is not registered.
        """
        if target_type is None:
            raise TypeError("target_type must not be None")
        if source is None:
            return None
        return self._dispatch(type(source), target_type, source, context)

    def map_typed(
        self,
        source_type: type[S],
        target_type: type[T],
        source: S | None,
        context: MappingContext | None = None,
    ) -> T | None:
        """Map *source* using the declared *source_type* as the lookup key.

        Unlike :meth:`map`, a subclass instance does not select its own
        registration here.
        """
        if source is None:
            return None
        return self._dispatch(source_type, target_type, source, context)

    def map_list(
        self,
        sources: Iterable[Any],
        target_type: type[T],
        context: MappingContext | None = None,
    ) -> list[T | None]:
        """Map each element of *sources* with :meth:`map`."""
        return [self.map(source, target_type, context) for source in sources]

    def _dispatch(
        self,
        source_type: type,
        target_type: type,
        source: Any,
        context: MappingContext | None,
    ) -> Any:
        definition = self._definitions.get(TypePair(source_type, target_type))
        if definition is None:
            raise MappingNotRegisteredException(source_type, target_type)

        context = context if context is not None else MappingContext.EMPTY
        max_depth = self._properties.max_depth
        if max_depth <= 0:
            return definition.invoke(source, context, self)

        depth = _depth.get()
        if depth >= max_depth:
            raise MappingDepthExceededException(source_type, target_type, max_depth)
        token = _depth.set(depth + 1)
        try:
            return definition.invoke(source, context, self)
        finally:
            _depth.reset(token)
