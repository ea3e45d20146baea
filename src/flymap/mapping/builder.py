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
"""Fluent builder that turns one registration call into a MappingDefinition.

Usage::

    registry.register_mapping(Customer, PartnerCustomer, lambda b: (
        b.auto_map({"name": "full_name", "primary_address": "address"})
         .for_member("id", lambda m: m.map_from(lambda c: c.customer_id.hex))
    ))
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from flymap.kernel.exceptions import InvalidMappingConfigurationException
from flymap.mapping.definition import MappingDefinition, MappingFunction
from flymap.mapping.engine import auto_map
from flymap.mapping.member import MemberConfiguration
from flymap.mapping.members import find_writable

if TYPE_CHECKING:
    from flymap.mapping.context import MappingContext
    from flymap.mapping.registry import DynamicMapper

S = TypeVar("S")
T = TypeVar("T")


def _arity(fn: Callable[..., Any]) -> int:
    """Number of positional arguments (1 to 3) *fn* should receive."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 3
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return max(1, min(count, 3))


def _adapt(fn: Callable[..., Any]) -> MappingFunction:
    """Wrap a ``(src)``, ``(src, ctx)`` or ``(src, ctx, mapper)`` callable."""
    if not callable(fn):
        raise TypeError(f"Expected a callable, got {type(fn).__name__}")
    arity = _arity(fn)
    if arity == 1:
        return lambda source, context, mapper: fn(source)
    if arity == 2:
        return lambda source, context, mapper: fn(source, context)
    return fn


def _auto_function(
    target_type: type,
    rename_map: Mapping[str, str] | None,
    overrides: Mapping[str, MemberConfiguration[Any]] | None,
) -> MappingFunction:
    def run(source: Any, context: MappingContext, mapper: DynamicMapper) -> Any:
        return auto_map(source, target_type, context, mapper, rename_map, overrides)

    return run


class MappingBuilder(Generic[S, T]):
    """Accumulates the configuration for one ``source_type -> target_type`` pair.

    A forward strategy is required: either :meth:`map_forward` or
    :meth:`auto_map`. When both are given, auto-mapping wins.
    """

    def __init__(self, source_type: type[S], target_type: type[T]) -> None:
        self.source_type = source_type
        self.target_type = target_type
        self._forward: MappingFunction | None = None
        self._reverse: MappingFunction | None = None
        self._rename_map: dict[str, str] | None = None
        self._members: dict[str, MemberConfiguration[S]] = {}
        self._use_auto_map = False

    def map_forward(self, fn: Callable[..., T | None]) -> MappingBuilder[S, T]:
        """Use *fn* for ``source -> target``.

        *fn* may accept ``(source)``, ``(source, context)`` or
        ``(source, context, mapper)``.
        """
        self._forward = _adapt(fn)
        return self

    def map_reverse(self, fn: Callable[..., S | None]) -> MappingBuilder[S, T]:
        """Use *fn* for ``target -> source``; same signatures as :meth:`map_forward`."""
        self._reverse = _adapt(fn)
        return self

    def auto_map(
        self,
        rename_map: Mapping[str, str] | None = None,
        include_reverse: bool = True,
    ) -> MappingBuilder[S, T]:
        """Populate targets by matching member names.

        Args:
            rename_map: ``{source_member: target_member}`` for members whose
                names differ. Matching is case-insensitive.
            include_reverse: Also generate ``target -> source`` using the
                inverted rename map. Member overrides do not apply to it.
        """
        self._rename_map = dict(rename_map) if rename_map is not None else None
        self._use_auto_map = True

        if include_reverse:
            reverse_map = {target: source for source, target in self._rename_map.items()} if self._rename_map else None
            self._reverse = _auto_function(self.source_type, reverse_map, None)

        return self

    def for_member(
        self,
        target_member: str,
        configure: Callable[[MemberConfiguration[S]], Any],
    ) -> MappingBuilder[S, T]:
        """Override how *target_member* is populated during auto-mapping.

        Raises:
            InvalidMappingConfigurationException: When *target_member* is not a
                writable member of the target type.
        """
        if configure is None:
            raise TypeError("configure must not be None")
        info = find_writable(self.target_type, target_member)
        if info is None:
            raise InvalidMappingConfigurationException(
                f"'{target_member}' is not a writable member of {self.target_type.__name__}",
                self.source_type,
                self.target_type,
            )
        member = MemberConfiguration(self.source_type, info.name)
        configure(member)
        self._members[info.name.lower()] = member
        return self

    def build(self) -> MappingDefinition:
        """Produce the immutable definition.

        Raises:
            InvalidMappingConfigurationException: When no forward strategy was set.
        """
        if self._use_auto_map:
            forward = _auto_function(self.target_type, self._rename_map, dict(self._members))
        elif self._forward is not None:
            forward = self._forward
        else:
            raise InvalidMappingConfigurationException(
                f"No forward mapping configured for {self.source_type.__name__} -> {self.target_type.__name__}.",
                self.source_type,
                self.target_type,
            )
        return MappingDefinition(self.source_type, self.target_type, forward, self._reverse)
