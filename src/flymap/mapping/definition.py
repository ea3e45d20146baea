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
"""Type-pair keys and immutable mapping definitions stored by the registry."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from flymap.kernel.exceptions import ReverseMappingNotConfiguredException

if TYPE_CHECKING:
    from flymap.mapping.context import MappingContext
    from flymap.mapping.registry import DynamicMapper

MappingFunction = Callable[[Any, "MappingContext", "DynamicMapper"], Any]
"""``(source, context, mapper) -> target`` as stored in a definition."""


@dataclass(frozen=True, slots=True)
class TypePair:
    """Ordered ``(source, target)`` class identity used as the registry key."""

    source: type
    target: type

    def swapped(self) -> TypePair:
        return TypePair(self.target, self.source)

    def describe(self) -> str:
        return f"{self.source.__name__} -> {self.target.__name__}"


@dataclass(frozen=True, slots=True)
class MappingDefinition:
    """Forward conversion plus an optional reverse for one type pair.

    Attributes:
        source_type: Type the forward function accepts.
        target_type: Type the forward function produces.
        forward: ``(source, context, mapper) -> target``.
        reverse: ``(target, context, mapper) -> source``, or ``None``.
    """

    source_type: type
    target_type: type
    forward: MappingFunction
    reverse: MappingFunction | None = None
    key: TypePair = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", TypePair(self.source_type, self.target_type))

    def invoke(self, source: Any, context: MappingContext, mapper: DynamicMapper) -> Any:
        return self.forward(source, context, mapper)

    def create_reverse(self) -> MappingDefinition:
        """Derive the definition for the swapped pair.

        The derived definition is a snapshot: replacing either definition in
        a registry later does not affect the other.
        """
        if self.reverse is None:
            raise ReverseMappingNotConfiguredException(self.source_type, self.target_type)
        return MappingDefinition(self.target_type, self.source_type, self.reverse, self.forward)
