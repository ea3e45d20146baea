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
"""Per-target-member overrides configured through ``MappingBuilder.for_member``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from flymap.kernel.exceptions import InvalidMappingConfigurationException
from flymap.mapping import typeinfo
from flymap.mapping.members import readable_members

S = TypeVar("S")


class MemberConfiguration(Generic[S]):
    """Ignore flag and/or value resolver for one target member.

    ``ignore()`` and ``map_from()`` replace each other: whichever is called
    last decides how the member is populated.
    """

    def __init__(self, source_type: type[S], target_member: str) -> None:
        self.source_type = source_type
        self.target_member = target_member
        self._ignored = False
        self._resolver: Callable[[S], Any] | None = None

    @property
    def is_ignored(self) -> bool:
        return self._ignored

    @property
    def has_resolver(self) -> bool:
        return self._resolver is not None

    def ignore(self) -> MemberConfiguration[S]:
        """Leave the target member at its default value."""
        self._ignored = True
        self._resolver = None
        return self

    def map_from(self, resolver: Callable[[S], Any] | str) -> MemberConfiguration[S]:
        """Populate the member from *resolver*.

        *resolver* is either a callable receiving the source instance, or a
        member reference naming a readable source member. References may be
        dotted (``"contact.email"``) and are validated immediately.

        Raises:
            InvalidMappingConfigurationException: For an unknown member reference.
        """
        if resolver is None:
            raise TypeError("resolver must not be None")
        if isinstance(resolver, str):
            resolver = self._accessor(resolver)
        elif not callable(resolver):
            raise InvalidMappingConfigurationException(
                f"map_from() for '{self.target_member}' expects a callable or a member name, "
                f"got {type(resolver).__name__}"
            )
        self._resolver = resolver
        self._ignored = False
        return self

    def resolve(self, source: S) -> Any:
        if self._resolver is None:
            return None
        return self._resolver(source)

    def _accessor(self, reference: str) -> Callable[[S], Any]:
        path: list[str] = []
        owner: Any = self.source_type
        for segment in reference.split("."):
            if not typeinfo.is_class(owner):
                # No type information past this point; keep the name as given.
                path.append(segment)
                continue
            info = readable_members(owner).get(segment.lower())
            if info is None:
                raise InvalidMappingConfigurationException(
                    f"'{reference}' does not reference a readable member of {self.source_type.__name__} "
                    f"(no '{segment}' on {owner.__name__})"
                )
            path.append(info.name)
            owner, _ = typeinfo.unwrap_optional(info.annotation)

        def read(source: S) -> Any:
            value: Any = source
            for name in path:
                if value is None:
                    return None
                value = getattr(value, name)
            return value

        return read
