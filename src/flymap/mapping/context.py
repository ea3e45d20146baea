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
"""MappingContext: a key/value bag threaded through a whole mapping call tree.

A context is created by the caller and shared, never copied, by every nested
mapping call that receives it. ``MappingContext.EMPTY`` is the read-only
instance used when no context is supplied.

Contexts carry no locking. Mutating one instance from several threads at
once is the caller's responsibility.
"""

from __future__ import annotations

from typing import Any, ClassVar, TypeVar

from flymap.kernel.exceptions import ReadOnlyContextException

V = TypeVar("V")


class MappingContext:
    """Mutable string-keyed bag of values plus a read-only flag.

    Usage::

        context = MappingContext()
        context.set("reservation:partner:date-format", "%Y/%m/%d")
        found, fmt = context.try_get("reservation:partner:date-format", str)
    """

    EMPTY: ClassVar[MappingContext]

    __slots__ = ("_items", "_read_only")

    def __init__(self, items: dict[str, Any] | None = None, *, read_only: bool = False) -> None:
        self._items: dict[str, Any] = dict(items) if items else {}
        self._read_only = read_only

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    def set(self, key: str, value: Any) -> MappingContext:
        """Store *value* under *key*.

        Raises:
            ReadOnlyContextException: On the shared :attr:`EMPTY` context.
        """
        _check_key(key)
        if self._read_only:
            raise ReadOnlyContextException(key)
        self._items[key] = value
        return self

    def try_get(self, key: str, expected_type: type[V] | tuple[type, ...] = object) -> tuple[bool, V | None]:
        """Return ``(True, value)`` when *key* holds an instance of *expected_type*.

        A missing key, a stored ``None``, or a value of another type yields
        ``(False, None)``.
        """
        _check_key(key)
        if key in self._items:
            stored = self._items[key]
            if stored is not None and isinstance(stored, expected_type):
                return True, stored
        return False, None

    def get(self, key: str, default: Any = None, expected_type: type | tuple[type, ...] = object) -> Any:
        found, value = self.try_get(key, expected_type)
        return value if found else default

    def snapshot(self) -> dict[str, Any]:
        """Return an independent copy of the current entries."""
        return dict(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        flag = ", read_only=True" if self._read_only else ""
        return f"MappingContext({self._items!r}{flag})"


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Context keys must be str, got {type(key).__name__}")


MappingContext.EMPTY = MappingContext(read_only=True)
