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
"""Annotation analysis used by the auto-mapping engine.

Answers three questions about a member's declared type: is it optional,
is it primitive-like, and is it a collection (and of what).
"""

from __future__ import annotations

import collections.abc
import types
import typing
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Union, get_args, get_origin
from uuid import UUID

NoneType = type(None)

PRIMITIVE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    datetime,
    date,
    time,
    timedelta,
    UUID,
    Enum,
)

_TEXT_TYPES = (str, bytes, bytearray)


def is_union(annotation: Any) -> bool:
    origin = get_origin(annotation)
    return origin is Union or origin is types.UnionType


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return ``(underlying, nullable)`` for a member annotation.

    ``X | None`` unwraps to ``X``. ``Any``, ``object`` and a missing
    annotation accept ``None``; every other annotation does not.
    """
    if annotation is None or annotation is NoneType:
        return Any, True
    if is_union(annotation):
        args = get_args(annotation)
        remaining = tuple(arg for arg in args if arg is not NoneType)
        nullable = len(remaining) != len(args)
        if len(remaining) == 1:
            return remaining[0], nullable
        return Union[remaining], nullable  # noqa: UP007
    return annotation, accepts_anything(annotation)


def accepts_anything(annotation: Any) -> bool:
    return annotation is Any or annotation is object or isinstance(annotation, typing.TypeVar)


def is_class(tp: Any) -> bool:
    """A plain class, not a parametrized alias such as ``list[int]``."""
    return isinstance(tp, type) and get_origin(tp) is None


def is_primitive(tp: Any) -> bool:
    """Numbers, text, booleans, enums, temporal values, decimals and UUIDs."""
    return is_class(tp) and issubclass(tp, PRIMITIVE_TYPES)


def is_instance(value: Any, annotation: Any) -> bool:
    """``isinstance`` that understands unions and parametrized generics.

    A parametrized collection (``list[X]``) never matches, so its elements
    always go through collection mapping. ``bool`` is not an ``int`` here.
    """
    if accepts_anything(annotation):
        return True
    if is_union(annotation):
        return any(is_instance(value, arg) for arg in get_args(annotation))
    if is_collection_type(annotation) and get_args(annotation):
        return False
    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return False
    if isinstance(value, bool) and origin is not bool and issubclass(origin, (int, float, Decimal)):
        return False
    return isinstance(value, origin)


def is_collection_type(annotation: Any) -> bool:
    """Iterable types other than text and mappings."""
    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return False
    if issubclass(origin, _TEXT_TYPES) or issubclass(origin, collections.abc.Mapping):
        return False
    return issubclass(origin, collections.abc.Iterable)


def is_iterable_value(value: Any) -> bool:
    if isinstance(value, _TEXT_TYPES) or isinstance(value, collections.abc.Mapping):
        return False
    return isinstance(value, collections.abc.Iterable)


def element_type(annotation: Any) -> Any | None:
    """Element type of a collection annotation, or ``None`` when unknown.

    ``list[X]``, ``set[X]``, ``Sequence[X]`` and ``tuple[X, ...]`` yield
    ``X``. A class deriving from a parametrized collection (``class
    Tags(list[str])``) yields the base's parameter. Bare ``list`` yields
    ``None``.
    """
    args = get_args(annotation)
    if args:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return args[0] if len(args) == 1 else None

    if isinstance(annotation, type):
        for klass in annotation.__mro__:
            for base in getattr(klass, "__orig_bases__", ()):
                base_args = get_args(base)
                if is_collection_type(base) and len(base_args) == 1:
                    return base_args[0]
    return None


def build_collection(annotation: Any, items: list[Any]) -> Any:
    """Materialize *items* in the container shape *annotation* declares.

    ``tuple`` is the fixed-size form; sets keep their set type; concrete
    list subclasses are rebuilt from the items; everything else gets the
    list itself.
    """
    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return items
    if issubclass(origin, tuple):
        return tuple(items)
    if issubclass(origin, frozenset):
        return frozenset(items)
    if issubclass(origin, collections.abc.Set):
        return set(items)
    if issubclass(origin, list) and origin is not list:
        return origin(items)
    return items
