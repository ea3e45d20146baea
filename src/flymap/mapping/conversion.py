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
"""Scalar value conversion for the auto-mapping engine.

Each converter is one explicit attempt that returns a :class:`Converted`
option, or ``None`` when it does not apply or the value cannot be
converted. Nothing here raises.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from numbers import Number
from typing import Any
from uuid import UUID

from flymap.mapping.typeinfo import is_class


@dataclass(frozen=True, slots=True)
class Converted:
    """A successfully produced value; ``value`` itself may be ``None``."""

    value: Any


_TRUE_TEXT = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_TEXT = frozenset({"false", "0", "no", "n", "off"})

_CONVERSION_ERRORS = (ValueError, TypeError, ArithmeticError)


def _to_str(value: Any, target: type) -> Any:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _to_bool(value: Any, target: type) -> Any:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    if isinstance(value, Number):
        return value != 0
    raise TypeError(type(value).__name__)


def _to_int(value: Any, target: type) -> Any:
    if isinstance(value, (float, Decimal)):
        return target(round(value))
    if isinstance(value, (int, str)):
        return target(value.strip() if isinstance(value, str) else value)
    raise TypeError(type(value).__name__)


def _to_float(value: Any, target: type) -> Any:
    if isinstance(value, (Number, str)) and not isinstance(value, complex):
        return target(value)
    raise TypeError(type(value).__name__)


def _to_decimal(value: Any, target: type) -> Any:
    if isinstance(value, float):
        return target(str(value))
    if isinstance(value, bool):
        return target(int(value))
    if isinstance(value, (int, Decimal)):
        return target(value)
    if isinstance(value, str):
        return target(value.strip())
    raise TypeError(type(value).__name__)


def _to_complex(value: Any, target: type) -> Any:
    if isinstance(value, (Number, str)):
        return target(value)
    raise TypeError(type(value).__name__)


def _to_enum(value: Any, target: type[Enum]) -> Any:
    if isinstance(value, Enum):
        value = value.value
    try:
        return target(value)
    except ValueError:
        if not isinstance(value, str):
            raise
    wanted = value.strip().lower()
    for member in target:
        if member.name.lower() == wanted:
            return member
    raise ValueError(f"{value!r} is not a valid {target.__name__}")


def _to_uuid(value: Any, target: type) -> Any:
    if isinstance(value, str):
        return target(value.strip())
    if isinstance(value, bytes) and len(value) == 16:
        return target(bytes=value)
    if isinstance(value, int):
        return target(int=value)
    raise TypeError(type(value).__name__)


def _to_datetime(value: Any, target: type) -> Any:
    if isinstance(value, str):
        return target.fromisoformat(value.strip())
    if isinstance(value, date):
        return target.combine(value, time())
    raise TypeError(type(value).__name__)


def _to_date(value: Any, target: type) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return target.fromisoformat(value.strip())
    raise TypeError(type(value).__name__)


def _to_time(value: Any, target: type) -> Any:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, str):
        return target.fromisoformat(value.strip())
    raise TypeError(type(value).__name__)


def _to_timedelta(value: Any, target: type) -> Any:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return target(seconds=float(value))
    raise TypeError(type(value).__name__)


def _to_bytes(value: Any, target: type) -> Any:
    if isinstance(value, str):
        return target(value, "utf-8")
    if isinstance(value, (bytearray, memoryview)):
        return target(value)
    raise TypeError(type(value).__name__)


# Order matters: bool before int, datetime before date.
_CONVERTERS: tuple[tuple[type, Callable[[Any, Any], Any]], ...] = (
    (Enum, _to_enum),
    (str, _to_str),
    (bool, _to_bool),
    (int, _to_int),
    (float, _to_float),
    (Decimal, _to_decimal),
    (complex, _to_complex),
    (UUID, _to_uuid),
    (datetime, _to_datetime),
    (date, _to_date),
    (time, _to_time),
    (timedelta, _to_timedelta),
    (bytes, _to_bytes),
)


def convert(value: Any, target: Any) -> Converted | None:
    """Convert *value* to the class *target*, or return ``None``."""
    if value is None or not is_class(target):
        return None
    for kind, converter in _CONVERTERS:
        if issubclass(target, kind):
            try:
                return Converted(converter(value, target))
            except _CONVERSION_ERRORS:
                return None
    return None
