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
"""Reflective member discovery for mappable model types.

Writable members of a class are its dataclass fields, its pydantic
``model_fields``, or its resolved class annotations (skipping ``ClassVar``
and ``_private`` names), plus every property with a setter. A constructed
instance also exposes the public attributes its ``__init__`` assigned. Readable
members add read-only properties and, per instance, public attributes in
``vars()``. Names match case-insensitively.

Frozen dataclasses have no writable members.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import sys
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin, get_type_hints

from flymap.mapping.conversion import Converted


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """A named member and its declared annotation (``Any`` when unknown)."""

    name: str
    annotation: Any = Any


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return get_type_hints(obj)
    except Exception:  # noqa: BLE001 - resolve what can be resolved, one annotation at a time
        pass
    hints: dict[str, Any] = {}
    for owner in reversed(getattr(obj, "__mro__", (obj,))):
        module = sys.modules.get(getattr(owner, "__module__", ""), None)
        globalns = vars(module) if module is not None else {}
        localns = dict(vars(owner)) if isinstance(owner, type) else None
        for name, hint in inspect.get_annotations(owner).items():
            hints[name] = _resolve_hint(hint, globalns, localns)
    return hints


def _resolve_hint(hint: Any, globalns: dict[str, Any], localns: dict[str, Any] | None) -> Any:
    if not isinstance(hint, str):
        return hint
    try:
        return eval(hint, globalns, localns)  # noqa: S307 - same evaluation get_type_hints performs
    except Exception:  # noqa: BLE001 - e.g. a name imported only under TYPE_CHECKING
        return ClassVar if hint.startswith(("ClassVar", "typing.ClassVar")) else Any


def _is_pydantic_model(cls: type) -> bool:
    return isinstance(getattr(cls, "model_fields", None), dict) and hasattr(cls, "model_construct")


def _properties(cls: type) -> dict[str, property]:
    found: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_"):
                found[name] = attr
    return found


def _property_type(prop: property) -> Any:
    if prop.fget is None:
        return Any
    return _type_hints(prop.fget).get("return", Any)


def _field_members(cls: type, writable: bool) -> dict[str, MemberInfo]:
    if dataclasses.is_dataclass(cls):
        if writable and cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
            return {}
        hints = _type_hints(cls)
        return {f.name: MemberInfo(f.name, hints.get(f.name, Any)) for f in dataclasses.fields(cls)}

    if _is_pydantic_model(cls):
        return {
            name: MemberInfo(name, info.annotation if info.annotation is not None else Any)
            for name, info in cls.model_fields.items()
        }

    members: dict[str, MemberInfo] = {}
    for name, hint in _type_hints(cls).items():
        if name.startswith("_") or get_origin(hint) is ClassVar or hint is ClassVar:
            continue
        members[name] = MemberInfo(name, hint)
    return members


@functools.cache
def writable_members(cls: type) -> tuple[MemberInfo, ...]:
    """Members a mapping may assign on instances of *cls*, in declaration order."""
    members = _field_members(cls, writable=True)
    for name, prop in _properties(cls).items():
        if name in members:
            continue
        if prop.fset is not None:
            members[name] = MemberInfo(name, _property_type(prop))
    return tuple(members.values())


@functools.cache
def readable_members(cls: type) -> dict[str, MemberInfo]:
    """Class-level readable members keyed by lower-cased name."""
    members = {info.name: info for info in _field_members(cls, writable=False).values()}
    for name, prop in _properties(cls).items():
        members.setdefault(name, MemberInfo(name, _property_type(prop)))
    lookup: dict[str, MemberInfo] = {}
    for info in members.values():
        lookup.setdefault(info.name.lower(), info)
    return lookup


def instance_members(target: Any) -> tuple[MemberInfo, ...]:
    """Writable members of a constructed *target*.

    Adds the public attributes its constructor set (``self.name = ""``) to
    the class-level members, typed ``Any``.
    """
    members = writable_members(type(target))
    if dataclasses.is_dataclass(target) and type(target).__dataclass_params__.frozen:  # type: ignore[attr-defined]
        return members
    try:
        attributes = vars(target)
    except TypeError:
        return members
    known = {info.name.lower() for info in members}
    extra = tuple(MemberInfo(name) for name in attributes if not name.startswith("_") and name.lower() not in known)
    return members + extra if extra else members


def find_writable(cls: type, name: str) -> MemberInfo | None:
    wanted = name.lower()
    for info in writable_members(cls):
        if info.name.lower() == wanted:
            return info
    return None


def read_member(source: Any, name: str) -> Converted | None:
    """Read the member of *source* named *name* (case-insensitive).

    Returns ``None`` when *source* exposes no such readable member.
    """
    wanted = name.lower()
    info = readable_members(type(source)).get(wanted)
    if info is not None:
        attr_name = info.name
    else:
        attr_name = _instance_attribute(source, wanted)
        if attr_name is None:
            return None
    try:
        return Converted(getattr(source, attr_name))
    except AttributeError:
        return None


def _instance_attribute(source: Any, wanted: str) -> str | None:
    try:
        attributes = vars(source)
    except TypeError:
        return None
    for attr_name in attributes:
        if not attr_name.startswith("_") and attr_name.lower() == wanted:
            return attr_name
    return None
