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
"""Structural auto-mapping engine.

Given a source instance and a target type, the engine builds the target
with its no-argument constructor and fills each writable member:

1. A member override wins: ignored members keep their default, resolvers
   supply the raw value.
2. Otherwise the source member is found through the rename map
   (``{source_name: target_name}``), falling back to the target member's
   own name, matched case-insensitively.
3. The raw value goes through the assignment pipeline: ``None`` handling,
   direct assignment, collection mapping, nested mapping through the
   registry, then scalar conversion.

Only construction failures, depth-guard failures and stack exhaustion
escape. Any other failure leaves that member (or collection element)
unset.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog

from flymap.kernel.exceptions import MappingConstructionException, MappingDepthExceededException
from flymap.mapping import typeinfo
from flymap.mapping.conversion import Converted, convert
from flymap.mapping.members import MemberInfo, instance_members, read_member

if TYPE_CHECKING:
    from flymap.mapping.context import MappingContext
    from flymap.mapping.member import MemberConfiguration
    from flymap.mapping.registry import DynamicMapper

logger = structlog.get_logger("flymap.mapping.engine")

# Failures that abort the whole mapping call instead of one member.
FATAL_ERRORS: tuple[type[BaseException], ...] = (
    MappingConstructionException,
    MappingDepthExceededException,
    RecursionError,
)


def auto_map(
    source: Any,
    target_type: type,
    context: MappingContext,
    mapper: DynamicMapper,
    rename_map: Mapping[str, str] | None = None,
    overrides: Mapping[str, MemberConfiguration] | None = None,
) -> Any:
    """Map *source* onto a new *target_type* instance.

    Args:
        source: Instance to read from; ``None`` yields ``None``.
        target_type: Class to construct and populate.
        context: Context handed to nested mapping calls.
        mapper: Registry used for nested objects and collection elements.
        rename_map: ``{source_name: target_name}``; incomplete maps fall
            back to same-name matching.
        overrides: Member overrides keyed by lower-cased target name.
    """
    if source is None:
        return None

    target = create_instance(target_type, type(source))

    for member in instance_members(target):
        override = overrides.get(member.name.lower()) if overrides else None
        if override is not None:
            if override.is_ignored:
                continue
            raw = _resolve_override(override, source, target_type, member)
        else:
            raw = read_member(source, resolve_source_name(member.name, rename_map))
        if raw is None:
            continue

        if not assign(target, member, raw.value, mapper, context):
            logger.debug(
                "member_skipped",
                source_type=type(source).__name__,
                target_type=target_type.__name__,
                member=member.name,
                value_type=type(raw.value).__name__,
            )

    return target


def create_instance(target_type: type, source_type: type | None = None) -> Any:
    try:
        return target_type()
    except (TypeError, ValueError) as exc:
        raise MappingConstructionException(target_type, source_type) from exc


def resolve_source_name(target_name: str, rename_map: Mapping[str, str] | None) -> str:
    """Source member name feeding *target_name*; same name when unmapped."""
    if rename_map:
        wanted = target_name.lower()
        for source_name, mapped_name in rename_map.items():
            if mapped_name.lower() == wanted:
                return source_name
    return target_name


def _resolve_override(
    override: MemberConfiguration, source: Any, target_type: type, member: MemberInfo
) -> Converted | None:
    try:
        return Converted(override.resolve(source))
    except FATAL_ERRORS:
        raise
    except Exception:  # noqa: BLE001 - a failing resolver only loses its member
        logger.warning(
            "member_resolver_failed",
            target_type=target_type.__name__,
            member=member.name,
            exc_info=True,
        )
        return None


# ---------------------------------------------------------------------------
# Assignment pipeline
# ---------------------------------------------------------------------------


def assign(target: Any, member: MemberInfo, raw: Any, mapper: DynamicMapper, context: MappingContext) -> bool:
    """Coerce *raw* to the member's type and set it; ``False`` when skipped."""
    underlying, nullable = typeinfo.unwrap_optional(member.annotation)
    result = coerce(raw, underlying, nullable, mapper, context)
    if result is None:
        return False
    try:
        setattr(target, member.name, result.value)
    except (AttributeError, TypeError, ValueError):
        return False
    return True


def coerce(
    raw: Any, underlying: Any, nullable: bool, mapper: DynamicMapper, context: MappingContext
) -> Converted | None:
    """Run the conversion attempts in order; the first success wins."""
    if raw is None:
        return Converted(None) if nullable else None

    for attempt in (_as_is, _as_collection, _as_nested, _as_converted):
        result = attempt(raw, underlying, mapper, context)
        if result is not None:
            # A nested mapping that produced None still ends the pipeline.
            return result if result.value is not None or nullable else None
    return None


def _as_is(raw: Any, underlying: Any, mapper: DynamicMapper, context: MappingContext) -> Converted | None:
    return Converted(raw) if typeinfo.is_instance(raw, underlying) else None


def _as_collection(raw: Any, underlying: Any, mapper: DynamicMapper, context: MappingContext) -> Converted | None:
    if not typeinfo.is_collection_type(underlying) or not typeinfo.is_iterable_value(raw):
        return None
    return map_collection(raw, underlying, mapper, context)


def _as_nested(raw: Any, underlying: Any, mapper: DynamicMapper, context: MappingContext) -> Converted | None:
    if not typeinfo.is_class(underlying):
        return None
    if typeinfo.is_primitive(type(raw)) or typeinfo.is_primitive(underlying):
        return None
    try:
        mapped = mapper.map(raw, underlying, context)
    except FATAL_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001 - fall through to scalar conversion
        logger.debug(
            "nested_mapping_failed",
            source_type=type(raw).__name__,
            target_type=underlying.__name__,
            error=str(exc),
        )
        return None
    return Converted(mapped)


def _as_converted(raw: Any, underlying: Any, mapper: DynamicMapper, context: MappingContext) -> Converted | None:
    return convert(raw, underlying)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def map_collection(raw: Any, collection_type: Any, mapper: DynamicMapper, context: MappingContext) -> Converted | None:
    """Map every element of *raw* into *collection_type*'s element type.

    Elements that are ``None``, or that fail to map, are dropped. Returns
    ``None`` when the element type cannot be determined.
    """
    element_type = typeinfo.element_type(collection_type)
    if element_type is None:
        return None

    items: list[Any] = []
    for index, element in enumerate(raw):
        if element is None:
            continue
        if typeinfo.is_instance(element, element_type):
            items.append(element)
            continue
        mapped = _map_element(element, element_type, mapper, context)
        if mapped is None:
            logger.debug(
                "collection_element_dropped",
                element_type=getattr(element_type, "__name__", repr(element_type)),
                source_type=type(element).__name__,
                index=index,
            )
            continue
        items.append(mapped)

    return Converted(typeinfo.build_collection(collection_type, items))


def _map_element(element: Any, element_type: Any, mapper: DynamicMapper, context: MappingContext) -> Any:
    if not typeinfo.is_class(element_type):
        return None
    try:
        return mapper.map(element, element_type, context)
    except FATAL_ERRORS:
        raise
    except Exception:  # noqa: BLE001 - unmappable elements are dropped
        return None
