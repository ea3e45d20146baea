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
"""Unified exception hierarchy for flymap.

All library exceptions inherit from FlyMapException, so callers can catch
one base type or target a specific failure.

Categories:
- MappingException: failures while performing a ``map`` call
- ConfigurationException: builder misuse detected at configuration time
- ReadOnlyContextException: writes against the shared frozen context
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyMapException(Exception):
    """Base exception for all flymap errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "MAPPING_NOT_REGISTERED").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


def _pair_context(source_type: type, target_type: type) -> dict:
    return {"source_type": source_type.__name__, "target_type": target_type.__name__}


# =============================================================================
# Mapping Exceptions
# =============================================================================


class MappingException(FlyMapException):
    """Failures raised while performing a mapping call."""


class MappingNotRegisteredException(MappingException):
    """No definition is registered for the requested type pair."""

    def __init__(self, source_type: type, target_type: type) -> None:
        super().__init__(
            f"No mapping registered for {source_type.__name__} -> {target_type.__name__}.",
            code="MAPPING_NOT_REGISTERED",
            context=_pair_context(source_type, target_type),
        )
        self.source_type = source_type
        self.target_type = target_type


class MappingConstructionException(MappingException):
    """The target type cannot be instantiated without arguments."""

    def __init__(self, target_type: type, source_type: type | None = None) -> None:
        message = f"Type {target_type.__name__} must provide a parameterless constructor for auto-mapping"
        if source_type is not None:
            message += f" ({source_type.__name__} -> {target_type.__name__})"
        context = {"target_type": target_type.__name__}
        if source_type is not None:
            context["source_type"] = source_type.__name__
        super().__init__(message + ".", code="MAPPING_CONSTRUCTION", context=context)
        self.target_type = target_type


class ReverseMappingNotConfiguredException(MappingException):
    """A reverse definition was requested but no reverse function exists."""

    def __init__(self, source_type: type, target_type: type) -> None:
        super().__init__(
            f"Reverse mapping not configured for {source_type.__name__} -> {target_type.__name__}.",
            code="REVERSE_NOT_CONFIGURED",
            context=_pair_context(source_type, target_type),
        )


class MappingDepthExceededException(MappingException):
    """Nested mapping went deeper than the configured ``max_depth``."""

    def __init__(self, source_type: type, target_type: type, max_depth: int) -> None:
        context = _pair_context(source_type, target_type)
        context["max_depth"] = max_depth
        super().__init__(
            f"Mapping depth {max_depth} exceeded while mapping {source_type.__name__} -> {target_type.__name__}.",
            code="MAPPING_DEPTH_EXCEEDED",
            context=context,
        )


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(FlyMapException):
    """Misconfiguration detected before any mapping runs."""


class InvalidMappingConfigurationException(ConfigurationException):
    """Builder misuse: no forward strategy, or an unknown member reference."""

    def __init__(self, message: str, source_type: type | None = None, target_type: type | None = None) -> None:
        context = {}
        if source_type is not None and target_type is not None:
            context = _pair_context(source_type, target_type)
        super().__init__(message, code="INVALID_MAPPING_CONFIGURATION", context=context)


# =============================================================================
# Context Exceptions
# =============================================================================


class ReadOnlyContextException(FlyMapException):
    """Attempted to write into the shared read-only mapping context."""

    def __init__(self, key: str) -> None:
        super().__init__(
            "MappingContext.EMPTY is read-only. Create a new instance to store items.",
            code="CONTEXT_READ_ONLY",
            context={"key": key},
        )
