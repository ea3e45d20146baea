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
"""flymap Mapping: runtime mapping between independently evolving model shapes."""

from flymap.mapping.builder import MappingBuilder
from flymap.mapping.context import MappingContext
from flymap.mapping.definition import MappingDefinition, TypePair
from flymap.mapping.member import MemberConfiguration
from flymap.mapping.profile import MapperConfiguration, MappingProfile, Profile
from flymap.mapping.properties import MapperProperties
from flymap.mapping.registry import DynamicMapper

__all__ = [
    "DynamicMapper",
    "MapperConfiguration",
    "MapperProperties",
    "MappingBuilder",
    "MappingContext",
    "MappingDefinition",
    "MappingProfile",
    "MemberConfiguration",
    "Profile",
    "TypePair",
]
