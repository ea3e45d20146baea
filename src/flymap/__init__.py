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
"""flymap: runtime structural mapping between model shapes.

Example::

    from flymap import MapperConfiguration

    mapper = (
        MapperConfiguration()
        .add_registration(lambda r: r.register_mapping(Order, PartnerOrder, lambda b: b.auto_map({"items": "lines"})))
        .build_mapper()
    )
    partner_order = mapper.map(order, PartnerOrder)
"""

from flymap.kernel.exceptions import (
    FlyMapException,
    InvalidMappingConfigurationException,
    MappingConstructionException,
    MappingDepthExceededException,
    MappingException,
    MappingNotRegisteredException,
    ReadOnlyContextException,
    ReverseMappingNotConfiguredException,
)
from flymap.mapping import (
    DynamicMapper,
    MapperConfiguration,
    MapperProperties,
    MappingBuilder,
    MappingContext,
    MappingDefinition,
    MappingProfile,
    MemberConfiguration,
    Profile,
    TypePair,
)

__version__ = "0.1.0"

__all__ = [
    "DynamicMapper",
    "FlyMapException",
    "InvalidMappingConfigurationException",
    "MapperConfiguration",
    "MapperProperties",
    "MappingBuilder",
    "MappingConstructionException",
    "MappingContext",
    "MappingDefinition",
    "MappingDepthExceededException",
    "MappingException",
    "MappingNotRegisteredException",
    "MappingProfile",
    "MemberConfiguration",
    "Profile",
    "ReadOnlyContextException",
    "ReverseMappingNotConfiguredException",
    "TypePair",
]
