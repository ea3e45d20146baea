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
"""Tests for MappingBuilder and MemberConfiguration."""

from __future__ import annotations

import pytest

from flymap.kernel.exceptions import InvalidMappingConfigurationException
from flymap.mapping.builder import MappingBuilder
from flymap.mapping.context import MappingContext
from flymap.mapping.member import MemberConfiguration
from flymap.mapping.registry import DynamicMapper
from tests.mapping.models import Address, ContactInfo, Customer, PartnerAddress, PartnerCustomer


class TestBuild:
    def test_build_without_forward_strategy_raises(self) -> None:
        builder = MappingBuilder(Address, PartnerAddress)

        with pytest.raises(InvalidMappingConfigurationException, match="Address -> PartnerAddress"):
            builder.build()

    def test_explicit_forward_only(self) -> None:
        definition = MappingBuilder(Address, PartnerAddress).map_forward(lambda a: PartnerAddress(zip="x")).build()

        assert definition.reverse is None
        assert definition.invoke(Address(), MappingContext.EMPTY, DynamicMapper()) == PartnerAddress(zip="x")

    def test_forward_receives_context_and_mapper_by_arity(self) -> None:
        seen: list[object] = []

        def forward(source, context, mapper):
            seen.extend([context, mapper])
            return PartnerAddress()

        mapper = DynamicMapper()
        context = MappingContext()
        MappingBuilder(Address, PartnerAddress).map_forward(forward).build().invoke(Address(), context, mapper)

        assert seen == [context, mapper]

    def test_auto_map_wins_over_explicit_forward(self) -> None:
        definition = (
            MappingBuilder(Address, PartnerAddress)
            .map_forward(lambda a: PartnerAddress(zip="explicit"))
            .auto_map({"postal_code": "zip"})
            .build()
        )

        result = definition.invoke(Address(postal_code="10001"), MappingContext.EMPTY, DynamicMapper())

        assert result.zip == "10001"

    def test_auto_map_generates_reverse_by_default(self) -> None:
        definition = MappingBuilder(Address, PartnerAddress).auto_map({"city": "city_name"}).build()

        assert definition.reverse is not None
        reverse = definition.create_reverse()
        assert reverse.invoke(PartnerAddress(city_name="Oslo"), MappingContext.EMPTY, DynamicMapper()) == Address(
            city="Oslo"
        )

    def test_auto_map_without_reverse(self) -> None:
        definition = MappingBuilder(Address, PartnerAddress).auto_map(include_reverse=False).build()

        assert definition.reverse is None

    def test_explicit_reverse_is_kept(self) -> None:
        definition = (
            MappingBuilder(Address, PartnerAddress)
            .map_forward(lambda a: PartnerAddress())
            .map_reverse(lambda p, ctx: Address(city=ctx.get("city")))
            .build()
        )

        reverse = definition.create_reverse()

        assert reverse.invoke(PartnerAddress(), MappingContext({"city": "Rome"}), DynamicMapper()) == Address(
            city="Rome"
        )


class TestForMember:
    def test_unknown_target_member_raises(self) -> None:
        builder = MappingBuilder(Customer, PartnerCustomer).auto_map()

        with pytest.raises(InvalidMappingConfigurationException, match="nickname"):
            builder.for_member("nickname", lambda m: m.ignore())

    def test_member_names_are_case_insensitive(self) -> None:
        definition = (
            MappingBuilder(Customer, PartnerCustomer)
            .auto_map()
            .for_member("FULL_NAME", lambda m: m.map_from(lambda c: "constant"))
            .build()
        )

        result = definition.invoke(Customer(name="x"), MappingContext.EMPTY, DynamicMapper())

        assert result.full_name == "constant"


class TestMemberConfiguration:
    def test_map_from_member_reference(self) -> None:
        member = MemberConfiguration(Customer, "full_name").map_from("name")

        assert member.resolve(Customer(name="Ada")) == "Ada"

    def test_map_from_dotted_member_reference(self) -> None:
        member = MemberConfiguration(Customer, "contact_details").map_from("contact.email")

        assert member.resolve(Customer(contact=ContactInfo(email="a@b.c"))) == "a@b.c"
        assert member.resolve(Customer(contact=None)) is None

    def test_map_from_unknown_member_reference_raises(self) -> None:
        with pytest.raises(InvalidMappingConfigurationException, match="nickname"):
            MemberConfiguration(Customer, "full_name").map_from("nickname")

    def test_map_from_unknown_nested_member_raises(self) -> None:
        with pytest.raises(InvalidMappingConfigurationException, match="fax"):
            MemberConfiguration(Customer, "full_name").map_from("contact.fax")

    def test_map_from_rejects_non_callables(self) -> None:
        with pytest.raises(InvalidMappingConfigurationException):
            MemberConfiguration(Customer, "full_name").map_from(42)  # type: ignore[arg-type]

    def test_last_configuration_wins(self) -> None:
        ignored_last = MemberConfiguration(Customer, "full_name").map_from("name").ignore()
        resolver_last = MemberConfiguration(Customer, "full_name").ignore().map_from("name")

        assert ignored_last.is_ignored
        assert not ignored_last.has_resolver
        assert not resolver_last.is_ignored
        assert resolver_last.resolve(Customer(name="Zed")) == "Zed"
