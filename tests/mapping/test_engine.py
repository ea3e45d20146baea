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
"""Tests for the structural auto-mapping engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

import pytest
from pydantic import BaseModel

from flymap.kernel.exceptions import MappingConstructionException
from flymap.mapping.context import MappingContext
from flymap.mapping.engine import auto_map, resolve_source_name
from flymap.mapping.registry import DynamicMapper
from tests.mapping.deferred_models import PartnerShipment, Shipment
from tests.mapping.models import Address, Customer, PartnerAddress, PartnerCustomer

# ---------------------------------------------------------------------------
# Test types
# ---------------------------------------------------------------------------


class Tier(Enum):
    BRONZE = "bronze"
    GOLD = "gold"


@dataclass
class Account:
    Number: str = ""
    balance: str = "0"
    opened: str = ""
    tier: str = ""
    active: str = ""
    ratio: str = ""


@dataclass
class AccountView:
    number: str = ""
    balance: Decimal = Decimal("0")
    opened: date | None = None
    tier: Tier | None = None
    active: bool = False
    ratio: int = -1


@dataclass
class Counter:
    count: int | None = None
    total: int = 7
    label: str | None = "unset"


@dataclass
class RequiresArgs:
    value: str


class PlainTarget:
    title: str
    pages: int

    def __init__(self) -> None:
        self.title = ""
        self.pages = 0


class PlainSource:
    def __init__(self, title: str, pages: str) -> None:
        self.title = title
        self.pages = pages


class PropertyTarget:
    def __init__(self) -> None:
        self._code = ""

    @property
    def code(self) -> str:
        return self._code

    @code.setter
    def code(self, value: str) -> None:
        self._code = value.upper()


class Book(BaseModel):
    title: str = ""
    pages: int = 0
    isbn: str | None = None


@dataclass
class Shelf:
    books: list[Book] = field(default_factory=list)


def _map(source, target_type, mapper=None, **kwargs):
    return auto_map(source, target_type, MappingContext.EMPTY, mapper or DynamicMapper(), **kwargs)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_none_source_yields_none(self) -> None:
        assert _map(None, AccountView) is None

    def test_target_without_default_constructor_raises(self) -> None:
        with pytest.raises(MappingConstructionException, match="RequiresArgs"):
            _map(Account(), RequiresArgs)


class TestNameResolution:
    def test_names_match_case_insensitively(self) -> None:
        view = _map(Account(Number="A-1"), AccountView)

        assert view.number == "A-1"

    def test_rename_lookup_falls_back_to_identity(self) -> None:
        assert resolve_source_name("city_name", {"city": "CITY_NAME"}) == "city"
        assert resolve_source_name("zip", {"city": "city_name"}) == "zip"
        assert resolve_source_name("zip", None) == "zip"

    def test_incomplete_rename_map_still_matches_same_names(self) -> None:
        view = _map(Account(Number="A-2", balance="10"), AccountView, rename_map={"Number": "number"})

        assert view.balance == Decimal("10")

    def test_plain_class_with_instance_attributes(self) -> None:
        target = _map(PlainSource("Dune", "412"), PlainTarget)

        assert target.title == "Dune"
        assert target.pages == 412

    def test_attributes_set_in_init_are_writable(self) -> None:
        class Person:
            def __init__(self) -> None:
                self.name = "Ann"
                self.age = 41

        class PersonRecord:
            def __init__(self) -> None:
                self.name = ""
                self.age = 0
                self._internal = "kept"

        record = _map(Person(), PersonRecord)

        assert record.name == "Ann"
        assert record.age == 41
        assert record._internal == "kept"

    def test_property_setter_is_writable(self) -> None:
        @dataclass
        class Source:
            code: str = "abc"

        target = _map(Source(), PropertyTarget)

        assert target.code == "ABC"


class TestAssignmentPipeline:
    def test_scalar_conversions(self) -> None:
        account = Account(balance="12.50", opened="2024-02-29", tier="GOLD", active="yes", ratio="3")

        view = _map(account, AccountView)

        assert view.balance == Decimal("12.50")
        assert view.opened == date(2024, 2, 29)
        assert view.tier is Tier.GOLD
        assert view.active is True
        assert view.ratio == 3

    def test_failed_conversion_leaves_default(self) -> None:
        view = _map(Account(balance="lots", opened="someday", ratio="many"), AccountView)

        assert view.balance == Decimal("0")
        assert view.opened is None
        assert view.ratio == -1

    def test_none_assigned_only_to_optional_members(self) -> None:
        counter = _map(Counter(count=None, total=None, label=None), Counter)  # type: ignore[arg-type]

        assert counter.count is None
        assert counter.total == 7
        assert counter.label is None

    def test_pydantic_models_as_source_and_target(self) -> None:
        mapper = DynamicMapper()
        mapper.register_mapping(Book, Book, lambda b: b.auto_map(include_reverse=False))

        shelf = _map(Shelf(books=[Book(title="Emma", pages=474)]), Shelf, mapper)
        copy = mapper.map(Book(title="Ulysses", pages=730, isbn="978-0"), Book)

        assert shelf.books == [Book(title="Emma", pages=474)]
        assert copy == Book(title="Ulysses", pages=730, isbn="978-0")


class TestMemberOverrides:
    def test_resolver_wins_over_name_matching(self) -> None:
        mapper = DynamicMapper()
        mapper.register_mapping(
            Customer,
            PartnerCustomer,
            lambda b: b.auto_map({"name": "full_name"})
            .for_member("full_name", lambda m: m.map_from(lambda c: f"{c.name} (ID: {c.customer_id})"))
            .for_member("id", lambda m: m.map_from(lambda c: c.customer_id.hex)),
        )
        customer = Customer(customer_id=uuid.UUID("12345678-1234-1234-1234-123456789012"), name="Alice Johnson")

        partner = mapper.map(customer, PartnerCustomer)

        assert partner is not None
        assert partner.full_name == "Alice Johnson (ID: 12345678-1234-1234-1234-123456789012)"
        assert partner.id == "12345678123412341234123456789012"

    def test_ignored_members_keep_defaults(self) -> None:
        @dataclass
        class Source:
            name: str = "Bob"
            labels: list[str] = field(default_factory=lambda: ["x"])

        mapper = DynamicMapper()
        mapper.register_mapping(
            Source,
            PartnerCustomer,
            lambda b: b.auto_map({"name": "full_name"}).for_member("labels", lambda m: m.ignore()),
        )

        partner = mapper.map(Source(), PartnerCustomer)

        assert partner is not None
        assert partner.full_name == "Bob"
        assert partner.labels == []

    def test_failing_resolver_only_loses_its_member(self) -> None:
        mapper = DynamicMapper()
        mapper.register_mapping(
            Customer,
            PartnerCustomer,
            lambda b: b.auto_map({"name": "full_name"}).for_member("id", lambda m: m.map_from(lambda c: 1 / 0)),
        )

        partner = mapper.map(Customer(name="Eve"), PartnerCustomer)

        assert partner is not None
        assert partner.full_name == "Eve"
        assert partner.id is None

    def test_overrides_do_not_apply_to_generated_reverse(self) -> None:
        mapper = DynamicMapper()
        mapper.register_mapping(
            Account,
            AccountView,
            lambda b: b.auto_map().for_member("number", lambda m: m.map_from(lambda a: "override")),
        )

        account = mapper.map(AccountView(number="N-9"), Account)

        assert account is not None
        assert account.Number == "N-9"


class TestDeferredAnnotations:
    def test_unresolvable_annotation_only_affects_its_member(self) -> None:
        mapper = DynamicMapper()
        mapper.register_mapping(
            Address, PartnerAddress, lambda b: b.auto_map({"street": "street_address"}, include_reverse=False)
        )

        shipment = _map(Shipment(address=Address(street="1 Main St"), weight=12), PartnerShipment, mapper)

        assert isinstance(shipment.address, PartnerAddress)
        assert shipment.address.street_address == "1 Main St"
        assert shipment.weight == "12"

    def test_unresolvable_member_accepts_raw_value(self) -> None:
        shipment = _map(Shipment(declared_value="19.99"), PartnerShipment)

        assert shipment.declared_value == "19.99"


class TestNestedMappingReturningNone:
    @dataclass
    class Holder:
        address: Address | None = None

    @dataclass
    class PartnerHolder:
        address: PartnerAddress | None = field(default_factory=PartnerAddress)

    @dataclass
    class StrictPartnerHolder:
        address: PartnerAddress = field(default_factory=lambda: PartnerAddress(city_name="default"))

    @staticmethod
    def _mapper() -> DynamicMapper:
        mapper = DynamicMapper()
        mapper.register_mapping(Address, PartnerAddress, lambda b: b.map_forward(lambda src: None))
        return mapper

    def test_none_result_is_assigned_to_optional_member(self) -> None:
        holder = _map(self.Holder(address=Address(city="Oslo")), self.PartnerHolder, self._mapper())

        assert holder.address is None

    def test_none_result_keeps_default_of_required_member(self) -> None:
        holder = _map(self.Holder(address=Address(city="Oslo")), self.StrictPartnerHolder, self._mapper())

        assert holder.address == PartnerAddress(city_name="default")
