"""Tests for search criteria and listing queries."""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from estate_market.exceptions import ValidationError
from estate_market.models import (
    ListingView,
    Property,
    PropertyType,
    SearchCriteria,
    display_available_properties,
    search_properties,
)


def listing(
    location: str,
    price: int,
    property_type: PropertyType = PropertyType.APARTMENT,
    published: bool = True,
) -> Property:
    prop = Property(
        title=f"{property_type.value} in {location}",
        owner_id="seller-001",
        location=location,
        price=price,
        size=80,
        property_type=property_type,
    )
    if published:
        prop.publish()
    return prop


class TestSearchCriteriaBuilder:
    """Tests for SearchCriteriaBuilder."""

    def test_empty_criteria(self) -> None:
        criteria = SearchCriteria.builder().build()

        assert criteria.locations == frozenset()
        assert criteria.min_price is None
        assert criteria.max_price is None
        assert criteria.property_types == frozenset()

    def test_accumulates(self) -> None:
        criteria = (
            SearchCriteria.builder()
            .add_location("Lausanne")
            .add_location(" Geneva ")
            .add_location("")
            .add_location(None)
            .min_price(100000)
            .max_price(900000)
            .add_property_type(PropertyType.HOUSE)
            .add_property_type("LOFT")
            .build()
        )

        assert criteria.locations == frozenset({"Lausanne", "Geneva"})
        assert criteria.min_price == Decimal("100000")
        assert criteria.max_price == Decimal("900000")
        assert criteria.property_types == frozenset({"HOUSE", "LOFT"})

    def test_min_above_max_fails(self) -> None:
        with pytest.raises(ValidationError, match="Min price cannot exceed max price"):
            SearchCriteria.builder().min_price(100).max_price(50).build()

    @pytest.mark.parametrize("bound", ["min_price", "max_price"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN")])
    def test_non_finite_bound_rejected(self, bound: str, value: object) -> None:
        builder = SearchCriteria.builder()

        with pytest.raises(ValidationError, match=f"{bound} must be a finite number"):
            getattr(builder, bound)(value)

    def test_equal_bounds_allowed(self) -> None:
        criteria = SearchCriteria.builder().min_price(100).max_price(100).build()

        assert criteria.matches(listing("Bern", 100))

    def test_criteria_is_immutable(self) -> None:
        criteria = SearchCriteria.builder().build()

        with pytest.raises(FrozenInstanceError):
            criteria.max_price = Decimal("1")  # type: ignore[misc]


class TestSearchCriteriaMatches:
    """Tests for the AND-combined predicate."""

    def test_empty_criteria_matches_everything(self) -> None:
        criteria = SearchCriteria.builder().build()

        assert criteria.matches(listing("Basel", 1))

    def test_location_is_exact_match(self) -> None:
        criteria = SearchCriteria.builder().add_location("Lausanne").build()

        assert criteria.matches(listing("Lausanne", 1))
        assert not criteria.matches(listing("Lausanne-Ouchy", 1))
        assert not criteria.matches(listing("lausanne", 1))

    def test_price_bounds_inclusive(self) -> None:
        criteria = SearchCriteria.builder().min_price(200).max_price(300).build()

        assert criteria.matches(listing("Bern", 200))
        assert criteria.matches(listing("Bern", 300))
        assert not criteria.matches(listing("Bern", 199))
        assert not criteria.matches(listing("Bern", 301))

    def test_property_type(self) -> None:
        criteria = SearchCriteria.builder().add_property_type("HOUSE").build()

        assert criteria.matches(listing("Bern", 1, PropertyType.HOUSE))
        assert not criteria.matches(listing("Bern", 1, PropertyType.STUDIO))

    def test_listing_without_type_fails_type_filter(self) -> None:
        criteria = SearchCriteria.builder().add_property_type("HOUSE").build()
        prop = Property(location="Bern", price=1)

        assert not criteria.matches(prop)

    def test_to_predicate(self) -> None:
        predicate = SearchCriteria.builder().max_price(10).build().to_predicate()

        assert predicate(listing("Bern", 5))
        assert not predicate(listing("Bern", 50))

    def test_matches_listing_view(self) -> None:
        view = ListingView(
            listing_id="ext-1",
            title="Imported",
            location="Zurich",
            property_type="OFFICE",
            price=Decimal("700000"),
            available=True,
        )
        criteria = (
            SearchCriteria.builder().add_location("Zurich").add_property_type("OFFICE").build()
        )

        assert criteria.matches(view)


class TestSearchProperties:
    """Tests for search_properties and display_available_properties."""

    def test_lausanne_under_600k(self) -> None:
        cheap = listing("Lausanne", 500000)
        mid = listing("Lausanne", 550000)
        geneva = listing("Geneva", 520000)
        expensive = listing("Lausanne", 650000)
        criteria = SearchCriteria.builder().add_location("Lausanne").max_price(600000).build()

        result = search_properties([mid, expensive, geneva, cheap], criteria)

        assert result == [cheap, mid]

    def test_no_criteria_sorts_by_price(self) -> None:
        a = listing("Bern", 3)
        b = listing("Basel", 1)
        c = listing("Lugano", 2)

        assert search_properties([a, b, c]) == [b, c, a]

    def test_available_only(self) -> None:
        published = listing("Bern", 2)
        draft = listing("Bern", 1, published=False)

        assert search_properties([published, draft]) == [draft, published]
        assert search_properties([published, draft], available_only=True) == [published]

    def test_none_listings(self) -> None:
        with pytest.raises(ValidationError):
            search_properties(None)  # type: ignore[arg-type]

    def test_display_available_properties(self) -> None:
        a = Property(property_id="b-2", location="Bern", price=1)
        b = Property(property_id="a-1", location="Bern", price=2)
        c = Property(property_id="c-3", location="Bern", price=3)
        a.publish()
        b.publish()

        assert display_available_properties([a, b, c]) == [b, a]

    def test_display_available_listing_views(self) -> None:
        views = [
            ListingView(listing_id="2", title=None, location=None, property_type=None,
                        price=Decimal(1), available=True),
            ListingView(listing_id="1", title=None, location=None, property_type=None,
                        price=Decimal(1), available=False),
        ]

        result = display_available_properties(views)

        assert [v.listing_id for v in result] == ["2"]


class TestListingView:
    """Tests for ListingView."""

    def test_from_property(self) -> None:
        prop = listing("Geneva", 800000, PropertyType.VILLA)
        prop.add_feature("pool", True)

        view = ListingView.from_property(prop)

        assert view.listing_id == prop.property_id
        assert view.property_type == "VILLA"
        assert view.price == Decimal("800000")
        assert view.available is True
        assert view.attributes["pool"] is True

    def test_snapshot_is_detached(self) -> None:
        prop = listing("Geneva", 800000)
        view = ListingView.from_property(prop)

        prop.update_property_details(price=1)
        prop.add_feature("pool", True)

        assert view.price == Decimal("800000")
        assert "pool" not in view.attributes

    def test_attributes_read_only(self) -> None:
        view = ListingView(listing_id="x", title=None, location=None, property_type=None,
                           price=Decimal(1), available=True, attributes={"a": 1})

        with pytest.raises(TypeError):
            view.attributes["a"] = 2  # type: ignore[index]

    def test_requires_listing_id(self) -> None:
        with pytest.raises(ValidationError):
            ListingView(listing_id="", title=None, location=None, property_type=None,
                        price=Decimal(1), available=True)
