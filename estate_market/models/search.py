"""Listing search: criteria builder and matcher.

A *listing* is anything exposing ``location``, ``price`` and
``property_type`` attributes: a ``Property``, a ``ListingView`` or any
compatible record from an external source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from estate_market.exceptions import ValidationError
from estate_market.models.base import require, to_decimal

if TYPE_CHECKING:
    from estate_market.models.property import Property


def type_label(value: Any) -> str | None:
    """Return the label used to match a property type."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    return str(value)


def _is_available(listing: Any) -> bool:
    check = getattr(listing, "is_available_for_sale", None)
    if callable(check):
        return bool(check())
    return bool(getattr(listing, "available", False))


@dataclass(frozen=True)
class ListingView:
    """Read-only projection of a property considered as a search result."""

    listing_id: str
    title: str | None
    location: str | None
    property_type: str | None
    price: Decimal
    available: bool
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        require(self.listing_id, "listing_id")
        object.__setattr__(self, "price", to_decimal(self.price, "price"))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @classmethod
    def from_property(cls, prop: Property) -> ListingView:
        return cls(
            listing_id=prop.property_id,
            title=prop.title,
            location=prop.location,
            property_type=type_label(prop.property_type),
            price=prop.price,
            available=prop.is_available_for_sale(),
            attributes=dict(prop.features),
        )


@dataclass(frozen=True)
class SearchCriteria:
    """Immutable filter over listings: location, price range and type.

    The three conditions are AND-combined. An empty location or type set,
    and an unset price bound, do not constrain the result.
    """

    locations: frozenset[str] = frozenset()
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    property_types: frozenset[str] = frozenset()

    @staticmethod
    def builder() -> SearchCriteriaBuilder:
        return SearchCriteriaBuilder()

    def matches(self, listing: Any) -> bool:
        return (
            self._matches_location(listing)
            and self._matches_price(listing)
            and self._matches_type(listing)
        )

    def to_predicate(self) -> Callable[[Any], bool]:
        return self.matches

    def _matches_location(self, listing: Any) -> bool:
        if not self.locations:
            return True
        location = getattr(listing, "location", None)
        return location is not None and location in self.locations

    def _matches_price(self, listing: Any) -> bool:
        price = getattr(listing, "price", None)
        if price is None:
            return self.min_price is None and self.max_price is None
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False
        return True

    def _matches_type(self, listing: Any) -> bool:
        if not self.property_types:
            return True
        label = type_label(getattr(listing, "property_type", None))
        return label is not None and label in self.property_types


class SearchCriteriaBuilder:
    """Accumulates search conditions; ``build()`` validates the price range."""

    def __init__(self) -> None:
        # dicts keep insertion order for the repr; membership is all that matters
        self._locations: dict[str, None] = {}
        self._min_price: Decimal | None = None
        self._max_price: Decimal | None = None
        self._property_types: dict[str, None] = {}

    def add_location(self, location: str | None) -> SearchCriteriaBuilder:
        if location is not None and location.strip():
            self._locations[location.strip()] = None
        return self

    def min_price(self, price: Decimal | float | int) -> SearchCriteriaBuilder:
        self._min_price = to_decimal(price, "min_price")
        return self

    def max_price(self, price: Decimal | float | int) -> SearchCriteriaBuilder:
        self._max_price = to_decimal(price, "max_price")
        return self

    def add_property_type(self, property_type: Enum | str | None) -> SearchCriteriaBuilder:
        label = type_label(property_type)
        if label is not None and label.strip():
            self._property_types[label.strip()] = None
        return self

    def build(self) -> SearchCriteria:
        if (
            self._min_price is not None
            and self._max_price is not None
            and self._min_price > self._max_price
        ):
            raise ValidationError("Min price cannot exceed max price")
        return SearchCriteria(
            locations=frozenset(self._locations),
            min_price=self._min_price,
            max_price=self._max_price,
            property_types=frozenset(self._property_types),
        )


def search_properties(
    listings: Iterable[Any],
    criteria: SearchCriteria | None = None,
    available_only: bool = False,
) -> list[Any]:
    """Filter listings against ``criteria`` and sort by price ascending.

    Parameters
    ----------
    listings : Iterable[Any]
        Listing-shaped records.
    criteria : SearchCriteria | None
        Filter to apply; ``None`` keeps every listing.
    available_only : bool
        Also drop listings that are not available for sale.

    Returns
    -------
    list[Any]
        The matching records themselves, cheapest first.
    """
    if listings is None:
        raise ValidationError("listings is required")
    matched = [
        listing
        for listing in listings
        if (criteria is None or criteria.matches(listing))
        and (not available_only or _is_available(listing))
    ]
    return sorted(matched, key=lambda listing: listing.price)


def display_available_properties(listings: Iterable[Any]) -> list[Any]:
    """Return the available listings ordered by listing id."""
    if listings is None:
        raise ValidationError("listings is required")
    available = [listing for listing in listings if _is_available(listing)]
    return sorted(available, key=_listing_id)


def _listing_id(listing: Any) -> str:
    return getattr(listing, "listing_id", None) or getattr(listing, "property_id", "")
