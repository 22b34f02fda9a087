"""Property listing model."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from estate_market.exceptions import ValidationError
from estate_market.models.base import Entity, new_id, to_decimal
from estate_market.models.enums import PropertyStatus, PropertyType


@dataclass(eq=False)
class Property(Entity):
    """Real estate listing owned by a seller.

    Descriptive fields change through ``update_property_details`` and the
    feature/image helpers; status changes through ``publish``, ``suspend``,
    ``close`` or the unrestricted ``set_status``. Every mutator funnels
    through ``_touch`` and returns the resulting ``updated_at``.
    """

    _id_field = "property_id"
    _write_once = frozenset({"property_id", "created_at"})

    title: str | None = None
    owner_id: str | None = None
    description: str | None = None
    location: str | None = None
    price: Decimal = Decimal("0")
    size: float = 0.0  # Square meters
    property_type: PropertyType | None = None
    status: PropertyStatus = PropertyStatus.OFF_MARKET
    property_id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime | None = None
    _features: dict[str, Any] = field(default_factory=dict, repr=False)
    _images: list[str] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.price = to_decimal(self.price, "price")
        self.size = _to_size(self.size)
        if self.price < 0:
            raise ValidationError("price must not be negative")
        if self.size < 0:
            raise ValidationError("size must not be negative")
        if self.property_type is not None:
            self.property_type = _coerce_type(self.property_type)
        self.status = PropertyStatus(self.status)
        if self.updated_at is None or self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def features(self) -> Mapping[str, Any]:
        return MappingProxyType(self._features)

    @property
    def images(self) -> tuple[str, ...]:
        return tuple(self._images)

    @property
    def bedroom_count(self) -> int:
        return _int_feature(self._features.get("bedrooms"))

    @property
    def bathroom_count(self) -> int:
        return _int_feature(self._features.get("bathrooms"))

    def _touch(self) -> datetime:
        # Never move backwards, even if the wall clock does.
        self.updated_at = max(datetime.now(), self.updated_at)
        return self.updated_at

    # Lifecycle

    def set_status(self, status: PropertyStatus | str) -> datetime:
        """Set any status, without consulting a transition table."""
        self.status = PropertyStatus(status)
        return self._touch()

    def publish(self) -> datetime:
        return self.set_status(PropertyStatus.FOR_SALE)

    def suspend(self) -> datetime:
        return self.set_status(PropertyStatus.OFF_MARKET)

    def close(self) -> datetime:
        return self.set_status(PropertyStatus.SOLD)

    # Descriptive fields

    def update_property_details(
        self,
        title: str | None = None,
        description: str | None = None,
        location: str | None = None,
        price: Decimal | float | int | None = None,
        size: float | None = None,
        property_type: PropertyType | str | None = None,
    ) -> datetime:
        """Update the given fields, leaving absent ones unchanged.

        Negative ``price`` or ``size`` values are treated as absent.
        ``updated_at`` is bumped even when nothing changed. All arguments
        are validated before any field is written, so a rejected call
        leaves the property untouched.
        """
        new_price = to_decimal(price, "price") if price is not None else None
        new_size = _to_size(size) if size is not None else None
        new_type = _coerce_type(property_type) if property_type is not None else None

        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if location is not None:
            self.location = location
        if new_price is not None and new_price >= 0:
            self.price = new_price
        if new_size is not None and new_size >= 0:
            self.size = new_size
        if new_type is not None:
            self.property_type = new_type
        return self._touch()

    def add_feature(self, key: str, value: Any) -> datetime:
        self._features[key] = value
        return self._touch()

    def remove_feature(self, key: str) -> datetime:
        self._features.pop(key, None)
        return self._touch()

    def add_image(self, url: str | None) -> datetime:
        """Append an image url; blank or missing urls are ignored."""
        if url is None or not url.strip():
            return self.updated_at
        self._images.append(url)
        return self._touch()

    def remove_image(self, url: str) -> datetime:
        """Remove the first matching url; only a real removal bumps ``updated_at``."""
        try:
            self._images.remove(url)
        except ValueError:
            return self.updated_at
        return self._touch()

    # Queries

    def compute_price_per_square_meter(self) -> float:
        """Return price / size, or 0.0 when the size is zero."""
        if self.size > 0:
            return float(self.price) / self.size
        return 0.0

    def is_owned_by(self, user_id: str | None) -> bool:
        return self.owner_id is not None and self.owner_id == user_id

    def is_available_for_sale(self) -> bool:
        return self.status == PropertyStatus.FOR_SALE


def _coerce_type(value: PropertyType | str) -> PropertyType:
    try:
        return PropertyType(value.strip() if isinstance(value, str) else value)
    except ValueError as exc:
        raise ValidationError(f"Unknown property type: {value!r}") from exc


def _to_size(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("size must be a number")
    try:
        size = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("size must be a number") from exc
    if not math.isfinite(size):
        raise ValidationError("size must be a finite number")
    return size


def _int_feature(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0
