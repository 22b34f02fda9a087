"""Property generator for marketplace listings."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from estate_market.generators.base import BaseGenerator
from estate_market.models.enums import PropertyType
from estate_market.models.participants import Seller
from estate_market.models.property import Property

CITIES = ["Lausanne", "Geneva", "Zurich", "Bern", "Basel", "Lugano", "Montreux", "Fribourg"]


class PropertyGenerator(BaseGenerator):
    """Generate synthetic properties listed by a seller."""

    PROPERTY_TYPES = list(PropertyType)
    TYPE_WEIGHTS = [0.30, 0.20, 0.06, 0.10, 0.04, 0.08, 0.06, 0.06, 0.06, 0.04]

    # Size ranges by type (square meters)
    SIZE_RANGES = {
        PropertyType.APARTMENT: (45, 160),
        PropertyType.HOUSE: (110, 320),
        PropertyType.VILLA: (200, 600),
        PropertyType.STUDIO: (18, 45),
        PropertyType.LOFT: (70, 220),
        PropertyType.TOWNHOUSE: (100, 220),
        PropertyType.LAND: (300, 3000),
        PropertyType.COMMERCIAL: (80, 900),
        PropertyType.OFFICE: (40, 600),
        PropertyType.OTHER: (20, 200),
    }

    # Price per square meter in CHF
    PRICE_PER_SQM = {
        "Geneva": (11000, 16000),
        "Zurich": (11000, 17000),
        "Lausanne": (8500, 12500),
        "Lugano": (7000, 10500),
        "Montreux": (8000, 12000),
    }
    DEFAULT_PRICE_PER_SQM = (5500, 9000)

    # Land is sold far below built surface prices
    LAND_DISCOUNT = Decimal("0.15")

    def generate(self, seller: Seller) -> Property:
        """Generate a property owned by ``seller``.

        The property is created through ``Seller.create_property`` so the
        seller tracks it; it stays ``OFF_MARKET`` until published.

        Parameters
        ----------
        seller : Seller
            Listing owner.

        Returns
        -------
        Property
            Generated property.
        """
        property_type = self.random.choices(self.PROPERTY_TYPES, weights=self.TYPE_WEIGHTS, k=1)[0]
        location = self.random.choice(CITIES)
        size = round(self.random.uniform(*self.SIZE_RANGES[property_type]), 1)
        price_per_sqm = self.random.randint(
            *self.PRICE_PER_SQM.get(location, self.DEFAULT_PRICE_PER_SQM)
        )
        price = Decimal(int(size * price_per_sqm) // 1000 * 1000)
        if property_type == PropertyType.LAND:
            price = (price * self.LAND_DISCOUNT).quantize(Decimal("1"))

        prop = seller.create_property(
            title=f"{property_type.value.title()} in {location}",
            description=self.fake.paragraph(nb_sentences=3),
            location=location,
            price=price,
            size=size,
            property_type=property_type,
        )

        if property_type != PropertyType.LAND:
            rooms = max(1, int(size // 35))
            prop.add_feature("bedrooms", rooms)
            prop.add_feature("bathrooms", max(1, rooms // 2))
        prop.add_feature("parking", self.random.random() < 0.6)
        prop.add_feature("year_built", self.random.randint(1890, 2025))
        for _ in range(self.random.randint(0, 4)):
            prop.add_image(self.fake.image_url())
        return prop

    def generate_batch(self, seller: Seller, count: int) -> Iterator[Property]:
        """Generate multiple properties for one seller."""
        for _ in range(count):
            yield self.generate(seller)
