"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from estate_market.models import Buyer, Profile, Property, PropertyType, Seller


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def seller() -> Seller:
    """Seller with no properties."""
    return Seller(
        profile=Profile(
            first_name="Anne",
            last_name="Rochat",
            email="anne.rochat@example.ch",
            username="arochat",
            user_id="seller-test-001",
        )
    )


@pytest.fixture
def buyer() -> Buyer:
    """Buyer with a 1M CHF budget."""
    return Buyer(
        profile=Profile(
            first_name="Luca",
            last_name="Bianchi",
            email="luca.bianchi@example.ch",
            username="lbianchi",
            user_id="buyer-test-001",
        ),
        budget=Decimal("1000000"),
    )


@pytest.fixture
def listed_property(seller: Seller) -> Property:
    """Apartment owned by ``seller``, still off market."""
    return seller.create_property(
        title="Bright apartment",
        description="Three rooms near the lake",
        location="Lausanne",
        price=Decimal("850000"),
        size=85.0,
        property_type=PropertyType.APARTMENT,
    )


@pytest.fixture
def time_slot() -> datetime:
    """Viewing slot a few days ahead."""
    return datetime.now().replace(minute=0, second=0, microsecond=0) + timedelta(days=3)
