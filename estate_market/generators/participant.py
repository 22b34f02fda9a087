"""Participant generator: profiles, buyers and sellers."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from estate_market.generators.base import BaseGenerator
from estate_market.generators.property import CITIES
from estate_market.models.enums import PropertyType
from estate_market.models.participants import Buyer, Profile, Seller


class ParticipantGenerator(BaseGenerator):
    """Generate synthetic buyers and sellers."""

    # Budget bounds in thousands of CHF
    BUDGET_RANGE = (300, 3000)

    def generate_profile(self) -> Profile:
        """Generate the identity part shared by every role."""
        first_name = self.fake.first_name()
        last_name = self.fake.last_name()
        return Profile(
            first_name=first_name,
            last_name=last_name,
            email=self.fake.email(),
            username=self.fake.user_name(),
            user_id=self.fake.uuid4().replace("-", ""),
        )

    def generate_buyer(self) -> Buyer:
        """Generate a buyer with a budget, interests and preferred cities.

        Returns
        -------
        Buyer
            Generated buyer.
        """
        budget = self.random.randint(*self.BUDGET_RANGE) * 1000
        buyer = Buyer(profile=self.generate_profile(), budget=Decimal(budget))

        for property_type in self.random.sample(list(PropertyType), k=self.random.randint(1, 3)):
            buyer.add_interest(property_type)
        for city in self.random.sample(CITIES, k=self.random.randint(1, 2)):
            buyer.add_preferred_location(city)
        if self.random.random() < 0.5:
            buyer.add_document(f"doc-{self.fake.bothify('??-######').upper()}")
        return buyer

    def generate_seller(self) -> Seller:
        """Generate a seller without any property."""
        return Seller(profile=self.generate_profile())

    def generate_buyers(self, count: int) -> Iterator[Buyer]:
        """Generate multiple buyers.

        Parameters
        ----------
        count : int
            Number of buyers to generate.

        Yields
        ------
        Buyer
            Generated buyers.
        """
        for _ in range(count):
            yield self.generate_buyer()

    def generate_sellers(self, count: int) -> Iterator[Seller]:
        for _ in range(count):
            yield self.generate_seller()
