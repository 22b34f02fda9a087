"""Marketplace scenario: sellers list, buyers search, offer and visit."""

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal

from estate_market.config import ScenarioConfig
from estate_market.generators import ParticipantGenerator, PropertyGenerator
from estate_market.models.participants import Buyer
from estate_market.models.search import SearchCriteria
from estate_market.store.marketplace import MarketplaceStore

logger = logging.getLogger(__name__)

FEEDBACK = ["Bright and quiet", "Needs renovation", "Great view", "Too far from transport"]


class MarketplaceScenario:
    """Generate a populated marketplace by driving the store's workflows.

    This scenario creates:
    - Sellers with one or more listings, most of them published
    - Buyers searching their preferred cities within budget
    - Offers on matching listings, answered by the listing's seller
    - Viewings, some confirmed and completed with feedback
    - Messages from buyers to sellers about a listing
    """

    def __init__(
        self,
        num_sellers: int = 10,
        listings_per_seller: tuple[int, int] = (1, 3),
        num_buyers: int = 25,
        offers_per_buyer: tuple[int, int] = (0, 3),
        publish_rate: float = 0.85,
        viewing_rate: float = 0.40,
        acceptance_rate: float = 0.30,
        message_rate: float = 0.50,
        seed: int | None = None,
        strict_transitions: bool = False,
    ) -> None:
        """Initialize marketplace scenario.

        Parameters
        ----------
        num_sellers : int
            Number of sellers to generate.
        listings_per_seller : tuple[int, int]
            Min and max listings per seller.
        num_buyers : int
            Number of buyers to generate.
        offers_per_buyer : tuple[int, int]
            Min and max offers each buyer places on matching listings.
        publish_rate : float
            Share of listings published for sale.
        viewing_rate : float
            Chance that a buyer books a viewing before making an offer.
        acceptance_rate : float
            Chance that a seller accepts an offer; the rest are rejected,
            except a few that the buyer withdraws.
        message_rate : float
            Chance that a buyer messages the seller about a listing.
        seed : int | None
            Random seed for reproducibility.
        strict_transitions : bool
            Run the store with transition tables enforced.
        """
        self.num_sellers = num_sellers
        self.listings_per_seller = listings_per_seller
        self.num_buyers = num_buyers
        self.offers_per_buyer = offers_per_buyer
        self.publish_rate = publish_rate
        self.viewing_rate = viewing_rate
        self.acceptance_rate = acceptance_rate
        self.message_rate = message_rate
        self.seed = seed

        self.random = random.Random(seed)
        self.store = MarketplaceStore(strict_transitions=strict_transitions)
        self._participant_gen = ParticipantGenerator(seed=seed)
        self._property_gen = PropertyGenerator(seed=seed)

    @classmethod
    def from_config(
        cls,
        config: ScenarioConfig,
        seed: int | None = None,
        strict_transitions: bool = False,
    ) -> "MarketplaceScenario":
        return cls(
            num_sellers=config.num_sellers,
            listings_per_seller=config.listings_per_seller,
            num_buyers=config.num_buyers,
            offers_per_buyer=config.offers_per_buyer,
            publish_rate=config.publish_rate,
            viewing_rate=config.viewing_rate,
            acceptance_rate=config.acceptance_rate,
            message_rate=config.message_rate,
            seed=seed,
            strict_transitions=strict_transitions,
        )

    def generate(self) -> MarketplaceStore:
        """Generate all data for the marketplace scenario.

        Returns
        -------
        MarketplaceStore
            Store containing all generated data.
        """
        logger.info(
            "Starting marketplace scenario: %d sellers, %d buyers",
            self.num_sellers,
            self.num_buyers,
        )

        for _ in range(self.num_sellers):
            self._generate_seller_listings()

        for _ in range(self.num_buyers):
            buyer = self._participant_gen.generate_buyer()
            self.store.add_buyer(buyer)
            self._generate_buyer_activity(buyer)

        logger.info("Generated marketplace: %s", self.store.summary())
        return self.store

    def _generate_seller_listings(self) -> None:
        seller = self._participant_gen.generate_seller()
        num_listings = self.random.randint(*self.listings_per_seller)
        for _ in range(num_listings):
            self._property_gen.generate(seller)
        self.store.add_seller(seller)

        for prop in seller.owned_properties:
            if self.random.random() < self.publish_rate:
                self.store.publish_property(seller.user_id, prop.property_id)

    def _generate_buyer_activity(self, buyer: Buyer) -> None:
        criteria_builder = SearchCriteria.builder().max_price(buyer.budget)
        for location in buyer.preferred_locations:
            criteria_builder.add_location(location)
        matches = self.store.search(criteria_builder.build())
        if not matches:
            return

        num_offers = min(len(matches), self.random.randint(*self.offers_per_buyer))
        for prop in self.random.sample(matches, k=num_offers):
            if self.random.random() < self.message_rate:
                self.store.send_message(
                    buyer.user_id,
                    prop.owner_id,
                    f"About {prop.title}",
                    "Is the listing still available?",
                    property_id=prop.property_id,
                )

            if self.random.random() < self.viewing_rate:
                self._generate_viewing(buyer, prop.property_id)

            # Offer between 90% and 100% of the asking price
            percent = self.random.randint(90, 100)
            amount = max(Decimal(1), (prop.price * percent / 100).quantize(Decimal("1")))
            offer = self.store.place_offer(buyer.user_id, prop.property_id, amount)
            self._resolve_offer(offer.offer_id, prop.owner_id, buyer.user_id)

    def _generate_viewing(self, buyer: Buyer, property_id: str) -> None:
        slot = datetime.now().replace(minute=0, second=0, microsecond=0) + timedelta(
            days=self.random.randint(1, 21), hours=self.random.randint(0, 8)
        )
        viewing = self.store.request_viewing(buyer.user_id, property_id, slot)

        roll = self.random.random()
        if roll < 0.15:
            self.store.change_viewing_status(viewing.viewing_id, "CANCELLED")
        elif roll < 0.60:
            self.store.change_viewing_status(viewing.viewing_id, "CONFIRMED")
            self.store.change_viewing_status(viewing.viewing_id, "COMPLETED")
            viewing.leave_feedback(self.random.choice(FEEDBACK))

    def _resolve_offer(self, offer_id: str, seller_id: str, buyer_id: str) -> None:
        roll = self.random.random()
        if roll < self.acceptance_rate:
            self.store.respond_to_offer(seller_id, offer_id, accept=True)
        elif roll < 0.9:
            self.store.respond_to_offer(seller_id, offer_id, accept=False)
        else:
            self.store.withdraw_offer(buyer_id, offer_id)
