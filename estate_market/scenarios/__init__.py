"""Scenarios for generating populated marketplaces."""

from estate_market.scenarios.marketplace import MarketplaceScenario

__all__ = ["MarketplaceScenario"]
