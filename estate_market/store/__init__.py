"""In-memory stores for marketplace entities and messages."""

from estate_market.store.marketplace import MarketplaceStore
from estate_market.store.messages import MessageStore

__all__ = ["MarketplaceStore", "MessageStore"]
