"""Enumeration types for marketplace entities."""

from enum import Enum


class PropertyType(str, Enum):
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    VILLA = "VILLA"
    STUDIO = "STUDIO"
    LOFT = "LOFT"
    TOWNHOUSE = "TOWNHOUSE"
    LAND = "LAND"
    COMMERCIAL = "COMMERCIAL"
    OFFICE = "OFFICE"
    OTHER = "OTHER"


class PropertyStatus(str, Enum):
    FOR_SALE = "FOR_SALE"
    PENDING = "PENDING"
    SOLD = "SOLD"
    OFF_MARKET = "OFF_MARKET"


class OfferStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


class ViewingStatus(str, Enum):
    BOOKED = "BOOKED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    RESCHEDULED = "RESCHEDULED"


class Role(str, Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"


class MessageDirection(str, Enum):
    SENT = "SENT"
    RECEIVED = "RECEIVED"
