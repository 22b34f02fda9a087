"""Synthetic data generators for the marketplace."""

from estate_market.generators.participant import ParticipantGenerator
from estate_market.generators.property import PropertyGenerator

__all__ = ["ParticipantGenerator", "PropertyGenerator"]
