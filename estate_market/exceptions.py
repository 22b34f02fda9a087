"""Custom exception hierarchy for estate-market."""


class EstateMarketError(Exception):
    """Base exception for all estate-market errors."""


class ValidationError(EstateMarketError):
    """Raised when required input is missing or malformed."""


class OwnershipError(ValidationError):
    """Raised when an actor acts on an entity it does not own."""


class InvalidEntityStateError(EstateMarketError):
    """Raised when an entity is in an invalid state for the operation."""


class EntityNotFoundError(EstateMarketError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ConfigurationError(EstateMarketError):
    """Raised when configuration is invalid or missing."""


class SinkError(EstateMarketError):
    """Raised when a sink operation fails."""
