"""Base models shared across the marketplace domain."""

import uuid
from dataclasses import FrozenInstanceError, dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from estate_market.exceptions import ValidationError


def new_id() -> str:
    """Return a fresh opaque entity id."""
    return uuid.uuid4().hex


def to_decimal(value: Any, name: str = "value") -> Decimal:
    """Convert a numeric value to a finite Decimal without float artefacts."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{name} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValidationError(f"{name} must be a number") from exc
    if not result.is_finite():
        raise ValidationError(f"{name} must be a finite number")
    return result


def require(value: Any, name: str) -> Any:
    """Return ``value`` or raise when it is missing or a blank string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
    return value


class Entity:
    """Identity semantics for domain entities.

    Two entities are equal only when they are of the same type and share the
    same id; all other fields are ignored. Fields listed in
    ``_write_once`` can be bound during ``__init__`` but never rebound.
    """

    _id_field: ClassVar[str]
    _write_once: ClassVar[frozenset[str]] = frozenset()

    @property
    def entity_id(self) -> str:
        return getattr(self, self._id_field)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._write_once and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self.entity_id == other.entity_id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.entity_id))


@dataclass
class Event:
    """Standard event envelope for marketplace activity."""

    event_id: str
    event_type: str  # entity.action (e.g., offer.accepted)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
