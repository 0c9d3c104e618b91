"""Data models for the portfolio tracker."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from coinvista.errors import InvalidHoldingError


def parse_positive_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a user or stored value into a positive, finite Decimal.

    Raises:
        InvalidHoldingError: If the value is missing, unparsable, or <= 0
    """
    if value is None or isinstance(value, bool):
        raise InvalidHoldingError(f"{field_name} is required")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidHoldingError(f"{field_name} is not a number: {value!r}") from e
    if not result.is_finite():
        raise InvalidHoldingError(f"{field_name} must be finite")
    if result <= Decimal("0"):
        raise InvalidHoldingError(f"{field_name} must be greater than zero")
    return result


@dataclass(frozen=True)
class Holding:
    """One portfolio lot.

    Attributes:
        coin_id: Market-data identifier of the coin (e.g. "bitcoin")
        quantity: Units held
        buy_price: Purchase price per unit
    """
    coin_id: str
    quantity: Decimal
    buy_price: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.coin_id, str) or not self.coin_id.strip():
            raise InvalidHoldingError("coin_id is required")
        object.__setattr__(self, "quantity", parse_positive_decimal(self.quantity, "quantity"))
        object.__setattr__(self, "buy_price", parse_positive_decimal(self.buy_price, "buy_price"))

    @property
    def cost(self) -> Decimal:
        """Cost basis of this lot."""
        return self.quantity * self.buy_price

    def to_dict(self) -> dict:
        """Persisted form; decimals kept as strings to stay exact."""
        return {
            "coinId": self.coin_id,
            "quantity": str(self.quantity),
            "buyPrice": str(self.buy_price),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Holding":
        """Restore a persisted holding; accepts numbers or strings.

        Raises:
            InvalidHoldingError: If the entry is malformed
        """
        if not isinstance(data, Mapping):
            raise InvalidHoldingError(f"Holding entry is not an object: {data!r}")
        return cls(
            coin_id=data.get("coinId"),
            quantity=data.get("quantity"),
            buy_price=data.get("buyPrice"),
        )
