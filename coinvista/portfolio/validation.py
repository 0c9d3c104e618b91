"""Validation for the add-holding form."""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Tuple


class ValidationState(Enum):
    """Input validation states."""
    VALID = "valid"
    INVALID = "invalid"
    NEUTRAL = "neutral"       # empty form, nothing to report yet


class HoldingInputValidator:
    """Validates raw holding input and returns a validation state.

    All three fields are required; quantity and buy price must parse as
    positive numbers. A zero buy price is rejected here so the valuation
    engine never has to rank a holding with an undefined gain.
    """

    def validate(
        self,
        coin_id: str,
        quantity_str: str,
        buy_price_str: str,
    ) -> Tuple[ValidationState, str]:
        """Validate one form submission.

        Args:
            coin_id: Coin identifier as typed
            quantity_str: Quantity as typed
            buy_price_str: Buy price per unit as typed

        Returns:
            Tuple of (ValidationState, message)
        """
        fields = [coin_id, quantity_str, buy_price_str]
        if all(not (f or "").strip() for f in fields):
            return (ValidationState.NEUTRAL, "")

        if not (coin_id or "").strip():
            return (ValidationState.INVALID, "Coin id is required")

        for label, raw in (("Quantity", quantity_str), ("Buy price", buy_price_str)):
            error = self._check_positive(label, raw)
            if error:
                return (ValidationState.INVALID, error)

        return (ValidationState.VALID, "")

    @staticmethod
    def _check_positive(label: str, raw: Optional[str]) -> Optional[str]:
        if not raw or not raw.strip():
            return f"{label} is required"
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            return f"{label}: invalid number format"
        if not value.is_finite():
            return f"{label}: invalid number format"
        if value <= Decimal("0"):
            return f"{label} must be greater than zero"
        return None
