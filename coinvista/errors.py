"""Exception types shared across the dashboard."""

from __future__ import annotations

from typing import Optional


class GatewayError(Exception):
    """Base class for failures talking to a market-data provider."""


class NetworkFailure(GatewayError):
    """Provider returned a non-success response or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseFailure(GatewayError):
    """Provider response did not have the expected shape."""


class InvalidHoldingError(ValueError):
    """Holding fields are missing, unparsable, or not positive."""
