"""
Domain-specific errors for the car trading bounded context.

These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from cartrade.domain.ledger.errors import LedgerError


class CarTradingError(LedgerError):
    """Base error for marketplace-level failures."""


class CarNotFoundError(CarTradingError):
    """Raised when the contract has no car with the given id."""

    def __init__(self, car_id: int) -> None:
        super().__init__(f"Car not found: {car_id}")
        self.car_id = car_id
