"""
Pydantic schemas for the car trading API request/response validation.

These schemas enforce input validation and define the API contract.
Amounts are integers in wei. No business logic belongs here.
"""

from typing import Any

from pydantic import BaseModel, Field

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
TRANSACTION_HASH_PATTERN = r"^0x[0-9a-fA-F]{64}$"
MODEL_MAX_LEN = 120


class ListCarRequest(BaseModel):
    """Request schema for listing a car.

    Attributes:
        model: Car model name (1-120 chars).
        price: Asking price in wei.
    """

    model: str = Field(..., min_length=1, max_length=MODEL_MAX_LEN, description="Car model")
    price: int = Field(..., gt=0, description="Asking price in wei")


class BuyCarRequest(BaseModel):
    """Request schema for buying a car. ``price`` is sent as transaction value."""

    price: int = Field(..., gt=0, description="Wei sent with the purchase")


class TransferOwnershipRequest(BaseModel):
    """Request schema for transferring a car to another account."""

    new_owner: str = Field(
        ..., pattern=ADDRESS_PATTERN, description="Address of the new owner"
    )


class EventItem(BaseModel):
    """A decoded contract event."""

    name: str
    args: dict[str, Any]


class TradeReceiptResponse(BaseModel):
    """Response schema for a confirmed trade."""

    transaction_hash: str
    block_number: int | None
    block_hash: str | None
    nonce: int | None = None
    car_id: int | None = None
    events: list[EventItem] = Field(default_factory=list)


class CarResponse(BaseModel):
    """Response schema for a single car."""

    car_id: int
    model: str
    price: int
    owner: str
    for_sale: bool


class CarCatalogResponse(BaseModel):
    """Response schema for a page of the catalog."""

    total: int
    cars: list[CarResponse]


class TransactionStatusResponse(BaseModel):
    """Response schema for a transaction looked up by hash."""

    transaction_hash: str
    status: str
    receipt: TradeReceiptResponse | None = None


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    network: str
