"""
Data Transfer Objects for the car trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ListCarCommand:
    """Input DTO for putting a new car up for sale.

    Attributes:
        model: Free-text car model name.
        price: Asking price in wei.
    """

    model: str
    price: int


@dataclass(frozen=True)
class BuyCarCommand:
    """Input DTO for buying a listed car.

    Attributes:
        car_id: Contract id of the car.
        price: Wei sent with the purchase; must cover the asking price.
    """

    car_id: int
    price: int


@dataclass(frozen=True)
class TransferOwnershipCommand:
    """Input DTO for handing a car to another account.

    Attributes:
        car_id: Contract id of the car.
        new_owner: Address of the receiving account.
    """

    car_id: int
    new_owner: str


@dataclass(frozen=True)
class GetCarQuery:
    """Input DTO for reading a single car."""

    car_id: int


@dataclass(frozen=True)
class ListCarsQuery:
    """Input DTO for reading the catalog.

    Attributes:
        offset: First car id to read.
        limit: Maximum number of cars to return.
        only_for_sale: Skip cars that are not currently listed.
    """

    offset: int = 0
    limit: int = 50
    only_for_sale: bool = False


@dataclass(frozen=True)
class GetTransactionStatusQuery:
    """Input DTO for resolving a submitted transaction by hash."""

    transaction_hash: str


@dataclass(frozen=True)
class EventResult:
    """A contract event emitted by a trade."""

    name: str
    args: dict[str, Any]


@dataclass(frozen=True)
class TradeReceiptResult:
    """Output DTO for a confirmed trade.

    Attributes:
        transaction_hash: Hash of the mined transaction.
        block_number: Block the transaction was included in.
        block_hash: Hash of that block.
        nonce: Nonce the transaction was signed with, if known.
        events: Decoded contract events, in log order.
        car_id: Car the trade affected, when an event reports it.
    """

    transaction_hash: str
    block_number: int | None
    block_hash: str | None
    nonce: int | None = None
    events: list[EventResult] = field(default_factory=list)
    car_id: int | None = None


@dataclass(frozen=True)
class CarResult:
    """Output DTO for a single car."""

    car_id: int
    model: str
    price: int
    owner: str
    for_sale: bool


@dataclass(frozen=True)
class CarCatalogResult:
    """Output DTO for a page of the catalog.

    Attributes:
        total: Number of cars ever listed on the contract.
        cars: The cars on this page.
    """

    total: int
    cars: list[CarResult]


@dataclass(frozen=True)
class TransactionStatusResult:
    """Output DTO for a transaction looked up by hash.

    Attributes:
        transaction_hash: The hash that was queried.
        status: "pending" or "confirmed".
        receipt: The confirmation, once mined.
    """

    transaction_hash: str
    status: str
    receipt: TradeReceiptResult | None = None
