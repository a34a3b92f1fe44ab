"""
Domain entities for the car trading bounded context.

A car's authoritative record lives in the contract; these entities
are read-side snapshots decoded from contract queries and events.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Car:
    """A car record as stored by the trading contract."""

    car_id: int
    model: str
    price: int
    owner: str
    for_sale: bool

    @classmethod
    def from_contract(cls, record: Any) -> "Car":
        """Build a Car from the decoded ``getCar`` output.

        Accepts the named-output dict as well as the positional list a
        contract without output names produces.
        """
        if isinstance(record, dict):
            return cls(
                car_id=int(record["id"]),
                model=str(record["model"]),
                price=int(record["price"]),
                owner=str(record["owner"]),
                for_sale=bool(record["forSale"]),
            )
        car_id, model, price, owner, for_sale = record
        return cls(
            car_id=int(car_id),
            model=str(model),
            price=int(price),
            owner=str(owner),
            for_sale=bool(for_sale),
        )
