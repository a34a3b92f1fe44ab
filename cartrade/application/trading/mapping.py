"""
Mapping from ledger and domain entities to application DTOs.
"""

from cartrade.application.trading.dtos import CarResult, EventResult, TradeReceiptResult
from cartrade.domain.ledger.entities import ConfirmationResult
from cartrade.domain.trading.entities import Car


def to_trade_receipt(
    confirmation: ConfirmationResult, car_event: str | None = None
) -> TradeReceiptResult:
    """Build a TradeReceiptResult, reading the car id from ``car_event`` if emitted."""
    car_id = None
    if car_event is not None:
        for event in confirmation.events_named(car_event):
            if "carId" in event.args:
                car_id = int(event.args["carId"])
                break
    return TradeReceiptResult(
        transaction_hash=confirmation.transaction_hash,
        block_number=confirmation.block_reference.number,
        block_hash=confirmation.block_reference.hash,
        nonce=confirmation.nonce,
        events=[
            EventResult(name=e.name, args=dict(e.args))
            for e in confirmation.decoded_events
        ],
        car_id=car_id,
    )


def to_car_result(car: Car) -> CarResult:
    return CarResult(
        car_id=car.car_id,
        model=car.model,
        price=car.price,
        owner=car.owner,
        for_sale=car.for_sale,
    )
