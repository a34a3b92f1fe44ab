"""
Use case: Read a single car from the trading contract.

Input: GetCarQuery (car_id)
Output: CarResult
Side effects: None.
Failure cases: CarNotFoundError, QueryError.
"""

import logging

from cartrade.application.trading.contract import GET_CAR, ZERO_ADDRESS
from cartrade.application.trading.dtos import CarResult, GetCarQuery
from cartrade.application.trading.mapping import to_car_result
from cartrade.domain.ledger.errors import QueryError, QueryReverted
from cartrade.domain.ledger.manager import LedgerTradingManager
from cartrade.domain.trading.entities import Car
from cartrade.domain.trading.errors import CarNotFoundError

logger = logging.getLogger(__name__)


async def fetch_car(manager: LedgerTradingManager, car_id: int) -> Car:
    """Query ``getCar`` and decode it into a Car.

    A revert or an unset owner both mean the car does not exist.
    """
    if car_id < 0:
        raise CarNotFoundError(car_id)
    try:
        record = await manager.query(GET_CAR, [car_id])
    except QueryReverted as exc:
        raise CarNotFoundError(car_id) from exc
    try:
        car = Car.from_contract(record)
    except (KeyError, TypeError, ValueError) as exc:
        raise QueryError(GET_CAR, f"unexpected car record: {record!r}") from exc
    if car.owner.lower() == ZERO_ADDRESS:
        raise CarNotFoundError(car_id)
    return car


class GetCarUseCase:
    """Reads one car record. Read-only; never signs or allocates a nonce."""

    def __init__(self, manager: LedgerTradingManager) -> None:
        self._manager = manager

    async def execute(self, query: GetCarQuery) -> CarResult:
        logger.debug("Reading car id=%d", query.car_id)
        return to_car_result(await fetch_car(self._manager, query.car_id))
