"""
Use case: Read a page of the car catalog.

Input: ListCarsQuery (offset, limit, only_for_sale)
Output: CarCatalogResult
Side effects: None.
Failure cases: QueryError.

Car ids are assigned sequentially from 0; the catalog reads
``getCarCount`` and then the requested id range concurrently.
"""

import asyncio
import logging

from cartrade.application.trading.contract import GET_CAR_COUNT
from cartrade.application.trading.dtos import CarCatalogResult, ListCarsQuery
from cartrade.application.trading.get_car import fetch_car
from cartrade.application.trading.mapping import to_car_result
from cartrade.domain.ledger.errors import InvalidArgumentsError
from cartrade.domain.ledger.manager import LedgerTradingManager
from cartrade.domain.trading.errors import CarNotFoundError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class ListCarsUseCase:
    """Reads the catalog with concurrent read-only queries."""

    def __init__(self, manager: LedgerTradingManager) -> None:
        self._manager = manager

    async def execute(self, query: ListCarsQuery) -> CarCatalogResult:
        """Run the catalog use case.

        Raises:
            InvalidArgumentsError: If offset or limit are out of range.
        """
        if query.offset < 0 or not (1 <= query.limit <= MAX_PAGE_SIZE):
            raise InvalidArgumentsError(
                GET_CAR_COUNT, f"offset must be >= 0 and limit 1-{MAX_PAGE_SIZE}"
            )

        total = int(await self._manager.query(GET_CAR_COUNT))
        car_ids = range(query.offset, min(total, query.offset + query.limit))
        results = await asyncio.gather(
            *(fetch_car(self._manager, car_id) for car_id in car_ids),
            return_exceptions=True,
        )

        cars = []
        for car_id, result in zip(car_ids, results):
            if isinstance(result, CarNotFoundError):
                logger.debug("Car id=%d vanished from catalog", car_id)
                continue
            if isinstance(result, BaseException):
                raise result
            if query.only_for_sale and not result.for_sale:
                continue
            cars.append(to_car_result(result))
        return CarCatalogResult(total=total, cars=cars)
