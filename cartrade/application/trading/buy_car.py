"""
Use case: Buy a listed car.

Input: BuyCarCommand (car_id, price)
Output: TradeReceiptResult
Side effects: One signed, value-carrying transaction on the ledger.
Failure cases: InvalidArgumentsError, SubmissionError,
ConfirmationTimeout, ExecutionReverted (e.g. car already sold).
"""

import logging

from cartrade.application.trading.contract import BUY_CAR, CAR_SOLD_EVENT
from cartrade.application.trading.dtos import BuyCarCommand, TradeReceiptResult
from cartrade.application.trading.mapping import to_trade_receipt
from cartrade.domain.ledger.errors import InvalidArgumentsError
from cartrade.domain.ledger.manager import LedgerTradingManager

logger = logging.getLogger(__name__)


class BuyCarUseCase:
    """Orchestrates the purchase of a car, sending the price as value."""

    def __init__(self, manager: LedgerTradingManager) -> None:
        self._manager = manager

    async def execute(self, command: BuyCarCommand) -> TradeReceiptResult:
        """Run the buy-car use case.

        Raises:
            InvalidArgumentsError: If the car id is negative or the price
                is not positive.
        """
        if command.car_id < 0:
            raise InvalidArgumentsError(BUY_CAR, "car id must be non-negative")
        if command.price <= 0:
            raise InvalidArgumentsError(BUY_CAR, "price must be positive")

        logger.info("Buying car id=%d, value=%d", command.car_id, command.price)
        confirmation = await self._manager.submit_trade(
            BUY_CAR, [command.car_id], value=command.price
        )
        return to_trade_receipt(confirmation, car_event=CAR_SOLD_EVENT)
