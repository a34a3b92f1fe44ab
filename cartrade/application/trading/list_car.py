"""
Use case: List a car for sale on the trading contract.

Input: ListCarCommand (model, price)
Output: TradeReceiptResult
Side effects: One signed transaction on the ledger.
Failure cases: InvalidArgumentsError, SubmissionError,
ConfirmationTimeout, ExecutionReverted.
"""

import logging

from cartrade.application.trading.contract import CAR_LISTED_EVENT, LIST_CAR
from cartrade.application.trading.dtos import ListCarCommand, TradeReceiptResult
from cartrade.application.trading.mapping import to_trade_receipt
from cartrade.domain.ledger.errors import InvalidArgumentsError
from cartrade.domain.ledger.manager import LedgerTradingManager

logger = logging.getLogger(__name__)

MAX_MODEL_LENGTH = 120


class ListCarUseCase:
    """Orchestrates listing a new car.

    Validates the listing and delegates the contract call to the
    LedgerTradingManager.
    """

    def __init__(self, manager: LedgerTradingManager) -> None:
        self._manager = manager

    async def execute(self, command: ListCarCommand) -> TradeReceiptResult:
        """Run the list-car use case.

        Args:
            command: The listing with model name and asking price.

        Returns:
            The confirmed trade, with the new car id when the contract
            emitted a CarListed event.

        Raises:
            InvalidArgumentsError: If the model is empty or the price is not positive.
        """
        model = command.model.strip()
        if not model or len(model) > MAX_MODEL_LENGTH:
            raise InvalidArgumentsError(
                LIST_CAR, f"model must be 1-{MAX_MODEL_LENGTH} characters"
            )
        if command.price <= 0:
            raise InvalidArgumentsError(LIST_CAR, "price must be positive")

        logger.info("Listing car model=%s, price=%d", model, command.price)
        confirmation = await self._manager.submit_trade(LIST_CAR, [model, command.price])
        return to_trade_receipt(confirmation, car_event=CAR_LISTED_EVENT)
