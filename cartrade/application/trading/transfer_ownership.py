"""
Use case: Transfer a car to another account.

Input: TransferOwnershipCommand (car_id, new_owner)
Output: TradeReceiptResult
Side effects: One signed transaction on the ledger.
Failure cases: InvalidArgumentsError, SubmissionError,
ConfirmationTimeout, ExecutionReverted (e.g. caller is not the owner).
"""

import logging

from eth_utils import is_address, to_checksum_address

from cartrade.application.trading.contract import (
    OWNERSHIP_TRANSFERRED_EVENT,
    TRANSFER_OWNERSHIP,
    ZERO_ADDRESS,
)
from cartrade.application.trading.dtos import (
    TradeReceiptResult,
    TransferOwnershipCommand,
)
from cartrade.application.trading.mapping import to_trade_receipt
from cartrade.domain.ledger.errors import InvalidArgumentsError
from cartrade.domain.ledger.manager import LedgerTradingManager

logger = logging.getLogger(__name__)


class TransferOwnershipUseCase:
    """Orchestrates handing a car over to a new owner address."""

    def __init__(self, manager: LedgerTradingManager) -> None:
        self._manager = manager

    async def execute(self, command: TransferOwnershipCommand) -> TradeReceiptResult:
        """Run the transfer-ownership use case.

        Raises:
            InvalidArgumentsError: If the car id is negative or the new
                owner is not a usable address.
        """
        if command.car_id < 0:
            raise InvalidArgumentsError(TRANSFER_OWNERSHIP, "car id must be non-negative")
        if not is_address(command.new_owner) or command.new_owner.lower() == ZERO_ADDRESS:
            raise InvalidArgumentsError(
                TRANSFER_OWNERSHIP, f"invalid new owner address: {command.new_owner}"
            )
        new_owner = to_checksum_address(command.new_owner)

        logger.info("Transferring car id=%d to %s", command.car_id, new_owner)
        confirmation = await self._manager.submit_trade(
            TRANSFER_OWNERSHIP, [command.car_id, new_owner]
        )
        return to_trade_receipt(confirmation, car_event=OWNERSHIP_TRANSFERRED_EVENT)
