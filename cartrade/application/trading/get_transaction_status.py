"""
Use case: Resolve a submitted transaction by hash.

Input: GetTransactionStatusQuery (transaction_hash)
Output: TransactionStatusResult
Side effects: None.
Failure cases: ExecutionReverted, QueryError.

This is how a caller settles a ConfirmationTimeout: the transaction
may have landed after the wait gave up, so it is looked up, never
resubmitted.
"""

import re

from cartrade.application.trading.dtos import (
    GetTransactionStatusQuery,
    TransactionStatusResult,
)
from cartrade.application.trading.mapping import to_trade_receipt
from cartrade.domain.ledger.errors import InvalidArgumentsError
from cartrade.domain.ledger.manager import LedgerTradingManager

TRANSACTION_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"


class GetTransactionStatusUseCase:
    """Looks up a transaction's receipt once."""

    def __init__(self, manager: LedgerTradingManager) -> None:
        self._manager = manager

    async def execute(self, query: GetTransactionStatusQuery) -> TransactionStatusResult:
        if not TRANSACTION_HASH_PATTERN.match(query.transaction_hash):
            raise InvalidArgumentsError(
                "getTransactionStatus", "transaction hash must be 32 bytes of hex"
            )
        confirmation = await self._manager.check_transaction(query.transaction_hash)
        if confirmation is None:
            return TransactionStatusResult(
                transaction_hash=query.transaction_hash, status=STATUS_PENDING
            )
        return TransactionStatusResult(
            transaction_hash=query.transaction_hash,
            status=STATUS_CONFIRMED,
            receipt=to_trade_receipt(confirmation),
        )
