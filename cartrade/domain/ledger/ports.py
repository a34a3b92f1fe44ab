"""
Port interfaces (ABCs) for the ledger bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any

from cartrade.domain.ledger.entities import TransactionReceipt


class LedgerClient(ABC):
    """Port for the ledger's JSON-RPC primitives.

    All methods are coroutines; the trading manager awaits them on the
    event loop it runs on.
    """

    @abstractmethod
    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction and return its 0x-prefixed hash."""
        raise NotImplementedError

    @abstractmethod
    async def get_transaction_receipt(
        self, transaction_hash: str
    ) -> TransactionReceipt | None:
        """Return the receipt for a transaction, or None while it is pending."""
        raise NotImplementedError

    @abstractmethod
    async def call(
        self, to: str, data: bytes, from_address: str | None = None
    ) -> bytes:
        """Execute a read-only call against the latest state.

        Returns:
            The raw ABI-encoded return data.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_transaction_count(
        self, address: str, block: str = "pending"
    ) -> int:
        """Return the next nonce for ``address`` as seen by the node."""
        raise NotImplementedError

    @abstractmethod
    async def get_gas_price(self) -> int:
        """Return the node's suggested gas price in wei."""
        raise NotImplementedError

    @abstractmethod
    async def estimate_gas(self, transaction: dict[str, Any]) -> int:
        """Estimate the gas a transaction would consume.

        Adapters raise ExecutionReverted when the node reports that the
        call would revert.
        """
        raise NotImplementedError

    async def get_revert_reason(self, transaction_hash: str) -> str | None:
        """Return the revert reason for a failed transaction, if recoverable.

        Nodes do not include the reason in receipts. Adapters that can
        replay the call override this; the default gives up.
        """
        return None
