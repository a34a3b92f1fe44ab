"""
Adapter: Ethereum JSON-RPC ledger client.

Implements LedgerClient on top of web3.py's AsyncWeb3 and an
AsyncHTTPProvider. Converts web3 receipts into domain receipts and
web3 revert errors into ExecutionReverted.
"""

import asyncio
import logging
from typing import Any

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TransactionNotFound, Web3Exception

from cartrade.domain.ledger.entities import LogEntry, TransactionReceipt
from cartrade.domain.ledger.errors import ExecutionReverted, SubmissionError
from cartrade.domain.ledger.ports import LedgerClient

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0
REVERT_PREFIX = "execution reverted"


def _hex(value: Any) -> str:
    """Render HexBytes/bytes/str as a 0x-prefixed lowercase hex string."""
    if isinstance(value, str):
        return value if value.startswith("0x") else "0x" + value
    return "0x" + bytes(value).hex()


def _revert_message(exc: Exception) -> str | None:
    message = getattr(exc, "message", None) or str(exc)
    if not message:
        return None
    if message.lower().startswith(REVERT_PREFIX):
        message = message[len(REVERT_PREFIX):].lstrip(": ").strip()
    return message or None


def to_domain_receipt(raw: Any) -> TransactionReceipt:
    """Convert a web3 receipt (AttributeDict or dict) into a TransactionReceipt."""
    return TransactionReceipt(
        transaction_hash=_hex(raw["transactionHash"]),
        status=raw.get("status", 1) == 1,
        block_number=raw.get("blockNumber"),
        block_hash=_hex(raw["blockHash"]) if raw.get("blockHash") is not None else None,
        gas_used=raw.get("gasUsed"),
        logs=tuple(
            LogEntry(
                address=log["address"],
                topics=tuple(_hex(topic) for topic in log.get("topics", ())),
                data=_hex(log.get("data", b"")),
                log_index=log.get("logIndex", 0),
            )
            for log in raw.get("logs", ())
        ),
    )


class Web3LedgerClient(LedgerClient):
    """Concrete LedgerClient talking to a node over HTTP JSON-RPC.

    Args:
        rpc_url: HTTP endpoint of the node.
        request_timeout: Seconds allowed for each RPC round-trip.
        web3: Pre-built AsyncWeb3 instance; built from ``rpc_url`` when None.
    """

    def __init__(
        self,
        rpc_url: str,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        web3: AsyncWeb3 | None = None,
    ) -> None:
        self._web3 = web3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self._request_timeout = request_timeout

    async def _rpc(self, awaitable: Any) -> Any:
        return await asyncio.wait_for(awaitable, timeout=self._request_timeout)

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        try:
            transaction_hash = await self._rpc(
                self._web3.eth.send_raw_transaction(raw_transaction)
            )
        except ContractLogicError as exc:
            raise ExecutionReverted(reason=_revert_message(exc)) from exc
        except asyncio.TimeoutError as exc:
            raise SubmissionError("node did not answer in time") from exc
        except (ValueError, Web3Exception) as exc:
            # Nodes that execute on submission report reverts as RPC errors.
            if REVERT_PREFIX in str(exc).lower():
                raise ExecutionReverted(reason=_revert_message(exc)) from exc
            raise SubmissionError(str(exc)) from exc
        return _hex(transaction_hash)

    async def get_transaction_receipt(
        self, transaction_hash: str
    ) -> TransactionReceipt | None:
        try:
            raw = await self._rpc(self._web3.eth.get_transaction_receipt(transaction_hash))
        except TransactionNotFound:
            return None
        if raw is None:
            return None
        return to_domain_receipt(raw)

    async def call(
        self, to: str, data: bytes, from_address: str | None = None
    ) -> bytes:
        transaction: dict[str, Any] = {
            "to": AsyncWeb3.to_checksum_address(to),
            "data": _hex(data),
        }
        if from_address is not None:
            transaction["from"] = AsyncWeb3.to_checksum_address(from_address)
        try:
            result = await self._rpc(self._web3.eth.call(transaction, "latest"))
        except ContractLogicError as exc:
            raise ExecutionReverted(reason=_revert_message(exc)) from exc
        return bytes(result)

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return await self._rpc(
            self._web3.eth.get_transaction_count(
                AsyncWeb3.to_checksum_address(address), block
            )
        )

    async def get_gas_price(self) -> int:
        return await self._rpc(self._web3.eth.gas_price)

    async def estimate_gas(self, transaction: dict[str, Any]) -> int:
        try:
            return await self._rpc(self._web3.eth.estimate_gas(transaction))
        except ContractLogicError as exc:
            raise ExecutionReverted(reason=_revert_message(exc)) from exc

    async def get_revert_reason(self, transaction_hash: str) -> str | None:
        """Replay a reverted transaction as a call at its block to read the reason."""
        transaction = await self._rpc(self._web3.eth.get_transaction(transaction_hash))
        replay = {
            "from": transaction["from"],
            "to": transaction["to"],
            "data": _hex(transaction["input"]),
            "value": transaction["value"],
            "gas": transaction["gas"],
        }
        try:
            await self._rpc(self._web3.eth.call(replay, transaction["blockNumber"]))
        except ContractLogicError as exc:
            return _revert_message(exc)
        logger.debug("Replay of %s did not revert; reason unavailable", transaction_hash)
        return None

    async def close(self) -> None:
        """Release the provider's HTTP session."""
        await self._web3.provider.disconnect()
