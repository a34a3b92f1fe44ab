"""
Ledger trading manager.

Binds one deployed contract (address + interface) to one signing
identity and turns trading intents into signed, submitted and
confirmed ledger transactions.

Entry points for the web layer:
    submit_trade(operation, args, value) -> ConfirmationResult
    query(method, args) -> decoded value
    check_transaction(tx_hash) -> ConfirmationResult | None

Failure cases: BindingError, InvalidArgumentsError, SubmissionError,
ConfirmationTimeout, ExecutionReverted, QueryError.
Nothing is retried here; retry policy belongs to the caller.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import is_address, to_checksum_address

from cartrade.domain.ledger.entities import (
    BlockReference,
    ConfirmationResult,
    PendingTransaction,
    SigningIdentity,
    TradeIntent,
    TransactionReceipt,
    TransactionStatus,
)
from cartrade.domain.ledger.errors import (
    BindingError,
    ConfirmationTimeout,
    ExecutionReverted,
    InvalidArgumentsError,
    QueryError,
    QueryReverted,
    SubmissionError,
)
from cartrade.domain.ledger.interface import AbiEntry, InterfaceDescriptor
from cartrade.domain.ledger.nonce import NonceAllocator
from cartrade.domain.ledger.ports import LedgerClient
from cartrade.domain.ledger.reconciliation import ReceiptReconciler

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 1.0


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ContractBinding:
    """The contract a manager talks to and the client it talks through."""

    ledger_client: LedgerClient
    contract_address: str
    interface: InterfaceDescriptor


class LedgerTradingManager:
    """Submits trades and queries for one contract and one owner account.

    Construction performs no network I/O. All transactions are signed
    locally with the owner key and share its nonce sequence, which is
    allocated through a single NonceAllocator.

    Args:
        ledger_client: Port implementation used for every RPC.
        contract_address: Address of the deployed contract.
        json_interface: The contract's JSON interface (ABI), raw or parsed.
        owner_address: Address of the signing account.
        owner_private_key: Private key controlling ``owner_address``.
        chain_id: Chain id for replay protection; omitted from
            transactions when None.
        gas_limit: Fixed gas limit for trades. Estimated per trade when None.
        confirmation_timeout: Seconds to wait for a receipt.
        poll_interval: Seconds between receipt polls.

    Raises:
        BindingError: If any of the binding inputs is malformed.
    """

    def __init__(
        self,
        ledger_client: LedgerClient,
        contract_address: str,
        json_interface: Any,
        owner_address: str,
        owner_private_key: str,
        *,
        chain_id: int | None = None,
        gas_limit: int | None = None,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if isinstance(json_interface, InterfaceDescriptor):
            interface = json_interface
        else:
            interface = InterfaceDescriptor.parse(json_interface)

        if not isinstance(contract_address, str) or not is_address(contract_address):
            raise BindingError(f"Malformed contract address: {contract_address!r}")
        if not isinstance(owner_address, str) or not is_address(owner_address):
            raise BindingError(f"Malformed owner address: {owner_address!r}")
        try:
            account: LocalAccount = Account.from_key(owner_private_key)
        except Exception:
            raise BindingError("Invalid owner private key (key not shown)") from None
        if account.address.lower() != owner_address.lower():
            raise BindingError(
                f"Owner private key does not control address {owner_address}"
            )
        if gas_limit is not None and gas_limit <= 0:
            raise BindingError(f"Gas limit must be positive, got {gas_limit}")
        if confirmation_timeout <= 0 or poll_interval <= 0:
            raise BindingError("Confirmation timeout and poll interval must be positive")

        self._binding = ContractBinding(
            ledger_client=ledger_client,
            contract_address=to_checksum_address(contract_address),
            interface=interface,
        )
        self._identity = SigningIdentity(
            owner_address=account.address,
            owner_private_key=owner_private_key,
        )
        self._account = account
        self._chain_id = chain_id
        self._gas_limit = gas_limit
        self._confirmation_timeout = confirmation_timeout
        self._poll_interval = poll_interval
        self._nonces = NonceAllocator(ledger_client, account.address)
        self._reconciler = ReceiptReconciler(interface, contract_address)
        self._pending: dict[str, PendingTransaction] = {}

    @property
    def binding(self) -> ContractBinding:
        return self._binding

    @property
    def contract_address(self) -> str:
        return self._binding.contract_address

    @property
    def owner_address(self) -> str:
        return self._identity.owner_address

    @property
    def interface(self) -> InterfaceDescriptor:
        return self._binding.interface

    @property
    def pending_transactions(self) -> list[PendingTransaction]:
        """Snapshot of transactions currently awaiting a receipt."""
        return list(self._pending.values())

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    async def submit_trade(
        self,
        operation: str,
        args: Sequence[Any] = (),
        value: int = 0,
        gas: int | None = None,
    ) -> ConfirmationResult:
        """Sign, submit and confirm one state-changing contract call.

        Args:
            operation: Contract method name.
            args: Positional arguments, in declared order.
            value: Wei to send along; only allowed for payable methods.
            gas: Gas limit override for this call.

        Returns:
            The confirmation with block reference and decoded events.

        Raises:
            UnknownMethodError: If ``operation`` is not in the interface.
            InvalidArgumentsError: If the arguments or value do not fit.
            SubmissionError: If the transaction could not be submitted.
            ConfirmationTimeout: If no receipt arrived in time.
            ExecutionReverted: If the ledger rejected the call.
        """
        intent = TradeIntent(operation=operation, args=tuple(args), value=value, gas=gas)
        data = self._encode_trade(intent)
        gas_limit = await self._resolve_gas(intent, data)
        gas_price = await self._gas_price()

        pending = await self._sign_and_send(intent, data, gas_limit, gas_price)
        self._pending[pending.hash] = pending
        try:
            receipt = await self._await_receipt(pending)
            return await self._settle(pending, receipt)
        finally:
            self._pending.pop(pending.hash, None)

    async def check_transaction(self, transaction_hash: str) -> ConfirmationResult | None:
        """Look up the outcome of a previously submitted transaction.

        Used to resolve a ConfirmationTimeout without resubmitting.

        Returns:
            The confirmation, or None while the transaction is still pending.

        Raises:
            ExecutionReverted: If the transaction was mined but reverted.
            QueryError: If the receipt could not be fetched.
        """
        try:
            receipt = await self._binding.ledger_client.get_transaction_receipt(
                transaction_hash
            )
        except Exception as exc:
            raise QueryError("eth_getTransactionReceipt", str(exc)) from exc
        if receipt is None:
            return None
        if not receipt.status:
            raise ExecutionReverted(
                transaction_hash, await self._revert_reason(transaction_hash)
            )
        return self._confirmation(receipt, nonce=None)

    def _encode_trade(self, intent: TradeIntent) -> bytes:
        interface = self._binding.interface
        entry = interface.function(intent.operation, len(intent.args))
        if entry.is_read_only:
            logger.warning("Submitting read-only method %s as a trade", entry.name)
        self._check_value(entry, intent)
        return interface.encode_call(entry, intent.args)

    @staticmethod
    def _check_value(entry: AbiEntry, intent: TradeIntent) -> None:
        # bool is an int subclass but never a valid amount.
        if not _is_integer(intent.value) or intent.value < 0:
            raise InvalidArgumentsError(
                entry.name, f"value must be a non-negative integer, got {intent.value!r}"
            )
        if intent.value > 0 and not entry.is_payable:
            raise InvalidArgumentsError(entry.name, "method is not payable")
        if intent.gas is not None and (not _is_integer(intent.gas) or intent.gas <= 0):
            raise InvalidArgumentsError(
                entry.name, f"gas must be a positive integer, got {intent.gas!r}"
            )

    async def _resolve_gas(self, intent: TradeIntent, data: bytes) -> int:
        if intent.gas is not None:
            return intent.gas
        if self._gas_limit is not None:
            return self._gas_limit
        try:
            return await self._binding.ledger_client.estimate_gas(
                {
                    "from": self._identity.owner_address,
                    "to": self._binding.contract_address,
                    "data": "0x" + data.hex(),
                    "value": intent.value,
                }
            )
        except ExecutionReverted:
            raise
        except Exception as exc:
            raise SubmissionError(f"gas estimation failed: {exc}") from exc

    async def _gas_price(self) -> int:
        try:
            return await self._binding.ledger_client.get_gas_price()
        except Exception as exc:
            raise SubmissionError(f"could not read gas price: {exc}") from exc

    async def _sign_and_send(
        self, intent: TradeIntent, data: bytes, gas_limit: int, gas_price: int
    ) -> PendingTransaction:
        # The reservation spans signing and sending so that transactions
        # reach the ledger in nonce order. It is released before waiting
        # for the receipt.
        async with self._nonces.reserve() as nonce:
            transaction = {
                "nonce": nonce,
                "gasPrice": gas_price,
                "gas": gas_limit,
                "to": self._binding.contract_address,
                "value": intent.value,
                "data": "0x" + data.hex(),
            }
            if self._chain_id is not None:
                transaction["chainId"] = self._chain_id
            try:
                signed = self._account.sign_transaction(transaction)
            except (TypeError, ValueError) as exc:
                raise InvalidArgumentsError(
                    intent.operation, f"transaction could not be signed: {exc}"
                ) from exc

            try:
                transaction_hash = await self._binding.ledger_client.send_raw_transaction(
                    signed.raw_transaction
                )
            except ExecutionReverted:
                raise
            except SubmissionError as exc:
                raise SubmissionError(exc.reason, nonce=nonce) from exc
            except Exception as exc:
                raise SubmissionError(str(exc), nonce=nonce) from exc

        logger.info(
            "Submitted %s nonce=%d hash=%s", intent.operation, nonce, transaction_hash
        )
        return PendingTransaction(hash=transaction_hash, nonce=nonce)

    async def _await_receipt(self, pending: PendingTransaction) -> TransactionReceipt:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._confirmation_timeout
        while True:
            try:
                receipt = await self._binding.ledger_client.get_transaction_receipt(
                    pending.hash
                )
            except Exception as exc:
                logger.warning("Receipt poll for %s failed: %s", pending.hash, exc)
                receipt = None
            if receipt is not None:
                return receipt

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning(
                    "No receipt for %s (nonce=%d) after %.1fs",
                    pending.hash,
                    pending.nonce,
                    self._confirmation_timeout,
                )
                raise ConfirmationTimeout(
                    pending.hash, pending.nonce, self._confirmation_timeout
                )
            await asyncio.sleep(min(self._poll_interval, remaining))

    async def _settle(
        self, pending: PendingTransaction, receipt: TransactionReceipt
    ) -> ConfirmationResult:
        if receipt.status:
            pending.status = TransactionStatus.CONFIRMED
            logger.info(
                "Confirmed %s in block %s", pending.hash, receipt.block_number
            )
            return self._confirmation(receipt, nonce=pending.nonce)

        pending.status = TransactionStatus.FAILED
        reason = await self._revert_reason(pending.hash)
        logger.warning("Transaction %s reverted: %s", pending.hash, reason)
        raise ExecutionReverted(pending.hash, reason)

    def _confirmation(
        self, receipt: TransactionReceipt, nonce: int | None
    ) -> ConfirmationResult:
        return ConfirmationResult(
            transaction_hash=receipt.transaction_hash,
            block_reference=BlockReference(
                number=receipt.block_number, hash=receipt.block_hash
            ),
            decoded_events=self._reconciler.reconcile(receipt),
            nonce=nonce,
            gas_used=receipt.gas_used,
        )

    async def _revert_reason(self, transaction_hash: str) -> str | None:
        try:
            return await self._binding.ledger_client.get_revert_reason(transaction_hash)
        except Exception as exc:
            logger.warning("Could not recover revert reason for %s: %s", transaction_hash, exc)
            return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def query(self, method: str, args: Sequence[Any] = ()) -> Any:
        """Call a read-only contract method against current ledger state.

        No transaction, no signing, no nonce.

        Returns:
            The decoded, normalized return value.

        Raises:
            QueryError: If the method is unknown, the arguments do not fit,
                the call fails, or the response cannot be decoded.
            QueryReverted: If the contract reverted the call.
        """
        args = tuple(args)
        interface = self._binding.interface
        try:
            entry = interface.function(method, len(args))
            data = interface.encode_call(entry, args)
        except (BindingError, InvalidArgumentsError) as exc:
            raise QueryError(method, exc.message) from exc

        try:
            raw = await self._binding.ledger_client.call(
                self._binding.contract_address,
                data,
                from_address=self._identity.owner_address,
            )
        except QueryError:
            raise
        except ExecutionReverted as exc:
            raise QueryReverted(method, exc.reason) from exc
        except Exception as exc:
            raise QueryError(method, f"call failed: {exc}") from exc

        try:
            return interface.decode_output(entry, raw)
        except (AbiDecodingError, ValueError, TypeError, OverflowError) as exc:
            raise QueryError(method, f"malformed response: {exc}") from exc
