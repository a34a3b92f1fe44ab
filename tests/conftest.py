"""
Shared fixtures for the ledger and trading tests.

FakeLedgerClient implements the LedgerClient port in memory: it
records every signed transaction, hands out hashes, and serves
receipts after a configurable number of empty polls.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import pytest
import rlp
from eth_abi import encode as abi_encode

from cartrade.domain.ledger.entities import LogEntry, TransactionReceipt
from cartrade.domain.ledger.interface import InterfaceDescriptor
from cartrade.domain.ledger.manager import LedgerTradingManager
from cartrade.domain.ledger.ports import LedgerClient

# Well-known development account (never holds real funds).
OWNER_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
OWNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
BUYER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
OTHER_CONTRACT_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
CHAIN_ID = 1337

CAR_TRADING_INTERFACE: list[dict[str, Any]] = [
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    {
        "type": "function",
        "name": "listCar",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "model", "type": "string"},
            {"name": "price", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "buyCar",
        "stateMutability": "payable",
        "inputs": [{"name": "carId", "type": "uint256"}],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "transferOwnership",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "carId", "type": "uint256"},
            {"name": "newOwner", "type": "address"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "getCar",
        "stateMutability": "view",
        "inputs": [{"name": "carId", "type": "uint256"}],
        "outputs": [
            {"name": "id", "type": "uint256"},
            {"name": "model", "type": "string"},
            {"name": "price", "type": "uint256"},
            {"name": "owner", "type": "address"},
            {"name": "forSale", "type": "bool"},
        ],
    },
    {
        "type": "function",
        "name": "getCarCount",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "event",
        "name": "CarListed",
        "anonymous": False,
        "inputs": [
            {"name": "carId", "type": "uint256", "indexed": True},
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "model", "type": "string", "indexed": False},
            {"name": "price", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "CarSold",
        "anonymous": False,
        "inputs": [
            {"name": "carId", "type": "uint256", "indexed": True},
            {"name": "buyer", "type": "address", "indexed": True},
            {"name": "price", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "OwnershipTransferred",
        "anonymous": False,
        "inputs": [
            {"name": "carId", "type": "uint256", "indexed": True},
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
        ],
    },
]

NEVER = -1


@dataclass
class Outcome:
    """What the fake ledger does with the next submitted transaction.

    Attributes:
        status: Receipt status (True = success, False = reverted).
        logs: Logs to put in the receipt.
        pending_polls: Receipt polls answered with None first; NEVER
            keeps the transaction pending forever.
    """

    status: bool = True
    logs: tuple[LogEntry, ...] = ()
    pending_polls: int = 0


@dataclass
class SentTransaction:
    hash: str
    nonce: int
    raw: bytes
    outcome: Outcome
    polls: int = 0
    block_number: int = 0


class FakeLedgerClient(LedgerClient):
    """In-memory LedgerClient for tests."""

    def __init__(self, start_nonce: int = 0) -> None:
        self.start_nonce = start_nonce
        self.sent: list[SentTransaction] = []
        self.outcomes: list[Outcome] = []
        self.hashes: list[str] = []
        self.call_results: dict[bytes, bytes] = {}
        self.calls: list[tuple[str, bytes, str | None]] = []
        self.nonce_reads = 0
        self.send_error: Exception | None = None
        self.failing_sends: set[int] = set()
        self.send_attempts = 0
        self.call_error: Exception | None = None
        self.receipt_error: Exception | None = None
        self.revert_reason: str | None = None
        self.gas_estimates = 0
        self.network_calls = 0
        self._by_hash: dict[str, SentTransaction] = {}

    @property
    def sent_nonces(self) -> list[int]:
        return [tx.nonce for tx in self.sent]

    def queue(self, *outcomes: Outcome) -> None:
        self.outcomes.extend(outcomes)

    def set_call_result(self, selector: bytes, types: list[str], values: list[Any]) -> None:
        self.call_results[selector] = abi_encode(types, values)

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        self.network_calls += 1
        await asyncio.sleep(0)
        self.send_attempts += 1
        if self.send_error is not None:
            error, self.send_error = self.send_error, None
            raise error
        if self.send_attempts in self.failing_sends:
            raise ConnectionError("connection reset by peer")
        nonce = int.from_bytes(rlp.decode(raw_transaction)[0], "big")
        if self.hashes:
            tx_hash = self.hashes.pop(0)
        else:
            tx_hash = "0x%064x" % (len(self.sent) + 1)
        outcome = self.outcomes.pop(0) if self.outcomes else Outcome()
        sent = SentTransaction(
            hash=tx_hash,
            nonce=nonce,
            raw=raw_transaction,
            outcome=outcome,
            block_number=100 + len(self.sent),
        )
        self.sent.append(sent)
        self._by_hash[tx_hash] = sent
        return tx_hash

    async def get_transaction_receipt(self, transaction_hash: str) -> TransactionReceipt | None:
        self.network_calls += 1
        await asyncio.sleep(0)
        if self.receipt_error is not None:
            error, self.receipt_error = self.receipt_error, None
            raise error
        sent = self._by_hash.get(transaction_hash)
        if sent is None:
            return None
        if sent.outcome.pending_polls == NEVER or sent.polls < sent.outcome.pending_polls:
            sent.polls += 1
            return None
        return TransactionReceipt(
            transaction_hash=transaction_hash,
            status=sent.outcome.status,
            block_number=sent.block_number,
            block_hash="0x%064x" % (0xB10C + sent.block_number),
            gas_used=21_000,
            logs=sent.outcome.logs,
        )

    async def call(self, to: str, data: bytes, from_address: str | None = None) -> bytes:
        self.network_calls += 1
        await asyncio.sleep(0)
        self.calls.append((to, data, from_address))
        if self.call_error is not None:
            raise self.call_error
        return self.call_results.get(data[:4], b"")

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        self.network_calls += 1
        self.nonce_reads += 1
        await asyncio.sleep(0)
        return self.start_nonce + len(self.sent)

    async def get_gas_price(self) -> int:
        self.network_calls += 1
        return 1_000_000_000

    async def estimate_gas(self, transaction: dict[str, Any]) -> int:
        self.network_calls += 1
        self.gas_estimates += 1
        return 90_000

    async def get_revert_reason(self, transaction_hash: str) -> str | None:
        return self.revert_reason


def make_log(
    event_name: str,
    indexed: list[tuple[str, Any]],
    body: list[tuple[str, Any]],
    address: str = CONTRACT_ADDRESS,
    log_index: int = 0,
) -> LogEntry:
    """Build a raw log for an event of CAR_TRADING_INTERFACE."""
    interface = InterfaceDescriptor.parse(CAR_TRADING_INTERFACE)
    event = next(e for e in interface.events if e.name == event_name)
    topics = [event.topic] + [
        "0x" + abi_encode([typ], [value]).hex() for typ, value in indexed
    ]
    data = abi_encode([typ for typ, _ in body], [value for _, value in body])
    return LogEntry(
        address=address,
        topics=tuple(topics),
        data="0x" + data.hex(),
        log_index=log_index,
    )


@pytest.fixture
def interface() -> InterfaceDescriptor:
    return InterfaceDescriptor.parse(CAR_TRADING_INTERFACE)


@pytest.fixture
def fake_client() -> FakeLedgerClient:
    return FakeLedgerClient(start_nonce=7)


@pytest.fixture
def manager(fake_client: FakeLedgerClient) -> LedgerTradingManager:
    return LedgerTradingManager(
        ledger_client=fake_client,
        contract_address=CONTRACT_ADDRESS,
        json_interface=CAR_TRADING_INTERFACE,
        owner_address=OWNER_ADDRESS,
        owner_private_key=OWNER_PRIVATE_KEY,
        chain_id=CHAIN_ID,
        gas_limit=200_000,
        confirmation_timeout=0.5,
        poll_interval=0.001,
    )
