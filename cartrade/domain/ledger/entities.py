"""
Domain entities for the ledger bounded context.

Entities describe the transactions the trading manager builds and the
receipts the ledger hands back. They contain no IO operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TransactionStatus(Enum):
    """Lifecycle of a transaction the manager has submitted."""

    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class SigningIdentity:
    """The single account every transaction of a manager is signed by.

    The private key is excluded from repr so it never ends up in logs
    or tracebacks.
    """

    owner_address: str
    owner_private_key: str = field(repr=False)


@dataclass(frozen=True)
class TradeIntent:
    """A request to invoke one state-changing contract method."""

    operation: str
    args: tuple[Any, ...] = ()
    value: int = 0
    gas: int | None = None


@dataclass
class PendingTransaction:
    """A submitted transaction awaiting its receipt."""

    hash: str
    nonce: int
    status: TransactionStatus = TransactionStatus.SUBMITTED


@dataclass(frozen=True)
class LogEntry:
    """A raw log emitted during transaction execution."""

    address: str
    topics: tuple[str, ...]
    data: str
    log_index: int = 0


@dataclass(frozen=True)
class TransactionReceipt:
    """Ledger-issued confirmation record for a mined transaction."""

    transaction_hash: str
    status: bool
    block_number: int | None = None
    block_hash: str | None = None
    gas_used: int | None = None
    logs: tuple[LogEntry, ...] = ()


@dataclass(frozen=True)
class BlockReference:
    """Block a confirmed transaction was included in."""

    number: int | None
    hash: str | None


@dataclass(frozen=True)
class DecodedEvent:
    """A contract event decoded against the interface descriptor."""

    name: str
    args: dict[str, Any]
    address: str
    log_index: int = 0


@dataclass(frozen=True)
class ConfirmationResult:
    """Normalized outcome of a successfully executed trade."""

    transaction_hash: str
    block_reference: BlockReference
    decoded_events: list[DecodedEvent] = field(default_factory=list)
    nonce: int | None = None
    gas_used: int | None = None

    def events_named(self, name: str) -> list[DecodedEvent]:
        """Return the decoded events with the given name, in log order."""
        return [event for event in self.decoded_events if event.name == name]
