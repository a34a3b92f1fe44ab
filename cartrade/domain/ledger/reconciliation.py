"""
Receipt reconciliation.

Translates the raw logs of a receipt into domain events by decoding
them against the interface descriptor's event definitions. Pure and
synchronous. Logs that match no known event are skipped: the ledger
may emit events from other contracts in the same transaction.
"""

import logging

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_utils import decode_hex

from cartrade.domain.ledger.entities import DecodedEvent, LogEntry, TransactionReceipt
from cartrade.domain.ledger.errors import DecodingError
from cartrade.domain.ledger.interface import (
    AbiParameter,
    InterfaceDescriptor,
    normalize_value,
)

logger = logging.getLogger(__name__)


def _is_hashed_topic(param: AbiParameter) -> bool:
    """Indexed dynamic values are stored as their keccak hash, not the value."""
    canonical = param.canonical_type
    return (
        canonical in ("string", "bytes")
        or canonical.endswith("]")
        or canonical.startswith("(")
    )


class ReceiptReconciler:
    """Decodes receipt logs emitted by one contract."""

    def __init__(self, interface: InterfaceDescriptor, contract_address: str) -> None:
        self._interface = interface
        self._contract_address = contract_address.lower()

    def decode_log(self, log: LogEntry) -> DecodedEvent:
        """Decode a single log entry.

        Raises:
            DecodingError: If the log was not emitted by the bound contract
                or does not match any known event shape.
        """
        if log.address.lower() != self._contract_address:
            raise DecodingError(f"Log from foreign address {log.address}")
        if not log.topics:
            raise DecodingError("Log without topics")

        event = self._interface.event_for_topic(log.topics[0])
        if event is None:
            raise DecodingError(f"Unknown event topic {log.topics[0]}")

        indexed = [p for p in event.inputs if p.indexed]
        if len(log.topics) - 1 != len(indexed):
            raise DecodingError(
                f"{event.name}: expected {len(indexed)} indexed topic(s), "
                f"got {len(log.topics) - 1}"
            )
        body = [p for p in event.inputs if not p.indexed]

        try:
            body_values = iter(
                abi_decode([p.canonical_type for p in body], decode_hex(log.data))
            )
            topic_values = iter(log.topics[1:])
            args = {}
            for position, param in enumerate(event.inputs):
                key = param.name or f"arg{position}"
                if not param.indexed:
                    value = next(body_values)
                    args[key] = normalize_value(param.type, param.components, value)
                    continue
                topic = next(topic_values)
                if _is_hashed_topic(param):
                    args[key] = topic
                    continue
                (value,) = abi_decode([param.canonical_type], decode_hex(topic))
                args[key] = normalize_value(param.type, param.components, value)
        except (AbiDecodingError, ValueError, TypeError) as exc:
            raise DecodingError(f"{event.name}: malformed log data: {exc}") from exc

        return DecodedEvent(
            name=event.name,
            args=args,
            address=log.address,
            log_index=log.log_index,
        )

    def reconcile(self, receipt: TransactionReceipt) -> list[DecodedEvent]:
        """Decode all recognizable logs of a receipt, in log order."""
        events = []
        for log in receipt.logs:
            try:
                events.append(self.decode_log(log))
            except DecodingError as exc:
                logger.debug(
                    "Skipping log %d of %s: %s",
                    log.log_index,
                    receipt.transaction_hash,
                    exc.message,
                )
        return events
