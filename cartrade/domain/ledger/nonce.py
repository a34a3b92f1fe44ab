"""
Nonce allocation for the manager's signing identity.

All transactions of one manager share a single nonce sequence. The
allocator is the only place a nonce is handed out: reservations are
taken one at a time under an asyncio lock, so concurrent trade intents
never observe the same nonce twice.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from cartrade.domain.ledger.errors import SubmissionError
from cartrade.domain.ledger.ports import LedgerClient

logger = logging.getLogger(__name__)


class NonceAllocator:
    """Strictly ordered nonce source for one address.

    The first reservation seeds the counter from the ledger's pending
    transaction count; later reservations count locally. A reservation
    that fails drops the local counter, so the next one re-reads the
    nonce from the ledger instead of leaving a gap.
    """

    def __init__(self, ledger_client: LedgerClient, address: str) -> None:
        self._ledger_client = ledger_client
        self._address = address
        self._lock = asyncio.Lock()
        self._next_nonce: int | None = None

    @property
    def next_nonce(self) -> int | None:
        """The nonce the next reservation will receive, if already known."""
        return self._next_nonce

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[int]:
        """Reserve the next nonce for the duration of the ``async with`` body.

        The counter advances only when the body completes. Other
        reservations wait until this one is released.

        Raises:
            SubmissionError: If the ledger nonce cannot be read.
        """
        async with self._lock:
            if self._next_nonce is None:
                self._next_nonce = await self._fetch_ledger_nonce()
            nonce = self._next_nonce
            try:
                yield nonce
            except BaseException:
                logger.warning(
                    "Nonce %d for %s not consumed; resyncing from ledger",
                    nonce,
                    self._address,
                )
                self._next_nonce = None
                raise
            self._next_nonce = nonce + 1

    def reset(self) -> None:
        """Forget the local counter; the next reservation re-reads the ledger."""
        self._next_nonce = None

    async def _fetch_ledger_nonce(self) -> int:
        try:
            nonce = await self._ledger_client.get_transaction_count(
                self._address, "pending"
            )
        except Exception as exc:
            raise SubmissionError(f"could not read account nonce: {exc}") from exc
        logger.debug("Seeded nonce for %s from ledger: %d", self._address, nonce)
        return nonce
