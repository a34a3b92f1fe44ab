"""
Domain-specific errors for the ledger bounded context.

All errors raised by the ledger trading manager are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class LedgerError(Exception):
    """Base error for all ledger domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class BindingError(LedgerError):
    """Raised when the contract binding is misconfigured.

    Fatal and configuration-time: a bad interface descriptor, a malformed
    address or an unusable signing identity. Never retried.
    """


class UnknownMethodError(BindingError):
    """Raised when an operation name does not exist in the interface."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Method not found in contract interface: {method}")
        self.method = method


class InvalidArgumentsError(LedgerError):
    """Raised when call arguments do not fit the method's declared inputs."""

    def __init__(self, method: str, reason: str) -> None:
        super().__init__(f"Invalid arguments for {method}: {reason}")
        self.method = method
        self.reason = reason


class SubmissionError(LedgerError):
    """Raised when a signed transaction could not be handed to the ledger.

    Transient. The nonce cache is dropped so the next submission
    re-reads the account's nonce from the ledger.
    """

    def __init__(self, reason: str, nonce: int | None = None) -> None:
        super().__init__(f"Transaction submission failed: {reason}")
        self.reason = reason
        self.nonce = nonce


class ConfirmationTimeout(LedgerError):
    """Raised when no receipt arrived within the bounded wait.

    The transaction may still land. Callers re-query by hash
    instead of resubmitting.
    """

    def __init__(self, transaction_hash: str, nonce: int, timeout: float) -> None:
        super().__init__(
            f"No receipt for transaction {transaction_hash} after {timeout:g}s"
        )
        self.transaction_hash = transaction_hash
        self.nonce = nonce
        self.timeout = timeout


class ExecutionReverted(LedgerError):
    """Raised when the ledger rejected the operation (reverted execution)."""

    def __init__(
        self, transaction_hash: str | None = None, reason: str | None = None
    ) -> None:
        detail = reason or "no reason given"
        if transaction_hash:
            super().__init__(
                f"Execution reverted for transaction {transaction_hash}: {detail}"
            )
        else:
            super().__init__(f"Execution reverted: {detail}")
        self.transaction_hash = transaction_hash
        self.reason = reason


class QueryError(LedgerError):
    """Raised when a read-only contract call fails or cannot be decoded."""

    def __init__(self, method: str, reason: str) -> None:
        super().__init__(f"Query {method} failed: {reason}")
        self.method = method
        self.reason = reason


class DecodingError(LedgerError):
    """Raised when a log entry does not match any known event shape."""


class QueryReverted(ExecutionReverted):
    """Raised when the contract reverts a read-only call.

    No transaction exists, so there is no hash. Callers that treat a
    revert as "not found" catch this; others see a failed read.
    """

    def __init__(self, method: str, reason: str | None = None) -> None:
        LedgerError.__init__(
            self, f"Query {method} reverted: {reason or 'no reason given'}"
        )
        self.transaction_hash = None
        self.reason = reason
        self.method = method
