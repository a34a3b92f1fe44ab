"""
Centralized error handlers for FastAPI.

Maps ledger and trading errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cartrade.domain.ledger.errors import (
    BindingError,
    ConfirmationTimeout,
    ExecutionReverted,
    InvalidArgumentsError,
    LedgerError,
    QueryError,
    QueryReverted,
    SubmissionError,
    UnknownMethodError,
)
from cartrade.domain.trading.errors import CarNotFoundError

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502
HTTP_504 = 504


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all ledger error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(CarNotFoundError)
    async def handle_car_not_found(
        _request: Request, exc: CarNotFoundError
    ) -> JSONResponse:
        logger.warning("Car not found: %d", exc.car_id)
        return _error_response(HTTP_404, "Car not found")

    @app.exception_handler(InvalidArgumentsError)
    async def handle_invalid_arguments(
        _request: Request, exc: InvalidArgumentsError
    ) -> JSONResponse:
        logger.warning("Invalid arguments for %s: %s", exc.method, exc.reason)
        return _error_response(HTTP_422, "Invalid arguments", exc.reason)

    @app.exception_handler(UnknownMethodError)
    async def handle_unknown_method(
        _request: Request, exc: UnknownMethodError
    ) -> JSONResponse:
        logger.error("Contract interface lacks method %s", exc.method)
        return _error_response(HTTP_422, "Unsupported operation", exc.method)

    @app.exception_handler(ExecutionReverted)
    async def handle_execution_reverted(
        _request: Request, exc: ExecutionReverted
    ) -> JSONResponse:
        """Business rejection by the contract, e.g. a car that is already sold."""
        logger.warning(
            "Execution reverted: tx=%s reason=%s", exc.transaction_hash, exc.reason
        )
        return _error_response(HTTP_409, "Trade rejected by ledger", exc.reason)

    @app.exception_handler(QueryReverted)
    async def handle_query_reverted(
        _request: Request, exc: QueryReverted
    ) -> JSONResponse:
        """A read the contract refused; no trade was attempted."""
        logger.error("Query %s reverted: %s", exc.method, exc.reason)
        return _error_response(HTTP_502, "Ledger query failed")

    @app.exception_handler(ConfirmationTimeout)
    async def handle_confirmation_timeout(
        _request: Request, exc: ConfirmationTimeout
    ) -> JSONResponse:
        """The transaction may still land; the client polls it by hash."""
        logger.warning("Confirmation timeout: tx=%s", exc.transaction_hash)
        return _error_response(
            HTTP_504, "Confirmation pending", exc.transaction_hash
        )

    @app.exception_handler(SubmissionError)
    async def handle_submission_error(
        _request: Request, exc: SubmissionError
    ) -> JSONResponse:
        logger.error("Submission failed: %s", exc.reason)
        return _error_response(HTTP_502, "Ledger unavailable")

    @app.exception_handler(QueryError)
    async def handle_query_error(
        _request: Request, exc: QueryError
    ) -> JSONResponse:
        logger.error("Query %s failed: %s", exc.method, exc.reason)
        return _error_response(HTTP_502, "Ledger query failed")

    @app.exception_handler(BindingError)
    async def handle_binding_error(
        _request: Request, exc: BindingError
    ) -> JSONResponse:
        logger.error("Contract binding error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(LedgerError)
    async def handle_ledger_error(
        _request: Request, exc: LedgerError
    ) -> JSONResponse:
        """Catch-all for unhandled ledger errors."""
        logger.error("Unhandled ledger error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
