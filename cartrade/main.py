"""
Application entry point.

Creates the FastAPI application and wires together:
- The LedgerTradingManager (descriptor + Web3 client + signing identity)
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from cartrade.core.config import Settings, settings
from cartrade.domain.ledger.manager import LedgerTradingManager
from cartrade.domain.ledger.ports import LedgerClient
from cartrade.infrastructure.ledger.descriptor_loader import load_contract_descriptor
from cartrade.infrastructure.ledger.web3_client import Web3LedgerClient
from cartrade.interfaces.health import router as health_router
from cartrade.interfaces.trading.router import router as trading_router
from cartrade.shared.errors.handlers import register_error_handlers
from cartrade.shared.logging import configure_logging
from cartrade.shared.security.headers import SecurityHeadersMiddleware
from cartrade.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


def build_trading_manager(
    config: Settings, ledger_client: LedgerClient
) -> LedgerTradingManager:
    """Bind the configured contract descriptor to the owner account.

    Raises:
        BindingError: If the descriptor or the account settings are invalid.
    """
    descriptor = load_contract_descriptor(
        config.descriptor_directory, config.ethereum_contract, config.ethereum_network
    )
    return LedgerTradingManager(
        ledger_client=ledger_client,
        contract_address=descriptor.address,
        json_interface=descriptor.json_interface,
        owner_address=config.owner_address,
        owner_private_key=config.owner_private_key.get_secret_value(),
        chain_id=config.ethereum_chain_id,
        gas_limit=config.gas_limit,
        confirmation_timeout=config.confirmation_timeout_seconds,
        poll_interval=config.receipt_poll_interval_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: bind the trading manager unless one was injected."""
    ledger_client = None
    if app.state.trading_manager is None:
        ledger_client = Web3LedgerClient(
            settings.ethereum_rpc_url,
            request_timeout=settings.rpc_request_timeout_seconds,
        )
        app.state.trading_manager = build_trading_manager(settings, ledger_client)
        logger.info(
            "Trading manager bound to %s on %s as %s",
            app.state.trading_manager.contract_address,
            settings.ethereum_network,
            app.state.trading_manager.owner_address,
        )

    yield

    if ledger_client is not None:
        await ledger_client.close()
        app.state.trading_manager = None


def create_app(trading_manager: LedgerTradingManager | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Args:
        trading_manager: Pre-built manager. When None, one is bound from
            settings at startup.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.trading_manager = trading_manager

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(trading_router, prefix="/api/v1")

    return app


app = create_app()
