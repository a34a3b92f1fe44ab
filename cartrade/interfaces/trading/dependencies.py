"""
Dependency injection for the car trading bounded context.

Provides FastAPI dependency functions that wire the single
LedgerTradingManager built at startup into use cases via
constructor injection.
"""

from fastapi import Depends, Request

from cartrade.application.trading.buy_car import BuyCarUseCase
from cartrade.application.trading.get_car import GetCarUseCase
from cartrade.application.trading.get_transaction_status import (
    GetTransactionStatusUseCase,
)
from cartrade.application.trading.list_car import ListCarUseCase
from cartrade.application.trading.list_cars import ListCarsUseCase
from cartrade.application.trading.transfer_ownership import TransferOwnershipUseCase
from cartrade.domain.ledger.manager import LedgerTradingManager


def get_trading_manager(request: Request) -> LedgerTradingManager:
    """Return the manager bound at application startup."""
    return request.app.state.trading_manager


def get_list_car_use_case(
    manager: LedgerTradingManager = Depends(get_trading_manager),
) -> ListCarUseCase:
    return ListCarUseCase(manager=manager)


def get_buy_car_use_case(
    manager: LedgerTradingManager = Depends(get_trading_manager),
) -> BuyCarUseCase:
    return BuyCarUseCase(manager=manager)


def get_transfer_ownership_use_case(
    manager: LedgerTradingManager = Depends(get_trading_manager),
) -> TransferOwnershipUseCase:
    return TransferOwnershipUseCase(manager=manager)


def get_car_use_case(
    manager: LedgerTradingManager = Depends(get_trading_manager),
) -> GetCarUseCase:
    return GetCarUseCase(manager=manager)


def get_list_cars_use_case(
    manager: LedgerTradingManager = Depends(get_trading_manager),
) -> ListCarsUseCase:
    return ListCarsUseCase(manager=manager)


def get_transaction_status_use_case(
    manager: LedgerTradingManager = Depends(get_trading_manager),
) -> GetTransactionStatusUseCase:
    return GetTransactionStatusUseCase(manager=manager)
