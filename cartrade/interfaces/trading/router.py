"""
FastAPI router for the car trading bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Path, Query, Request, status

from cartrade.application.trading.buy_car import BuyCarUseCase
from cartrade.application.trading.dtos import (
    BuyCarCommand,
    CarResult,
    GetCarQuery,
    GetTransactionStatusQuery,
    ListCarCommand,
    ListCarsQuery,
    TradeReceiptResult,
    TransferOwnershipCommand,
)
from cartrade.application.trading.get_car import GetCarUseCase
from cartrade.application.trading.get_transaction_status import (
    GetTransactionStatusUseCase,
)
from cartrade.application.trading.list_car import ListCarUseCase
from cartrade.application.trading.list_cars import MAX_PAGE_SIZE, ListCarsUseCase
from cartrade.application.trading.transfer_ownership import TransferOwnershipUseCase
from cartrade.core.config import settings
from cartrade.interfaces.trading.dependencies import (
    get_buy_car_use_case,
    get_car_use_case,
    get_list_car_use_case,
    get_list_cars_use_case,
    get_transaction_status_use_case,
    get_transfer_ownership_use_case,
)
from cartrade.interfaces.trading.schemas import (
    TRANSACTION_HASH_PATTERN,
    BuyCarRequest,
    CarCatalogResponse,
    CarResponse,
    ErrorResponse,
    EventItem,
    ListCarRequest,
    TradeReceiptResponse,
    TransactionStatusResponse,
    TransferOwnershipRequest,
)
from cartrade.shared.security.rate_limiting import limiter

router = APIRouter(tags=["cars"])

TRADE_ERRORS = {
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


def _trade_response(result: TradeReceiptResult) -> TradeReceiptResponse:
    return TradeReceiptResponse(
        transaction_hash=result.transaction_hash,
        block_number=result.block_number,
        block_hash=result.block_hash,
        nonce=result.nonce,
        car_id=result.car_id,
        events=[EventItem(name=e.name, args=e.args) for e in result.events],
    )


def _car_response(result: CarResult) -> CarResponse:
    return CarResponse(
        car_id=result.car_id,
        model=result.model,
        price=result.price,
        owner=result.owner,
        for_sale=result.for_sale,
    )


@router.post(
    "/cars",
    response_model=TradeReceiptResponse,
    status_code=status.HTTP_201_CREATED,
    responses=TRADE_ERRORS,
    summary="List a car",
    description="Put a car up for sale on the trading contract.",
)
@limiter.limit(settings.rate_limit_heavy)
async def list_car(
    request: Request,
    body: ListCarRequest,
    use_case: ListCarUseCase = Depends(get_list_car_use_case),
) -> TradeReceiptResponse:
    """List a car and wait for the transaction to confirm."""
    result = await use_case.execute(ListCarCommand(model=body.model, price=body.price))
    return _trade_response(result)


@router.get(
    "/cars",
    response_model=CarCatalogResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Browse cars",
    description="Read a page of the car catalog from the contract.",
)
async def list_cars(
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    only_for_sale: bool = Query(default=False),
    use_case: ListCarsUseCase = Depends(get_list_cars_use_case),
) -> CarCatalogResponse:
    """Return cars with ids in [offset, offset + limit)."""
    result = await use_case.execute(
        ListCarsQuery(offset=offset, limit=limit, only_for_sale=only_for_sale)
    )
    return CarCatalogResponse(
        total=result.total, cars=[_car_response(c) for c in result.cars]
    )


@router.get(
    "/cars/{car_id}",
    response_model=CarResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Get a car",
)
async def get_car(
    car_id: int = Path(..., ge=0),
    use_case: GetCarUseCase = Depends(get_car_use_case),
) -> CarResponse:
    """Return a single car record."""
    return _car_response(await use_case.execute(GetCarQuery(car_id=car_id)))


@router.post(
    "/cars/{car_id}/purchase",
    response_model=TradeReceiptResponse,
    responses=TRADE_ERRORS,
    summary="Buy a car",
    description="Buy a listed car, sending the price as transaction value.",
)
@limiter.limit(settings.rate_limit_heavy)
async def buy_car(
    request: Request,
    body: BuyCarRequest,
    car_id: int = Path(..., ge=0),
    use_case: BuyCarUseCase = Depends(get_buy_car_use_case),
) -> TradeReceiptResponse:
    """Buy a car and wait for the transaction to confirm."""
    result = await use_case.execute(BuyCarCommand(car_id=car_id, price=body.price))
    return _trade_response(result)


@router.post(
    "/cars/{car_id}/transfer",
    response_model=TradeReceiptResponse,
    responses=TRADE_ERRORS,
    summary="Transfer ownership",
    description="Hand a car over to another account.",
)
@limiter.limit(settings.rate_limit_heavy)
async def transfer_ownership(
    request: Request,
    body: TransferOwnershipRequest,
    car_id: int = Path(..., ge=0),
    use_case: TransferOwnershipUseCase = Depends(get_transfer_ownership_use_case),
) -> TradeReceiptResponse:
    """Transfer a car and wait for the transaction to confirm."""
    result = await use_case.execute(
        TransferOwnershipCommand(car_id=car_id, new_owner=body.new_owner)
    )
    return _trade_response(result)


@router.get(
    "/transactions/{transaction_hash}",
    response_model=TransactionStatusResponse,
    responses={409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Transaction status",
    description=(
        "Look up a submitted transaction by hash, e.g. after a 504 "
        "confirmation timeout. Never resubmits."
    ),
)
async def get_transaction_status(
    transaction_hash: str = Path(..., pattern=TRANSACTION_HASH_PATTERN),
    use_case: GetTransactionStatusUseCase = Depends(get_transaction_status_use_case),
) -> TransactionStatusResponse:
    """Return pending/confirmed status for a transaction."""
    result = await use_case.execute(
        GetTransactionStatusQuery(transaction_hash=transaction_hash)
    )
    return TransactionStatusResponse(
        transaction_hash=result.transaction_hash,
        status=result.status,
        receipt=_trade_response(result.receipt) if result.receipt else None,
    )
