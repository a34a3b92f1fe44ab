"""
Tests for the trading application layer (use cases).

Tests use cases with a mocked LedgerTradingManager. No ledger needed.
Each test verifies orchestration and input validation.
"""

from unittest.mock import AsyncMock

import pytest

from cartrade.application.trading.buy_car import BuyCarUseCase
from cartrade.application.trading.dtos import (
    BuyCarCommand,
    GetCarQuery,
    GetTransactionStatusQuery,
    ListCarCommand,
    ListCarsQuery,
    TransferOwnershipCommand,
)
from cartrade.application.trading.get_car import GetCarUseCase
from cartrade.application.trading.get_transaction_status import (
    GetTransactionStatusUseCase,
)
from cartrade.application.trading.list_car import ListCarUseCase
from cartrade.application.trading.list_cars import ListCarsUseCase
from cartrade.application.trading.transfer_ownership import TransferOwnershipUseCase
from cartrade.domain.ledger.entities import (
    BlockReference,
    ConfirmationResult,
    DecodedEvent,
)
from cartrade.domain.ledger.errors import (
    ExecutionReverted,
    InvalidArgumentsError,
    QueryError,
    QueryReverted,
)
from cartrade.domain.ledger.manager import LedgerTradingManager
from cartrade.domain.trading.errors import CarNotFoundError
from conftest import BUYER_ADDRESS, CONTRACT_ADDRESS, OWNER_ADDRESS

TX_HASH = "0x" + "ab" * 32
ZERO = "0x" + "00" * 20


def _confirmation(*events: DecodedEvent) -> ConfirmationResult:
    return ConfirmationResult(
        transaction_hash=TX_HASH,
        block_reference=BlockReference(number=12, hash="0x" + "cd" * 32),
        decoded_events=list(events),
        nonce=3,
        gas_used=50_000,
    )


def _event(name: str, **args) -> DecodedEvent:
    return DecodedEvent(name=name, args=args, address=CONTRACT_ADDRESS)


def _car(car_id: int, owner: str = OWNER_ADDRESS, for_sale: bool = True) -> dict:
    return {
        "id": car_id,
        "model": f"Model {car_id}",
        "price": 100 + car_id,
        "owner": owner,
        "forSale": for_sale,
    }


@pytest.fixture
def manager() -> AsyncMock:
    return AsyncMock(spec=LedgerTradingManager)


class TestListCarUseCase:
    """Tests for the ListCarUseCase."""

    @pytest.mark.asyncio
    async def test_submits_list_car(self, manager) -> None:
        """Use case submits listCar and reads the new id from CarListed."""
        manager.submit_trade.return_value = _confirmation(
            _event("CarListed", carId=4, owner=OWNER_ADDRESS, model="Model T", price=42)
        )

        result = await ListCarUseCase(manager).execute(
            ListCarCommand(model="  Model T ", price=42)
        )

        manager.submit_trade.assert_awaited_once_with("listCar", ["Model T", 42])
        assert result.car_id == 4
        assert result.transaction_hash == TX_HASH
        assert result.block_number == 12
        assert result.nonce == 3
        assert result.events[0].name == "CarListed"

    @pytest.mark.asyncio
    async def test_without_event_car_id_is_unknown(self, manager) -> None:
        """A contract that emits no CarListed still yields a receipt."""
        manager.submit_trade.return_value = _confirmation()

        result = await ListCarUseCase(manager).execute(ListCarCommand(model="A", price=1))

        assert result.car_id is None
        assert result.events == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("model, price", [("   ", 1), ("x" * 121, 1), ("A", 0)])
    async def test_invalid_listing_rejected(self, manager, model, price) -> None:
        """Blank or oversized models and non-positive prices never reach the ledger."""
        with pytest.raises(InvalidArgumentsError):
            await ListCarUseCase(manager).execute(ListCarCommand(model=model, price=price))
        manager.submit_trade.assert_not_awaited()


class TestBuyCarUseCase:
    """Tests for the BuyCarUseCase."""

    @pytest.mark.asyncio
    async def test_sends_price_as_value(self, manager) -> None:
        """The purchase price travels as transaction value."""
        manager.submit_trade.return_value = _confirmation(
            _event("CarSold", carId=2, buyer=OWNER_ADDRESS, price=500)
        )

        result = await BuyCarUseCase(manager).execute(BuyCarCommand(car_id=2, price=500))

        manager.submit_trade.assert_awaited_once_with("buyCar", [2], value=500)
        assert result.car_id == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("car_id, price", [(-1, 10), (1, 0)])
    async def test_invalid_purchase_rejected(self, manager, car_id, price) -> None:
        """Negative ids and non-positive prices are rejected."""
        with pytest.raises(InvalidArgumentsError):
            await BuyCarUseCase(manager).execute(BuyCarCommand(car_id=car_id, price=price))
        manager.submit_trade.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_revert_propagates(self, manager) -> None:
        """A rejected purchase surfaces as ExecutionReverted."""
        manager.submit_trade.side_effect = ExecutionReverted(TX_HASH, "car not for sale")
        with pytest.raises(ExecutionReverted):
            await BuyCarUseCase(manager).execute(BuyCarCommand(car_id=1, price=10))


class TestTransferOwnershipUseCase:
    """Tests for the TransferOwnershipUseCase."""

    @pytest.mark.asyncio
    async def test_checksums_new_owner(self, manager) -> None:
        """The new owner is passed on in checksum form."""
        manager.submit_trade.return_value = _confirmation(
            _event("OwnershipTransferred", carId=1, to=BUYER_ADDRESS)
        )

        result = await TransferOwnershipUseCase(manager).execute(
            TransferOwnershipCommand(car_id=1, new_owner=BUYER_ADDRESS.lower())
        )

        manager.submit_trade.assert_awaited_once_with(
            "transferOwnership", [1, BUYER_ADDRESS]
        )
        assert result.car_id == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("new_owner", ["0xAA", "nobody", ZERO])
    async def test_invalid_new_owner_rejected(self, manager, new_owner) -> None:
        """Malformed and zero addresses are rejected."""
        with pytest.raises(InvalidArgumentsError):
            await TransferOwnershipUseCase(manager).execute(
                TransferOwnershipCommand(car_id=1, new_owner=new_owner)
            )
        manager.submit_trade.assert_not_awaited()


class TestGetCarUseCase:
    """Tests for the GetCarUseCase."""

    @pytest.mark.asyncio
    async def test_returns_car(self, manager) -> None:
        """A named getCar record maps onto CarResult."""
        manager.query.return_value = _car(3)

        result = await GetCarUseCase(manager).execute(GetCarQuery(car_id=3))

        manager.query.assert_awaited_once_with("getCar", [3])
        assert result.car_id == 3
        assert result.model == "Model 3"
        assert result.owner == OWNER_ADDRESS
        assert result.for_sale is True

    @pytest.mark.asyncio
    async def test_positional_record(self, manager) -> None:
        """Unnamed outputs decode positionally."""
        manager.query.return_value = [3, "Model 3", 103, OWNER_ADDRESS, False]
        result = await GetCarUseCase(manager).execute(GetCarQuery(car_id=3))
        assert result.price == 103
        assert result.for_sale is False

    @pytest.mark.asyncio
    async def test_revert_means_not_found(self, manager) -> None:
        """A reverting getCar maps to CarNotFoundError."""
        manager.query.side_effect = QueryReverted("getCar", "no such car")
        with pytest.raises(CarNotFoundError):
            await GetCarUseCase(manager).execute(GetCarQuery(car_id=9))

    @pytest.mark.asyncio
    async def test_zero_owner_means_not_found(self, manager) -> None:
        """An empty storage slot reads back with the zero owner."""
        manager.query.return_value = _car(9, owner=ZERO)
        with pytest.raises(CarNotFoundError):
            await GetCarUseCase(manager).execute(GetCarQuery(car_id=9))

    @pytest.mark.asyncio
    async def test_unexpected_record(self, manager) -> None:
        """A record of the wrong shape is a query failure."""
        manager.query.return_value = 42
        with pytest.raises(QueryError):
            await GetCarUseCase(manager).execute(GetCarQuery(car_id=1))


class TestListCarsUseCase:
    """Tests for the ListCarsUseCase."""

    @staticmethod
    def _catalog(manager: AsyncMock, cars: dict[int, dict], total: int) -> None:
        async def query(method, args=()):
            if method == "getCarCount":
                return total
            car = cars.get(args[0])
            if car is None:
                raise QueryReverted("getCar", "no such car")
            return car

        manager.query.side_effect = query

    @pytest.mark.asyncio
    async def test_reads_page(self, manager) -> None:
        """Only ids inside the page are read."""
        self._catalog(manager, {i: _car(i) for i in range(5)}, total=5)

        result = await ListCarsUseCase(manager).execute(ListCarsQuery(offset=1, limit=2))

        assert result.total == 5
        assert [c.car_id for c in result.cars] == [1, 2]
        assert manager.query.await_count == 3

    @pytest.mark.asyncio
    async def test_skips_missing_and_filters_for_sale(self, manager) -> None:
        """Missing ids are skipped and only_for_sale drops sold cars."""
        cars = {0: _car(0), 1: _car(1, for_sale=False), 3: _car(3)}
        self._catalog(manager, cars, total=4)

        result = await ListCarsUseCase(manager).execute(ListCarsQuery(only_for_sale=True))

        assert [c.car_id for c in result.cars] == [0, 3]

    @pytest.mark.asyncio
    async def test_query_failure_propagates(self, manager) -> None:
        """Ledger failures other than a missing car abort the listing."""
        async def query(method, args=()):
            if method == "getCarCount":
                return 2
            raise QueryError("getCar", "call failed: node down")

        manager.query.side_effect = query
        with pytest.raises(QueryError):
            await ListCarsUseCase(manager).execute(ListCarsQuery())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("offset, limit", [(-1, 10), (0, 0), (0, 101)])
    async def test_invalid_page_rejected(self, manager, offset, limit) -> None:
        """Out-of-range paging is rejected before any query."""
        with pytest.raises(InvalidArgumentsError):
            await ListCarsUseCase(manager).execute(ListCarsQuery(offset=offset, limit=limit))
        manager.query.assert_not_awaited()


class TestGetTransactionStatusUseCase:
    """Tests for the GetTransactionStatusUseCase."""

    @pytest.mark.asyncio
    async def test_pending(self, manager) -> None:
        """No receipt yet means pending."""
        manager.check_transaction.return_value = None

        result = await GetTransactionStatusUseCase(manager).execute(
            GetTransactionStatusQuery(transaction_hash=TX_HASH)
        )

        assert result.status == "pending"
        assert result.receipt is None

    @pytest.mark.asyncio
    async def test_confirmed(self, manager) -> None:
        """A mined transaction carries its receipt."""
        manager.check_transaction.return_value = _confirmation()

        result = await GetTransactionStatusUseCase(manager).execute(
            GetTransactionStatusQuery(transaction_hash=TX_HASH)
        )

        assert result.status == "confirmed"
        assert result.receipt.block_number == 12

    @pytest.mark.asyncio
    async def test_malformed_hash(self, manager) -> None:
        """Hashes must be 32 bytes of hex."""
        with pytest.raises(InvalidArgumentsError):
            await GetTransactionStatusUseCase(manager).execute(
                GetTransactionStatusQuery(transaction_hash="0x1")
            )
        manager.check_transaction.assert_not_awaited()
