"""
Тесты для TradeBookingService / PositionService / RiskService

Проверяемые инварианты:
1. Исполнение → ровно одна сделка: trade_id = order_id, quantity = visible + hidden
2. BID → SELL, OFFER → BUY; books ротируются TRSY1, TRSY2, TRSY3
3. Агрегат позиции не зависит от порядка сделок; разбивка по books
   соответствует порядку поступления
4. Риск: PV01 на единицу из справочника, quantity = агрегат позиции
5. Неизвестный PV01 → UnknownProductError без изменения состояния
6. Bucketed risk: Σ pv01 * quantity, quantity = 1
"""

from datetime import date
from decimal import Decimal
from itertools import permutations

import pytest

from bondflow.core.domain import (
    Bond,
    BucketedSector,
    ExecutionOrder,
    OrderType,
    Position,
    PricingSide,
    ReferenceData,
    Side,
    Trade,
)
from bondflow.core.errors import UnknownProductError
from bondflow.core.math.prices import parse_price
from bondflow.services import PositionService, RiskService, TradeBookingService

US2Y = "91282CLY5"
US3Y = "91282CMB4"


@pytest.fixture
def reference_data():
    return ReferenceData.us_treasuries()


def make_execution(reference_data, order_id, side, visible=1_000_000, hidden=0):
    return ExecutionOrder(
        product=reference_data.product(US2Y),
        side=side,
        order_id=order_id,
        order_type=OrderType.MARKET,
        price=parse_price("99-160"),
        visible_quantity=visible,
        hidden_quantity=hidden,
    )


def make_trade(reference_data, trade_id, quantity, side, book, product_id=US2Y):
    return Trade(
        product=reference_data.product(product_id),
        trade_id=trade_id,
        price=parse_price("99-160"),
        book=book,
        quantity=quantity,
        side=side,
    )


# =============================================================================
# ТЕСТЫ: Booking
# =============================================================================


class TestTradeBooking:
    """Тесты бронирования исполнений."""

    def test_execution_maps_to_trade(self, reference_data):
        booking = TradeBookingService()

        trade = booking.on_execution(make_execution(reference_data, "ORD1", PricingSide.BID, 1_000_000, 500_000))

        assert trade.trade_id == "ORD1"
        assert trade.price == parse_price("99-160")
        assert trade.quantity == 1_500_000
        assert trade.side == Side.SELL
        assert trade.book == "TRSY1"
        assert booking.get("ORD1") == trade

    def test_offer_books_buy(self, reference_data):
        trade = TradeBookingService().on_execution(make_execution(reference_data, "ORD1", PricingSide.OFFER))
        assert trade.side == Side.BUY

    def test_books_rotate(self, reference_data):
        booking = TradeBookingService()

        books = [
            booking.on_execution(make_execution(reference_data, f"ORD{n}", PricingSide.BID)).book for n in range(4)
        ]

        assert books == ["TRSY1", "TRSY2", "TRSY3", "TRSY1"]

    def test_ingested_trades_do_not_advance_rotation(self, reference_data):
        booking = TradeBookingService()
        booking.book_trade(make_trade(reference_data, "T1", 10, Side.BUY, "TRSY3"))

        trade = booking.on_execution(make_execution(reference_data, "ORD1", PricingSide.BID))

        assert trade.book == "TRSY1"
        assert len(booking) == 2

    def test_one_trade_per_execution(self, reference_data):
        booking = TradeBookingService()
        booked = []
        booking.subscribe(booked.append)

        booking.on_execution(make_execution(reference_data, "ORD1", PricingSide.BID))

        assert [trade.trade_id for trade in booked] == ["ORD1"]

    def test_books_required(self):
        with pytest.raises(ValueError):
            TradeBookingService(books=())


# =============================================================================
# ТЕСТЫ: Position
# =============================================================================


class TestPositionService:
    """Тесты позиций."""

    TRADES = [
        ("T1", 100, Side.BUY, "TRSY1"),
        ("T2", 30, Side.SELL, "TRSY2"),
        ("T3", 50, Side.BUY, "TRSY1"),
        ("T4", 20, Side.SELL, "TRSY3"),
    ]

    def test_books_accumulate(self, reference_data):
        service = PositionService(reference_data)
        for trade_id, quantity, side, book in self.TRADES:
            service.add_trade(make_trade(reference_data, trade_id, quantity, side, book))

        position = service.get(US2Y)

        assert position.books == {"TRSY1": 150, "TRSY2": -30, "TRSY3": -20}
        assert list(position.books) == ["TRSY1", "TRSY2", "TRSY3"]
        assert position.aggregate() == 100

    def test_aggregate_independent_of_order(self, reference_data):
        for ordering in permutations(self.TRADES):
            service = PositionService(reference_data)
            for trade_id, quantity, side, book in ordering:
                service.add_trade(make_trade(reference_data, trade_id, quantity, side, book))
            assert service.get(US2Y).aggregate() == 100

    def test_breakdown_follows_arrival_order(self, reference_data):
        service = PositionService(reference_data)
        service.add_trade(make_trade(reference_data, "T1", 5, Side.SELL, "TRSY3"))
        service.add_trade(make_trade(reference_data, "T2", 5, Side.BUY, "TRSY1"))

        assert list(service.get(US2Y).books) == ["TRSY3", "TRSY1"]

    def test_products_are_independent(self, reference_data):
        service = PositionService(reference_data)
        service.add_trade(make_trade(reference_data, "T1", 5, Side.BUY, "TRSY1"))
        service.add_trade(make_trade(reference_data, "T2", 7, Side.BUY, "TRSY1", product_id=US3Y))

        assert service.get(US2Y).aggregate() == 5
        assert service.get(US3Y).aggregate() == 7

    def test_listeners_receive_new_position(self, reference_data):
        service = PositionService(reference_data)
        received = []
        service.subscribe(received.append)

        service.on_trade(make_trade(reference_data, "T1", 5, Side.BUY, "TRSY1"))

        assert received == [service.get(US2Y)]

    def test_listener_cannot_change_stored_books(self, reference_data):
        service = PositionService(reference_data)

        def tamper(position):
            with pytest.raises(TypeError):
                position.books["TRSY1"] = 999

        service.subscribe(tamper)
        service.add_trade(make_trade(reference_data, "T1", 5, Side.BUY, "TRSY1"))

        assert service.get(US2Y).books == {"TRSY1": 5}

        service.add_trade(make_trade(reference_data, "T2", 3, Side.BUY, "TRSY1"))
        assert service.get(US2Y).books == {"TRSY1": 8}


# =============================================================================
# ТЕСТЫ: Risk
# =============================================================================


class TestRiskService:
    """Тесты PV01 риска."""

    def test_add_position(self, reference_data):
        risk = RiskService(reference_data)
        position = Position(product=reference_data.product(US2Y), books={"TRSY1": 1000, "TRSY2": -200})

        pv01 = risk.add_position(position)

        assert pv01.pv01 == Decimal("0.1854")
        assert pv01.quantity == 800
        assert risk.get(US2Y) == pv01

    def test_unknown_pv01_does_not_mutate(self, reference_data):
        bond = Bond(product_id="NOPV01", ticker="X", coupon=Decimal("0.01"), maturity_date=date(2030, 1, 1))
        reference_data.register(bond)
        risk = RiskService(reference_data)
        risk.add_position(Position(product=reference_data.product(US2Y), books={"TRSY1": 10}))
        received = []
        risk.subscribe(received.append)

        with pytest.raises(UnknownProductError):
            risk.add_position(Position(product=bond, books={"TRSY1": 10}))

        assert risk.keys() == [US2Y]
        assert received == []

    def test_bucketed_risk(self, reference_data):
        risk = RiskService(reference_data)
        risk.add_position(Position(product=reference_data.product(US2Y), books={"TRSY1": 1000}))
        risk.add_position(Position(product=reference_data.product(US3Y), books={"TRSY1": -500}))
        sector = BucketedSector(
            name="FrontEnd",
            products=(
                reference_data.product(US2Y),
                reference_data.product(US3Y),
                reference_data.product("91282CMA6"),
            ),
        )

        bucketed = risk.bucketed_risk(sector)

        assert bucketed.pv01 == Decimal("0.1854") * 1000 + Decimal("0.2738") * -500
        assert bucketed.quantity == 1
        assert bucketed.product_id == "FrontEnd"
        assert "FrontEnd" not in risk

    def test_position_chain_feeds_risk(self, reference_data):
        positions = PositionService(reference_data)
        risk = RiskService(reference_data)
        positions.subscribe(risk.on_position)

        positions.add_trade(make_trade(reference_data, "T1", 300, Side.SELL, "TRSY2"))

        assert risk.get(US2Y).quantity == -300
        assert risk.get(US2Y).risk == Decimal("0.1854") * -300
