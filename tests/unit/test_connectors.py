"""
Тесты для ingress connectors

Проверяемые инварианты:
1. Prices: mid = (bid + offer) / 2, spread = offer − bid
2. Market data: 2 * book_depth строк → один OrderBook (replace)
3. Trades и inquiries разбираются позиционно, inquiry price = 0
4. Пустые строки пропускаются, поля обрезаются
5. Некорректная строка → MalformedRecordError с номером строки,
   уже отправленные записи остаются
6. Неизвестный продукт → UnknownProductError на первой строке записи
7. LineConnector абстрактный: без subscribe экземпляр не создаётся
"""

import pytest

from bondflow.core.domain import InquiryState, PricingSide, ReferenceData, Side
from bondflow.core.errors import MalformedRecordError, UnknownProductError
from bondflow.core.math.prices import parse_price
from bondflow.ingress import InquiryConnector, LineConnector, MarketDataConnector, PriceConnector, TradeConnector
from bondflow.services import InquiryService, MarketDataService, PricingService, TradeBookingService

US2Y = "91282CLY5"
US3Y = "91282CMB4"


@pytest.fixture
def reference_data():
    return ReferenceData.us_treasuries()


# =============================================================================
# ТЕСТЫ: Prices
# =============================================================================


class TestPriceConnector:
    """Тесты разбора цен."""

    @pytest.fixture
    def pricing(self, reference_data):
        return PricingService(reference_data)

    @pytest.fixture
    def connector(self, pricing, reference_data):
        return PriceConnector(pricing, reference_data)

    def test_mid_and_spread(self, connector, pricing):
        count = connector.subscribe(["91282CLY5,99-160,99-162\n"])

        price = pricing.get(US2Y)
        assert count == 1
        assert price.mid == parse_price("99-161")
        assert price.bid_offer_spread == parse_price("0-002")

    def test_blank_lines_and_whitespace(self, connector, pricing):
        count = connector.subscribe(["\n", " 91282CLY5 , 99-160 , 99-16+ ", "   ", "91282CMB4,100-000,100-002"])

        assert count == 2
        assert pricing.get(US2Y).bid_offer_spread == parse_price("0-00+")
        assert US3Y in pricing

    def test_malformed_price_stops_at_line(self, connector, pricing):
        lines = ["91282CLY5,99-160,99-162", "91282CMB4,99-164,99-170", "91282CLW9,99-160,99-162"]

        with pytest.raises(MalformedRecordError) as exc_info:
            connector.subscribe(lines)

        error = exc_info.value
        assert error.source == "prices"
        assert error.line_no == 2
        assert error.line == "91282CMB4,99-164,99-170"
        assert pricing.keys() == [US2Y]

    def test_inverted_quote_has_negative_spread(self, connector, pricing):
        count = connector.subscribe(["91282CLY5,99-162,99-160"])

        price = pricing.get(US2Y)
        assert count == 1
        assert price.mid == parse_price("99-161")
        assert price.bid_offer_spread == -parse_price("0-002")
        assert price.to_strings() == [US2Y, "99-161", "-0-002"]

    def test_wrong_field_count(self, connector):
        with pytest.raises(MalformedRecordError) as exc_info:
            connector.subscribe(["91282CLY5,99-160"])
        assert "expected 3 fields" in exc_info.value.reason

    def test_unknown_product(self, connector):
        with pytest.raises(UnknownProductError):
            connector.subscribe(["UNKNOWN,99-160,99-162"])

    def test_subscribe_path(self, connector, pricing, tmp_path):
        path = tmp_path / "prices.txt"
        path.write_text("91282CLY5,99-160,99-162\n91282CMB4,100-000,100-002\n", encoding="utf-8")

        assert connector.subscribe_path(path) == 2
        assert pricing.keys() == [US2Y, US3Y]


# =============================================================================
# ТЕСТЫ: Trades
# =============================================================================


class TestTradeConnector:
    """Тесты разбора сделок."""

    @pytest.fixture
    def booking(self):
        return TradeBookingService()

    @pytest.fixture
    def connector(self, booking, reference_data):
        return TradeConnector(booking, reference_data)

    def test_trade_fields(self, connector, booking):
        connector.subscribe(["91282CLY5,T1,99-16+,TRSY2,1000000,BUY"])

        trade = booking.get("T1")
        assert trade.product_id == US2Y
        assert trade.price == parse_price("99-16+")
        assert trade.book == "TRSY2"
        assert trade.quantity == 1_000_000
        assert trade.side == Side.BUY

    @pytest.mark.parametrize(
        "line",
        [
            "91282CLY5,T1,99-160,TRSY1,abc,BUY",
            "91282CLY5,T1,99-160,TRSY1,-5,BUY",
            "91282CLY5,T1,99-160,TRSY1,100,HOLD",
            "91282CLY5,T1,99.5,TRSY1,100,BUY",
            "91282CLY5,,99-160,TRSY1,100,BUY",
            "91282CLY5,T1,99-160,TRSY1,100,BUY,EXTRA",
        ],
    )
    def test_malformed(self, connector, booking, line):
        with pytest.raises(MalformedRecordError) as exc_info:
            connector.subscribe(["91282CLY5,T0,99-160,TRSY1,1,SELL", line])

        assert exc_info.value.line_no == 2
        assert booking.keys() == ["T0"]


# =============================================================================
# ТЕСТЫ: Market data
# =============================================================================


def depth_lines(product_id, bids=("99-160", "99-150"), offers=("99-162", "99-170")):
    lines = [f"{product_id},{price},{(n + 1) * 1000000},BID" for n, price in enumerate(bids)]
    lines += [f"{product_id},{price},{(n + 1) * 1000000},OFFER" for n, price in enumerate(offers)]
    return lines


class TestMarketDataConnector:
    """Тесты разбора стаканов (book_depth = 2 → 4 строки на стакан)."""

    @pytest.fixture
    def market_data(self, reference_data):
        return MarketDataService(reference_data, book_depth=2)

    @pytest.fixture
    def connector(self, market_data, reference_data):
        return MarketDataConnector(market_data, reference_data)

    def test_batch_forms_order_book(self, connector, market_data):
        assert connector.batch_size == 4

        count = connector.subscribe(depth_lines(US2Y))

        book = market_data.get(US2Y)
        assert count == 1
        assert [o.price for o in book.bid_stack] == [parse_price("99-160"), parse_price("99-150")]
        assert [o.quantity for o in book.offer_stack] == [1_000_000, 2_000_000]
        assert all(o.side == PricingSide.OFFER for o in book.offer_stack)

    def test_each_batch_replaces_book(self, connector, market_data):
        received = []
        market_data.subscribe(received.append)

        count = connector.subscribe(
            depth_lines(US2Y) + depth_lines(US3Y) + depth_lines(US2Y, bids=("99-100", "99-090"))
        )

        assert count == 3
        assert len(received) == 3
        assert market_data.best_bid_offer(US2Y).bid_order.price == parse_price("99-100")

    def test_mixed_products_in_batch(self, connector, market_data):
        lines = depth_lines(US2Y)[:2] + depth_lines(US3Y)[2:]

        with pytest.raises(MalformedRecordError) as exc_info:
            connector.subscribe(lines)

        assert exc_info.value.line_no == 3
        assert len(market_data) == 0

    def test_incomplete_trailing_batch(self, connector, market_data):
        lines = depth_lines(US2Y) + depth_lines(US3Y)[:3]

        with pytest.raises(MalformedRecordError) as exc_info:
            connector.subscribe(lines)

        assert "incomplete order book" in exc_info.value.reason
        assert market_data.keys() == [US2Y]

    def test_unknown_product_at_batch_start(self, connector, market_data):
        with pytest.raises(UnknownProductError):
            connector.subscribe(["UNKNOWN,99-160,1000000,BID"])
        assert len(market_data) == 0

    def test_unknown_product_opens_later_batch(self, connector, market_data):
        lines = depth_lines(US2Y) + depth_lines("UNKNOWN")

        with pytest.raises(UnknownProductError):
            connector.subscribe(lines)
        assert market_data.keys() == [US2Y]

    def test_bad_side(self, connector):
        lines = depth_lines(US2Y)
        lines[1] = f"{US2Y},99-150,1000000,SELL"

        with pytest.raises(MalformedRecordError) as exc_info:
            connector.subscribe(lines)
        assert exc_info.value.line_no == 2


# =============================================================================
# ТЕСТЫ: Inquiries
# =============================================================================


class TestInquiryConnector:
    """Тесты разбора inquiries."""

    def test_inquiry_fields(self, reference_data):
        service = InquiryService()
        connector = InquiryConnector(service, reference_data)

        count = connector.subscribe(["INQ1,91282CLY5,SELL,2000000,RECEIVED", "INQ2,91282CMB4,BUY,1000000,RECEIVED"])

        inquiry = service.get("INQ1")
        assert count == 2
        assert inquiry.product_id == US2Y
        assert inquiry.side == Side.SELL
        assert inquiry.quantity == 2_000_000
        assert inquiry.price == 0
        assert inquiry.state == InquiryState.RECEIVED

    def test_unknown_state(self, reference_data):
        connector = InquiryConnector(InquiryService(), reference_data)
        with pytest.raises(MalformedRecordError):
            connector.subscribe(["INQ1,91282CLY5,SELL,2000000,PENDING"])


# =============================================================================
# ТЕСТЫ: Base connector
# =============================================================================


class TestLineConnector:
    """Тесты базового коннектора."""

    def test_base_is_abstract(self, reference_data):
        with pytest.raises(TypeError):
            LineConnector(reference_data)

    def test_subclass_without_subscribe(self, reference_data):
        class Partial(LineConnector):
            source = "partial"

        with pytest.raises(TypeError):
            Partial(reference_data)
