"""
Ingress connectors — строковые записи → доменные модели → on_message сервиса

Формат: позиционный CSV, поля обрезаются от пробелов, пустые строки
пропускаются.

- Prices:      productId,bid,offer
- Trades:      productId,tradeId,price,book,quantity,side
- Market data: productId,price,quantity,side   (2 * book_depth строк = 1 стакан)
- Inquiries:   inquiryId,productId,side,quantity,state

Ошибки:
- неверное число полей, число, цена или enum → MalformedRecordError
  (с номером строки); обработка останавливается на этой строке, уже
  отправленные записи остаются отправленными
- неизвестный продукт → UnknownProductError
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Callable, ClassVar, Iterable, Iterator, NoReturn, Optional, TypeVar, Union

from pydantic import ValidationError

from bondflow.core.domain.inquiry import Inquiry, InquiryState
from bondflow.core.domain.market_data import Order, OrderBook, PricingSide
from bondflow.core.domain.pricing import Price
from bondflow.core.domain.products import Product
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.domain.trade import Side, Trade
from bondflow.core.errors import MalformedRecordError
from bondflow.core.math.prices import parse_price
from bondflow.services.inquiry import InquiryService
from bondflow.services.market_data import MarketDataService
from bondflow.services.pricing import PricingService
from bondflow.services.trade_booking import TradeBookingService

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# BASE
# =============================================================================


class LineConnector(ABC):
    """
    Базовый построчный connector.

    Подклассы задают source, число полей и разбор полей одной строки.
    """

    source: ClassVar[str] = "records"
    field_count: ClassVar[int] = 0

    def __init__(self, reference_data: ReferenceData):
        self.reference_data = reference_data

    @abstractmethod
    def subscribe(self, lines: Iterable[str]) -> int:
        """
        Чтение записей и отправка их в сервис.

        Args:
            lines: строки записей (например, открытый файл)

        Returns:
            Число отправленных записей

        Raises:
            MalformedRecordError: Если строка не разбирается
            UnknownProductError: Если продукт неизвестен
        """

    def subscribe_path(self, path: Union[str, Path]) -> int:
        """Чтение записей из файла."""
        with open(path, encoding="utf-8") as stream:
            return self.subscribe(stream)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _records(self, lines: Iterable[str]) -> Iterator[tuple[int, str, list[str]]]:
        """(line_no, line, fields) для каждой непустой строки; число полей проверяется."""
        for line_no, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue

            fields = [field.strip() for field in line.split(",")]
            if len(fields) != self.field_count:
                self._fail(
                    line_no,
                    line,
                    f"expected {self.field_count} fields, got {len(fields)}",
                )
            yield line_no, line, fields

    def _convert(self, line_no: int, line: str, build: Callable[[], T]) -> T:
        """Вызов build с переводом ошибок значений в MalformedRecordError."""
        try:
            return build()
        except ValidationError as exc:
            self._fail(line_no, line, f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}", exc)
        except ValueError as exc:
            self._fail(line_no, line, str(exc), exc)

    def _fail(self, line_no: int, line: str, reason: str, cause: Optional[Exception] = None) -> NoReturn:
        error = MalformedRecordError(self.source, line_no, line, reason)
        logger.error("Malformed record: %s", error)
        raise error from cause

    def _log_summary(self, count: int) -> None:
        logger.info("%s: %d record(s) pushed", self.source, count)


# =============================================================================
# PRICES
# =============================================================================


class PriceConnector(LineConnector):
    """productId,bid,offer → Price(mid, spread)."""

    source = "prices"
    field_count = 3

    def __init__(self, service: PricingService, reference_data: ReferenceData):
        super().__init__(reference_data)
        self.service = service

    def subscribe(self, lines: Iterable[str]) -> int:
        count = 0
        for line_no, line, (product_id, bid_text, offer_text) in self._records(lines):
            product = self.reference_data.product(product_id)

            def build() -> Price:
                bid = parse_price(bid_text)
                offer = parse_price(offer_text)
                return Price(product=product, mid=(bid + offer) / 2, bid_offer_spread=offer - bid)

            self.service.on_message(self._convert(line_no, line, build))
            count += 1

        self._log_summary(count)
        return count


# =============================================================================
# TRADES
# =============================================================================


class TradeConnector(LineConnector):
    """productId,tradeId,price,book,quantity,side → Trade."""

    source = "trades"
    field_count = 6

    def __init__(self, service: TradeBookingService, reference_data: ReferenceData):
        super().__init__(reference_data)
        self.service = service

    def subscribe(self, lines: Iterable[str]) -> int:
        count = 0
        for line_no, line, fields in self._records(lines):
            product_id, trade_id, price_text, book, quantity_text, side_text = fields
            product = self.reference_data.product(product_id)

            def build() -> Trade:
                return Trade(
                    product=product,
                    trade_id=trade_id,
                    price=parse_price(price_text),
                    book=book,
                    quantity=int(quantity_text),
                    side=Side(side_text),
                )

            self.service.book_trade(self._convert(line_no, line, build))
            count += 1

        self._log_summary(count)
        return count


# =============================================================================
# MARKET DATA
# =============================================================================


class MarketDataConnector(LineConnector):
    """
    productId,price,quantity,side → OrderBook.

    Каждые 2 * book_depth строк образуют один стакан одного продукта.
    """

    source = "market_data"
    field_count = 4

    def __init__(self, service: MarketDataService, reference_data: ReferenceData):
        super().__init__(reference_data)
        self.service = service

    @property
    def batch_size(self) -> int:
        return 2 * self.service.book_depth

    def subscribe(self, lines: Iterable[str]) -> int:
        count = 0
        batch: list[Order] = []
        batch_product: Optional[Product] = None
        last_line_no, last_line = 0, ""

        for line_no, line, (product_id, price_text, quantity_text, side_text) in self._records(lines):
            last_line_no, last_line = line_no, line
            if not batch:
                batch_product = self.reference_data.product(product_id)
            elif product_id != batch_product.product_id:
                self._fail(
                    line_no,
                    line,
                    f"product {product_id} inside order book batch of {batch_product.product_id}",
                )

            def build() -> Order:
                return Order(
                    price=parse_price(price_text),
                    quantity=int(quantity_text),
                    side=PricingSide(side_text),
                )

            batch.append(self._convert(line_no, line, build))

            if len(batch) == self.batch_size:
                self.service.on_message(self._order_book(batch_product, batch))
                count += 1
                batch = []

        if batch:
            self._fail(
                last_line_no,
                last_line,
                f"incomplete order book: {len(batch)} of {self.batch_size} lines",
            )

        self._log_summary(count)
        return count

    @staticmethod
    def _order_book(product: Product, orders: list[Order]) -> OrderBook:
        return OrderBook(
            product=product,
            bid_stack=tuple(order for order in orders if order.side == PricingSide.BID),
            offer_stack=tuple(order for order in orders if order.side == PricingSide.OFFER),
        )


# =============================================================================
# INQUIRIES
# =============================================================================


class InquiryConnector(LineConnector):
    """inquiryId,productId,side,quantity,state → Inquiry (price = 0)."""

    source = "inquiries"
    field_count = 5

    def __init__(self, service: InquiryService, reference_data: ReferenceData):
        super().__init__(reference_data)
        self.service = service

    def subscribe(self, lines: Iterable[str]) -> int:
        count = 0
        for line_no, line, fields in self._records(lines):
            inquiry_id, product_id, side_text, quantity_text, state_text = fields
            product = self.reference_data.product(product_id)

            def build() -> Inquiry:
                return Inquiry(
                    inquiry_id=inquiry_id,
                    product=product,
                    side=Side(side_text),
                    quantity=int(quantity_text),
                    price=Decimal(0),
                    state=InquiryState(state_text),
                )

            self.service.on_message(self._convert(line_no, line, build))
            count += 1

        self._log_summary(count)
        return count
