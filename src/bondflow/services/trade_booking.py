"""
Trade Booking Service — бронирование сделок, ключ trade_id

Сделки приходят двумя путями:
- ingestion из файла сделок (book_trade)
- исполнения от ExecutionService (on_execution → book_trade)

Правила бронирования исполнения:
- trade_id = order_id исполнения
- quantity = visible + hidden
- сторона BID → SELL (деск отдаёт бид), OFFER → BUY
- book ротируется по TRSY1, TRSY2, TRSY3 по счётчику бронирований
"""

import logging
from typing import Final, Optional

from bondflow.core.domain.execution import ExecutionOrder
from bondflow.core.domain.market_data import PricingSide
from bondflow.core.domain.trade import Side, Trade
from bondflow.core.service import KeyedStore

logger = logging.getLogger(__name__)


DEFAULT_BOOKS: Final[tuple[str, ...]] = ("TRSY1", "TRSY2", "TRSY3")

_SIDE_FOR_EXECUTION: Final[dict[PricingSide, Side]] = {
    PricingSide.BID: Side.SELL,
    PricingSide.OFFER: Side.BUY,
}


class TradeBookingService(KeyedStore[str, Trade]):
    """Сделки по trade_id. Listeners: position service."""

    def __init__(self, books: tuple[str, ...] = DEFAULT_BOOKS):
        """
        Args:
            books: ротация books для сделок из исполнений
        """
        if not books:
            raise ValueError("books cannot be empty")

        super().__init__(key_func=lambda trade: trade.trade_id)
        self.books = tuple(books)
        self._booked_executions = 0

    def book_trade(self, trade: Trade) -> None:
        """Сохранить сделку и уведомить listeners."""
        logger.debug(
            "Booking %s: %s %d %s in %s", trade.trade_id, trade.side.value, trade.quantity, trade.product_id, trade.book
        )
        self.on_message(trade)

    def on_execution(self, order: ExecutionOrder) -> Trade:
        """
        Listener для ExecutionService: конвертация исполнения в сделку.

        Returns:
            Забронированная сделка
        """
        trade = self.trade_from_execution(order)
        self.book_trade(trade)
        return trade

    def trade_from_execution(self, order: ExecutionOrder, book: Optional[str] = None) -> Trade:
        """
        Сделка из исполнения.

        Args:
            order: исполненный ордер
            book: явный book (None — следующий по ротации, счётчик сдвигается)

        Returns:
            Trade (ещё не забронированная)
        """
        if book is None:
            book = self.books[self._booked_executions % len(self.books)]
            self._booked_executions += 1

        return Trade(
            product=order.product,
            trade_id=order.order_id,
            price=order.price,
            book=book,
            quantity=order.total_quantity,
            side=_SIDE_FOR_EXECUTION[order.side],
        )
