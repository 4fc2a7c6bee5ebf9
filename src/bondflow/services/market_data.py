"""
Market Data Service — стаканы заявок по продуктам

Хранит последний OrderBook на продукт (replace, не merge) и даёт
агрегаты по запросу:
- best_bid_offer(product_id) — лучшие bid/offer (не кэшируется)
- aggregate_depth(product_id) — стек, суммированный по цене
"""

import logging
from typing import Final

from bondflow.core.domain.market_data import BidOffer, OrderBook
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


# Глубина стакана: уровней на каждую сторону
DEFAULT_BOOK_DEPTH: Final[int] = 5


class MarketDataService(ProductKeyedStore[OrderBook]):
    """Market data service для стаканов заявок."""

    def __init__(self, reference_data: ReferenceData, book_depth: int = DEFAULT_BOOK_DEPTH):
        """
        Args:
            reference_data: справочник продуктов
            book_depth: число уровней на сторону (batch ingestion = 2 * book_depth строк)
        """
        if book_depth <= 0:
            raise ValueError(f"book_depth must be positive, got {book_depth}")

        super().__init__(reference_data, default_value=lambda product: OrderBook(product=product))
        self.book_depth = book_depth

    def on_message(self, value: OrderBook) -> None:
        logger.debug(
            "OrderBook %s: %d bids / %d offers",
            value.product_id,
            len(value.bid_stack),
            len(value.offer_stack),
        )
        super().on_message(value)

    def best_bid_offer(self, product_id: str) -> BidOffer:
        """
        Лучшие bid/offer текущего стакана продукта.

        Raises:
            ValueError: Если одна из сторон стакана пуста
            UnknownProductError: Если продукт неизвестен
        """
        return self.get(product_id).best_bid_offer()

    def aggregate_depth(self, product_id: str) -> OrderBook:
        """
        Агрегированный по цене стакан продукта.

        Returns:
            Новый OrderBook; хранимый стакан не меняется
        """
        return self.get(product_id).aggregate_depth()
