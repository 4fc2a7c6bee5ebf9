"""
Algo Execution Service — решение о пересечении спреда

На каждое обновление стакана:
1. spread = best offer − best bid
2. spread <= execution_threshold → синтетическое исполнение:
   - чётный счётчик исполнений → BID сторона (best bid price/quantity)
   - нечётный → OFFER сторона (best offer price/quantity)
   - новый уникальный order_id, MARKET, hidden = 0, без parent/child
3. spread > threshold → ничего не создаётся и не сохраняется

Счётчик глобальный на экземпляр сервиса (не на продукт) и растёт только
при создании исполнения.
"""

import logging
import secrets
import string
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Final, Optional

from bondflow.core.domain.execution import ExecutionOrder, OrderType
from bondflow.core.domain.market_data import OrderBook, PricingSide
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Порог пересечения: 1/128 ценовой единицы
DEFAULT_EXECUTION_THRESHOLD: Final[Decimal] = Decimal(1) / Decimal(128)

ORDER_ID_LENGTH: Final[int] = 12
_ORDER_ID_ALPHABET: Final[str] = string.digits + string.ascii_uppercase


def generate_order_id(length: int = ORDER_ID_LENGTH) -> str:
    """
    Новый идентификатор ордера из [0-9A-Z].

    Args:
        length: длина идентификатора

    Returns:
        Случайная строка длины length
    """
    return "".join(secrets.choice(_ORDER_ID_ALPHABET) for _ in range(length))


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ExecutionConfig:
    """Конфигурация algo execution."""

    # Максимальный спред, при котором стакан считается пересекаемым
    execution_threshold: Decimal = DEFAULT_EXECUTION_THRESHOLD


# =============================================================================
# SERVICE
# =============================================================================


class AlgoExecutionService(ProductKeyedStore[ExecutionOrder]):
    """Algo execution: OrderBook → ExecutionOrder (по одному на продукт, latest wins)."""

    def __init__(
        self,
        reference_data: ReferenceData,
        config: Optional[ExecutionConfig] = None,
        order_id_factory: Callable[[], str] = generate_order_id,
    ):
        """
        Args:
            reference_data: справочник продуктов
            config: конфигурация (опционально, используется default)
            order_id_factory: генератор уникальных order_id
        """
        super().__init__(reference_data)
        self.config = config or ExecutionConfig()
        self._order_id_factory = order_id_factory
        self._execution_count = 0

    @property
    def execution_count(self) -> int:
        return self._execution_count

    def on_order_book(self, order_book: OrderBook) -> None:
        """Listener для MarketDataService."""
        self.execute_order(order_book)

    def execute_order(self, order_book: OrderBook) -> Optional[ExecutionOrder]:
        """
        Попытка исполнения по стакану.

        Args:
            order_book: текущий стакан продукта

        Returns:
            Созданный ExecutionOrder либо None, если спред шире порога
            или одна из сторон стакана пуста
        """
        if not order_book.bid_stack or not order_book.offer_stack:
            logger.warning("Skipping %s: order book has an empty side", order_book.product_id)
            return None

        best = order_book.best_bid_offer()
        spread = best.spread
        if spread > self.config.execution_threshold:
            logger.debug("No execution on %s: spread %s above threshold", order_book.product_id, spread)
            return None

        if self._execution_count % 2 == 0:
            side, order = PricingSide.BID, best.bid_order
        else:
            side, order = PricingSide.OFFER, best.offer_order
        self._execution_count += 1

        execution = ExecutionOrder(
            product=order_book.product,
            side=side,
            order_id=self._order_id_factory(),
            order_type=OrderType.MARKET,
            price=order.price,
            visible_quantity=order.quantity,
            hidden_quantity=0,
            parent_order_id="",
            is_child_order=False,
        )
        logger.debug(
            "Execution %s on %s: %s %d @ %s",
            execution.order_id,
            execution.product_id,
            side.value,
            order.quantity,
            order.price,
        )

        self.set(execution.product_id, execution)
        self.notify(execution)
        return execution
