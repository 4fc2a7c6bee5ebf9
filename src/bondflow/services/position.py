"""Position Service — позиции по books, обновляемые каждой сделкой."""

import logging

from bondflow.core.domain.position import Position
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.domain.trade import Trade
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


class PositionService(ProductKeyedStore[Position]):
    """
    Позиция на продукт.

    Новая позиция = предыдущая (все books скопированы) + signed quantity
    сделки в её book. Неизвестный продукт — UnknownProductError, состояние
    не меняется.

    Listeners: risk service.
    """

    def __init__(self, reference_data: ReferenceData):
        super().__init__(reference_data, default_value=lambda product: Position(product=product))

    def on_trade(self, trade: Trade) -> None:
        """Listener для TradeBookingService."""
        self.add_trade(trade)

    def add_trade(self, trade: Trade) -> Position:
        """
        Применение сделки к позиции.

        Args:
            trade: забронированная сделка

        Returns:
            Новая позиция (сохранена и разослана listeners)
        """
        position = self.get(trade.product_id).with_trade(trade)
        logger.debug(
            "Position %s: %s %+d, aggregate %d",
            position.product_id,
            trade.book,
            trade.signed_quantity,
            position.aggregate(),
        )
        self.on_message(position)
        return position
