"""Execution Service — принимает исполнения от algo execution и распространяет их дальше."""

import logging

from bondflow.core.domain.execution import ExecutionOrder, Market
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


class ExecutionService(ProductKeyedStore[ExecutionOrder]):
    """
    Последний ExecutionOrder на продукт.

    Listeners: trade booking (и внешние sinks, например историческое хранение).
    """

    def __init__(self, reference_data: ReferenceData, market: Market = Market.BROKERTEC):
        super().__init__(reference_data)
        self.market = market

    def on_algo_execution(self, order: ExecutionOrder) -> None:
        """Listener для AlgoExecutionService."""
        self.execute_order(order)

    def execute_order(self, order: ExecutionOrder) -> None:
        """
        Исполнение ордера на площадке: сохранить и уведомить listeners.

        Args:
            order: ордер на исполнение
        """
        logger.debug("Executing %s on %s via %s", order.order_id, order.product_id, self.market.value)
        self.on_message(order)
