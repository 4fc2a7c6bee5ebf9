"""
Risk Service — PV01 по позициям

На каждое обновление позиции:
- pv01 на единицу берётся из справочника (fail closed для неизвестного продукта)
- сохраняется PV01(product, pv01_per_unit, aggregate_quantity)

Bucketed risk по сектору:
- pv01 = Σ pv01_i * quantity_i по продуктам сектора (последние сохранённые)
- quantity = 1 (сумма уже взвешена количествами)
"""

import logging
from decimal import Decimal

from bondflow.core.domain.position import Position
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.domain.risk import PV01, BucketedSector
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


class RiskService(ProductKeyedStore[PV01]):
    """PV01 риск на продукт."""

    def __init__(self, reference_data: ReferenceData):
        super().__init__(
            reference_data,
            default_value=lambda product: PV01(product=product, pv01=Decimal(0), quantity=0),
        )

    def on_position(self, position: Position) -> None:
        """Listener для PositionService."""
        self.add_position(position)

    def add_position(self, position: Position) -> PV01:
        """
        Пересчёт риска по позиции.

        Args:
            position: обновлённая позиция

        Returns:
            Сохранённый PV01

        Raises:
            UnknownProductError: Если у продукта нет PV01 (состояние не меняется)
        """
        pv01_per_unit = self.reference_data.pv01(position.product_id)
        risk = PV01(product=position.product, pv01=pv01_per_unit, quantity=position.aggregate())
        logger.debug("Risk %s: pv01=%s qty=%d", risk.product_id, risk.pv01, risk.quantity)
        self.on_message(risk)
        return risk

    def bucketed_risk(self, sector: BucketedSector) -> PV01:
        """
        Агрегированный риск сектора.

        Продукт сектора без сохранённого риска даёт нулевой вклад.

        Args:
            sector: сектор

        Returns:
            PV01 сектора с quantity = 1 (не сохраняется)
        """
        total = Decimal(0)
        for product in sector.products:
            total += self.get(product.product_id).risk

        return PV01(product=sector, pv01=total, quantity=1)
