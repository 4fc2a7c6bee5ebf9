"""
Risk — PV01 и секторные корзины

PV01 — чувствительность цены к сдвигу доходности на 1 bp (линейный риск).
Хранится PV01 на единицу и количество; полный риск = pv01 * quantity.

BucketedSector — именованный неизменяемый список продуктов. Чисто
запросная конструкция для агрегирования риска, не хранится в сервисах.
"""

from decimal import Decimal
from typing import Union

from pydantic import BaseModel, Field

from bondflow.core.domain.products import Bond, IRSwap, Product


class BucketedSector(BaseModel):
    """
    Сектор: группа продуктов для агрегированного риска.

    Immutable модель (frozen=True).
    """

    name: str = Field(..., min_length=1, description="Имя сектора (например, 'FrontEnd')")
    products: tuple[Product, ...] = Field(..., min_length=1, description="Продукты сектора")

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        """Сектор идентифицируется по имени"""
        return self.name

    @property
    def product_ids(self) -> list[str]:
        return [product.product_id for product in self.products]


class PV01(BaseModel):
    """
    PV01 риск продукта либо сектора.

    Immutable модель (frozen=True).

    Для продукта: pv01 — значение на единицу из справочника,
    quantity — агрегированная позиция.
    Для сектора: pv01 — сумма pv01 * quantity по продуктам, quantity = 1.
    """

    product: Union[Bond, IRSwap, BucketedSector]
    pv01: Decimal = Field(..., description="PV01 (на единицу либо агрегат сектора)")
    quantity: int = Field(..., description="Количество, к которому относится PV01")

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def risk(self) -> Decimal:
        """
        Полный риск.

        Returns:
            pv01 * quantity
        """
        return self.pv01 * self.quantity

    def to_strings(self) -> list[str]:
        return [self.product_id, str(self.pv01), str(self.quantity)]
