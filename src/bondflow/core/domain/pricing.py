"""
Pricing — внутренние цены и двусторонние котировки

- Price — mid + bid/offer spread (одна текущая цена на продукт, история
  не хранится)
- PriceStreamOrder — одна сторона котировки с visible/hidden количеством
- PriceStream — двусторонняя котировка (bid + offer) для публикации
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from bondflow.core.domain.market_data import PricingSide
from bondflow.core.domain.products import Product
from bondflow.core.math.prices import format_price


class Price(BaseModel):
    """
    Внутренняя цена продукта.

    Immutable модель (frozen=True), перезаписывается при каждом обновлении.
    """

    product: Product
    mid: Decimal = Field(..., ge=0, description="Mid цена")
    bid_offer_spread: Decimal = Field(
        ..., description="Спред offer − bid вокруг mid (отрицательный для перевёрнутой котировки)"
    )

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def bid(self) -> Decimal:
        return self.mid - self.bid_offer_spread / 2

    @property
    def offer(self) -> Decimal:
        return self.mid + self.bid_offer_spread / 2

    def to_strings(self) -> list[str]:
        return [self.product_id, format_price(self.mid), _format_signed_price(self.bid_offer_spread)]


def _format_signed_price(value: Decimal) -> str:
    """Спред в нотации 32-х со знаком: '-0-002' для offer ниже bid."""
    if value < 0:
        return "-" + format_price(-value)
    return format_price(value)


class PriceStreamOrder(BaseModel):
    """Одна сторона котировки: цена, visible/hidden количество, сторона."""

    price: Decimal = Field(..., ge=0)
    visible_quantity: int = Field(..., ge=0, description="Количество, раскрытое рынку")
    hidden_quantity: int = Field(..., ge=0, description="Скрытый резерв")
    side: PricingSide

    model_config = {"frozen": True}

    def to_strings(self) -> list[str]:
        return [
            format_price(self.price),
            str(self.visible_quantity),
            str(self.hidden_quantity),
            self.side.value,
        ]


class PriceStream(BaseModel):
    """
    Двусторонняя котировка продукта.

    Immutable модель (frozen=True).
    """

    product: Product
    bid_order: PriceStreamOrder
    offer_order: PriceStreamOrder

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def to_strings(self) -> list[str]:
        return [self.product_id, *self.bid_order.to_strings(), *self.offer_order.to_strings()]
