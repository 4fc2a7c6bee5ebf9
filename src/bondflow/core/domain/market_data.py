"""
Market Data — ордера, лучшие bid/offer и стакан заявок

OrderBook владеет одним продуктом и двумя стеками ордеров (bid / offer).
Стеки хранятся в порядке поступления (не сортируются по цене) и заменяются
целиком при каждом batch ingestion (replace, не merge).

Агрегаты:
- best_bid_offer() — max bid / min offer, при равенстве побеждает первый
- aggregate_depth() — суммирование количества по уникальной цене
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from bondflow.core.domain.products import Product
from bondflow.core.math.prices import format_price


# =============================================================================
# ENUMS
# =============================================================================


class PricingSide(str, Enum):
    """Сторона котировки"""

    BID = "BID"
    OFFER = "OFFER"


# =============================================================================
# ORDERS
# =============================================================================


class Order(BaseModel):
    """Ордер стакана: цена, количество, сторона."""

    price: Decimal = Field(..., ge=0, description="Цена (fixed-point)")
    quantity: int = Field(..., ge=0, description="Количество (неотрицательное)")
    side: PricingSide = Field(..., description="BID / OFFER")

    model_config = {"frozen": True}


class BidOffer(BaseModel):
    """Пара лучших ордеров (bid, offer)."""

    bid_order: Order
    offer_order: Order

    model_config = {"frozen": True}

    @property
    def spread(self) -> Decimal:
        """Спред: best offer − best bid"""
        return self.offer_order.price - self.bid_order.price


# =============================================================================
# ORDER BOOK
# =============================================================================


class OrderBook(BaseModel):
    """
    Стакан заявок одного продукта.

    Immutable модель (frozen=True). Каждый batch ingestion создаёт новый
    экземпляр, который целиком заменяет предыдущий.
    """

    product: Product
    bid_stack: tuple[Order, ...] = Field(default=(), description="Bid ордера в порядке поступления")
    offer_stack: tuple[Order, ...] = Field(default=(), description="Offer ордера в порядке поступления")

    model_config = {"frozen": True}

    @field_validator("bid_stack")
    @classmethod
    def validate_bid_side(cls, v: tuple[Order, ...]) -> tuple[Order, ...]:
        """Все ордера bid стека должны быть BID"""
        for order in v:
            if order.side != PricingSide.BID:
                raise ValueError(f"bid_stack contains {order.side.value} order")
        return v

    @field_validator("offer_stack")
    @classmethod
    def validate_offer_side(cls, v: tuple[Order, ...]) -> tuple[Order, ...]:
        """Все ордера offer стека должны быть OFFER"""
        for order in v:
            if order.side != PricingSide.OFFER:
                raise ValueError(f"offer_stack contains {order.side.value} order")
        return v

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def best_bid_offer(self) -> BidOffer:
        """
        Лучшие bid и offer.

        O(depth) на вызов, результат не кэшируется.
        max()/min() возвращают первый из равных элементов, что даёт
        tie-break "first encountered".

        Returns:
            BidOffer(max bid, min offer)

        Raises:
            ValueError: Если одна из сторон стакана пуста
        """
        if not self.bid_stack or not self.offer_stack:
            raise ValueError(f"Order book for {self.product_id} has an empty side")

        best_bid = max(self.bid_stack, key=lambda order: order.price)
        best_offer = min(self.offer_stack, key=lambda order: order.price)
        return BidOffer(bid_order=best_bid, offer_order=best_offer)

    def aggregate_depth(self) -> "OrderBook":
        """
        Агрегация глубины: суммирование количества по каждой уникальной цене.

        Порядок групп в результате не специфицирован (группировка по
        значению, а не по позиции).

        Returns:
            Новый OrderBook с агрегированными стеками, стороны сохраняются
        """
        return OrderBook(
            product=self.product,
            bid_stack=_aggregate_stack(self.bid_stack, PricingSide.BID),
            offer_stack=_aggregate_stack(self.offer_stack, PricingSide.OFFER),
        )

    def to_strings(self) -> list[str]:
        """Проекция для sink: product_id, затем (price, quantity, side) каждого уровня."""
        fields = [self.product_id]
        for order in (*self.bid_stack, *self.offer_stack):
            fields.extend([format_price(order.price), str(order.quantity), order.side.value])
        return fields


def _aggregate_stack(stack: tuple[Order, ...], side: PricingSide) -> tuple[Order, ...]:
    totals: dict[Decimal, int] = {}
    for order in stack:
        totals[order.price] = totals.get(order.price, 0) + order.quantity

    return tuple(Order(price=price, quantity=quantity, side=side) for price, quantity in totals.items())
