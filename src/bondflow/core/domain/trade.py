"""
Trade — Модель сделки, отнесённой на book

Immutable Pydantic модель. Создаётся trade booking сервисом из
ExecutionOrder либо приходит из внешнего потока сделок.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from bondflow.core.domain.products import Product
from bondflow.core.math.prices import format_price


# =============================================================================
# ENUMS
# =============================================================================


class Side(str, Enum):
    """Направление сделки"""

    BUY = "BUY"
    SELL = "SELL"


# =============================================================================
# TRADE MODEL
# =============================================================================


class Trade(BaseModel):
    """
    Модель сделки.

    Immutable модель (frozen=True).
    """

    product: Product
    trade_id: str = Field(..., min_length=1, description="Уникальный идентификатор сделки")
    price: Decimal = Field(..., ge=0, description="Цена сделки")
    book: str = Field(..., min_length=1, description="Book, на который отнесена сделка")
    quantity: int = Field(..., ge=0, description="Количество (всегда неотрицательное)")
    side: Side = Field(..., description="BUY / SELL")

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def signed_quantity(self) -> int:
        """
        Количество со знаком.

        Returns:
            +quantity для BUY, -quantity для SELL
        """
        return self.quantity if self.side == Side.BUY else -self.quantity

    def to_strings(self) -> list[str]:
        return [
            self.product_id,
            self.trade_id,
            format_price(self.price),
            self.book,
            str(self.quantity),
            self.side.value,
        ]
