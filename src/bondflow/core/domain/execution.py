"""
Execution — ордера на исполнение

ExecutionOrder — синтетическое исполнение, создаваемое algo execution при
пересечении спреда. Одна текущая запись на продукт (latest wins), история
ордеров и cancel-семантика не поддерживаются.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from bondflow.core.domain.market_data import PricingSide
from bondflow.core.domain.products import Product
from bondflow.core.math.prices import format_price


# =============================================================================
# ENUMS
# =============================================================================


class OrderType(str, Enum):
    """Тип ордера"""

    FOK = "FOK"
    IOC = "IOC"
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"


class Market(str, Enum):
    """Площадка исполнения"""

    BROKERTEC = "BROKERTEC"
    ESPEED = "ESPEED"
    CME = "CME"


# =============================================================================
# EXECUTION ORDER
# =============================================================================


class ExecutionOrder(BaseModel):
    """
    Ордер на исполнение.

    Immutable модель (frozen=True).
    """

    product: Product
    side: PricingSide = Field(..., description="Сторона, которую забирает исполнение")
    order_id: str = Field(..., min_length=1, description="Уникальный идентификатор ордера")
    order_type: OrderType = Field(..., description="Тип ордера")
    price: Decimal = Field(..., ge=0)
    visible_quantity: int = Field(..., ge=0)
    hidden_quantity: int = Field(0, ge=0)
    parent_order_id: str = Field("", description="Родительский ордер (пусто если нет)")
    is_child_order: bool = False

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def total_quantity(self) -> int:
        return self.visible_quantity + self.hidden_quantity

    def to_strings(self) -> list[str]:
        return [
            self.product_id,
            self.side.value,
            self.order_id,
            self.order_type.value,
            format_price(self.price),
            str(self.visible_quantity),
            str(self.hidden_quantity),
            self.parent_order_id,
            "YES" if self.is_child_order else "NO",
        ]
