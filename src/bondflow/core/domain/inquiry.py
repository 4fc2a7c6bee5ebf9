"""
Inquiry — клиентский запрос котировки

Конвейер только принимает и распространяет inquiries; машина состояний
accept/quote/reject является внешней и здесь не реализуется.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from bondflow.core.domain.products import Product
from bondflow.core.domain.trade import Side
from bondflow.core.math.prices import format_price


class InquiryState(str, Enum):
    """Состояние inquiry"""

    RECEIVED = "RECEIVED"
    QUOTED = "QUOTED"
    DONE = "DONE"
    REJECTED = "REJECTED"
    CUSTOMER_REJECTED = "CUSTOMER_REJECTED"


class Inquiry(BaseModel):
    """
    Модель inquiry.

    Immutable модель (frozen=True), ключ — inquiry_id.
    """

    inquiry_id: str = Field(..., min_length=1)
    product: Product
    side: Side
    quantity: int = Field(..., ge=0)
    price: Decimal = Field(Decimal(0), ge=0, description="Цена ответа (0 пока не котировано)")
    state: InquiryState

    model_config = {"frozen": True}

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def to_strings(self) -> list[str]:
        return [
            self.inquiry_id,
            self.product_id,
            self.side.value,
            str(self.quantity),
            format_price(self.price),
            self.state.value,
        ]
