"""
Products — статические описания торгуемых инструментов

Product — неизменяемая идентичность инструмента:
- product_id (глобально уникальный, единственный join-ключ между сервисами)
- product_type (тег варианта: BOND / IRSWAP)
- атрибуты, специфичные для вида (купон, погашение, тенор и т.д.)

Создаётся один раз при загрузке справочных данных и никогда не изменяется.
Сервисы конвейера используют только product_id и product_type, поэтому
работают с любым вариантом Product.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class ProductType(str, Enum):
    """Вид продукта"""

    BOND = "BOND"
    IRSWAP = "IRSWAP"


class BondIdType(str, Enum):
    """Тип идентификатора облигации"""

    CUSIP = "CUSIP"
    ISIN = "ISIN"


class DayCountConvention(str, Enum):
    THIRTY_THREE_SIXTY = "30/360"
    ACT_THREE_SIXTY = "Act/360"


class PaymentFrequency(str, Enum):
    QUARTERLY = "Quarterly"
    SEMI_ANNUAL = "Semi-Annual"
    ANNUAL = "Annual"


class FloatingIndex(str, Enum):
    LIBOR = "LIBOR"
    EURIBOR = "EURIBOR"


class FloatingIndexTenor(str, Enum):
    TENOR_1M = "1m"
    TENOR_3M = "3m"
    TENOR_6M = "6m"
    TENOR_12M = "12m"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


class SwapType(str, Enum):
    STANDARD = "Standard"
    FORWARD = "Forward"
    IMM = "IMM"
    MAC = "MAC"
    BASIS = "Basis"


class SwapLegType(str, Enum):
    OUTRIGHT = "Outright"
    CURVE = "Curve"
    FLY = "Fly"


# =============================================================================
# PRODUCT VARIANTS
# =============================================================================


class Bond(BaseModel):
    """
    Облигация (US Treasury).

    Immutable модель (frozen=True).
    """

    product_type: Literal[ProductType.BOND] = ProductType.BOND
    product_id: str = Field(..., min_length=1, description="Идентификатор (CUSIP/ISIN)")
    bond_id_type: BondIdType = Field(BondIdType.CUSIP, description="Тип идентификатора")
    ticker: str = Field(..., min_length=1, description="Тикер (например, 'US10Y')")
    coupon: Decimal = Field(..., ge=0, description="Купон (доля, 0.0425 = 4.25%)")
    maturity_date: date = Field(..., description="Дата погашения")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.ticker} {self.coupon * 100:.3f} {self.maturity_date.isoformat()}"


class IRSwap(BaseModel):
    """
    Процентный своп.

    Immutable модель (frozen=True).
    """

    product_type: Literal[ProductType.IRSWAP] = ProductType.IRSWAP
    product_id: str = Field(..., min_length=1, description="Идентификатор свопа")
    fixed_leg_day_count: DayCountConvention
    floating_leg_day_count: DayCountConvention
    fixed_leg_payment_frequency: PaymentFrequency
    floating_index: FloatingIndex
    floating_index_tenor: FloatingIndexTenor
    effective_date: date
    termination_date: date
    currency: Currency
    term_years: int = Field(..., gt=0, description="Срок в годах")
    swap_type: SwapType = SwapType.STANDARD
    swap_leg_type: SwapLegType = SwapLegType.OUTRIGHT

    model_config = {"frozen": True}

    @field_validator("termination_date")
    @classmethod
    def validate_termination_after_effective(cls, v: date, info) -> date:
        """Проверка, что termination_date позже effective_date"""
        if "effective_date" in info.data:
            effective = info.data["effective_date"]
            if v <= effective:
                raise ValueError(f"termination_date {v} must be after effective_date {effective}")
        return v

    def __str__(self) -> str:
        return (
            f"{self.product_id} {self.currency.value} {self.term_years}y "
            f"{self.floating_index.value} {self.floating_index_tenor.value}"
        )


# Tagged union: конкретный вид определяется по product_type
Product = Annotated[Union[Bond, IRSwap], Field(discriminator="product_type")]
