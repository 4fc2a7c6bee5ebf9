"""
ReferenceData — справочник продуктов и PV01

Явный объект, создаваемый один раз при старте и передаваемый в
компоненты, которым он нужен (никакого глобального состояния).

Оба справочника fail closed: неизвестный идентификатор →
UnknownProductError с этим идентификатором.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from bondflow.core.domain.products import Bond, BondIdType, Product
from bondflow.core.errors import UnknownProductError


# =============================================================================
# US TREASURIES (on-the-run)
# =============================================================================

# (cusip, ticker, coupon, maturity, pv01 на единицу номинала)
_US_TREASURIES: tuple[tuple[str, str, str, date, str], ...] = (
    ("91282CLY5", "US2Y", "0.0425", date(2026, 11, 30), "0.1854"),
    ("91282CMB4", "US3Y", "0.0400", date(2027, 12, 15), "0.2738"),
    ("91282CMA6", "US5Y", "0.04125", date(2029, 11, 30), "0.4389"),
    ("91282CLZ2", "US7Y", "0.04125", date(2031, 11, 30), "0.5911"),
    ("91282CLW9", "US10Y", "0.0425", date(2034, 11, 15), "0.7910"),
    ("912810UF3", "US20Y", "0.04625", date(2044, 11, 15), "1.2829"),
    ("912810UE6", "US30Y", "0.04500", date(2054, 11, 15), "1.5956"),
)


class ReferenceData:
    """
    Справочник: product_id → Product и product_id → PV01 на единицу.

    Заполняется на этапе setup через register(); после связывания
    конвейера не изменяется.
    """

    def __init__(self, products: Iterable[tuple[Product, Optional[Decimal]]] = ()):
        """
        Args:
            products: пары (product, pv01 на единицу или None)
        """
        self._products: dict[str, Product] = {}
        self._pv01: dict[str, Decimal] = {}

        for product, pv01 in products:
            self.register(product, pv01)

    @classmethod
    def us_treasuries(cls) -> "ReferenceData":
        """
        Справочник семи on-the-run US Treasuries (2Y ... 30Y).

        Returns:
            Заполненный ReferenceData
        """
        return cls(
            (
                Bond(
                    product_id=cusip,
                    bond_id_type=BondIdType.CUSIP,
                    ticker=ticker,
                    coupon=Decimal(coupon),
                    maturity_date=maturity,
                ),
                Decimal(pv01),
            )
            for cusip, ticker, coupon, maturity, pv01 in _US_TREASURIES
        )

    def register(self, product: Product, pv01: Optional[Decimal] = None) -> None:
        """
        Регистрация продукта (и его PV01, если известен).

        Args:
            product: Продукт
            pv01: PV01 на единицу (None — продукт без риска в справочнике)
        """
        self._products[product.product_id] = product
        if pv01 is not None:
            self._pv01[product.product_id] = pv01

    def product(self, product_id: str) -> Product:
        """
        Поиск продукта.

        Raises:
            UnknownProductError: Если продукт не зарегистрирован
        """
        try:
            return self._products[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    def pv01(self, product_id: str) -> Decimal:
        """
        PV01 на единицу для продукта.

        Raises:
            UnknownProductError: Если PV01 для продукта не зарегистрирован
        """
        try:
            return self._pv01[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    @property
    def product_ids(self) -> list[str]:
        return list(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)
