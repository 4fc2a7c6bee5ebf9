"""Pricing Service — внутренние mid/spread цены, ключ product_id."""

import logging
from decimal import Decimal

from bondflow.core.domain.pricing import Price
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


class PricingService(ProductKeyedStore[Price]):
    """
    Текущая цена на продукт, перезаписывается каждым обновлением.

    Listeners: algo streaming (и внешние sinks, например GUI).
    """

    def __init__(self, reference_data: ReferenceData):
        super().__init__(
            reference_data,
            default_value=lambda product: Price(
                product=product, mid=Decimal(0), bid_offer_spread=Decimal(0)
            ),
        )

    def on_message(self, value: Price) -> None:
        logger.debug("Price %s mid=%s spread=%s", value.product_id, value.mid, value.bid_offer_spread)
        super().on_message(value)
