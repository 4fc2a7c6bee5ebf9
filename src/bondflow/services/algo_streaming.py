"""
Algo Streaming Service — двусторонние котировки из внутренних цен

На каждое обновление Price (безусловно):
- bid = mid − spread / 2
- offer = mid + spread / 2
- visible чередуется по уровням (10 000 000, 20 000 000) по счётчику
- hidden = 2 * visible

Счётчик монотонный, глобальный на экземпляр сервиса.
"""

import logging
from dataclasses import dataclass
from typing import Final, Optional

from bondflow.core.domain.market_data import PricingSide
from bondflow.core.domain.pricing import Price, PriceStream, PriceStreamOrder
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.service import ProductKeyedStore

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================

DEFAULT_VISIBLE_QUANTITY_LEVELS: Final[tuple[int, ...]] = (10_000_000, 20_000_000)
DEFAULT_HIDDEN_MULTIPLIER: Final[int] = 2


@dataclass(frozen=True)
class StreamingConfig:
    """Конфигурация algo streaming."""

    visible_quantity_levels: tuple[int, ...] = DEFAULT_VISIBLE_QUANTITY_LEVELS
    hidden_multiplier: int = DEFAULT_HIDDEN_MULTIPLIER

    def __post_init__(self) -> None:
        if not self.visible_quantity_levels:
            raise ValueError("visible_quantity_levels cannot be empty")
        if any(level <= 0 for level in self.visible_quantity_levels):
            raise ValueError("visible_quantity_levels must be positive")
        if self.hidden_multiplier < 0:
            raise ValueError("hidden_multiplier must be non-negative")


# =============================================================================
# SERVICE
# =============================================================================


class AlgoStreamingService(ProductKeyedStore[PriceStream]):
    """Algo streaming: Price → PriceStream."""

    def __init__(self, reference_data: ReferenceData, config: Optional[StreamingConfig] = None):
        """
        Args:
            reference_data: справочник продуктов
            config: конфигурация (опционально, используется default)
        """
        super().__init__(reference_data)
        self.config = config or StreamingConfig()
        self._order_counter = 0

    @property
    def order_counter(self) -> int:
        return self._order_counter

    def on_price(self, price: Price) -> None:
        """Listener для PricingService."""
        self.publish_algorithmic_price(price)

    def publish_algorithmic_price(self, price: Price) -> PriceStream:
        """
        Построение и публикация двусторонней котировки.

        Args:
            price: внутренняя цена продукта

        Returns:
            Опубликованный PriceStream
        """
        half_spread = price.bid_offer_spread / 2
        levels = self.config.visible_quantity_levels
        visible = levels[self._order_counter % len(levels)]
        hidden = visible * self.config.hidden_multiplier
        self._order_counter += 1

        stream = PriceStream(
            product=price.product,
            bid_order=PriceStreamOrder(
                price=price.mid - half_spread,
                visible_quantity=visible,
                hidden_quantity=hidden,
                side=PricingSide.BID,
            ),
            offer_order=PriceStreamOrder(
                price=price.mid + half_spread,
                visible_quantity=visible,
                hidden_quantity=hidden,
                side=PricingSide.OFFER,
            ),
        )
        logger.debug("Stream %s: %d visible / %d hidden", stream.product_id, visible, hidden)

        self.set(stream.product_id, stream)
        self.notify(stream)
        return stream
