"""
Trading Pipeline — связывание сервисов при старте

Граф (ацикличный, связывается один раз):

    prices      → PricingService → AlgoStreamingService → StreamingService
    market data → MarketDataService → AlgoExecutionService → ExecutionService
                → TradeBookingService → PositionService → RiskService
    trades      → TradeBookingService (та же цепочка)
    inquiries   → InquiryService

Внешние sinks подписываются через attach_sink(service_name, sink).
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Final, Optional

from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.service import KeyedStore
from bondflow.ingress.connectors import InquiryConnector, MarketDataConnector, PriceConnector, TradeConnector
from bondflow.services.algo_execution import (
    DEFAULT_EXECUTION_THRESHOLD,
    AlgoExecutionService,
    ExecutionConfig,
    generate_order_id,
)
from bondflow.services.algo_streaming import (
    DEFAULT_HIDDEN_MULTIPLIER,
    DEFAULT_VISIBLE_QUANTITY_LEVELS,
    AlgoStreamingService,
    StreamingConfig,
)
from bondflow.services.execution import ExecutionService
from bondflow.services.inquiry import InquiryService
from bondflow.services.market_data import DEFAULT_BOOK_DEPTH, MarketDataService
from bondflow.services.position import PositionService
from bondflow.services.pricing import PricingService
from bondflow.services.risk import RiskService
from bondflow.services.streaming import StreamingService
from bondflow.services.trade_booking import DEFAULT_BOOKS, TradeBookingService

logger = logging.getLogger(__name__)


SERVICE_NAMES: Final[tuple[str, ...]] = (
    "pricing",
    "algo_streaming",
    "streaming",
    "market_data",
    "algo_execution",
    "execution",
    "trade_booking",
    "position",
    "risk",
    "inquiry",
)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class PipelineConfig:
    """
    Конфигурация конвейера.

    Attributes:
        book_depth: уровней стакана на сторону
        execution_threshold: максимальный спред для исполнения
        visible_quantity_levels: чередуемые visible количества котировок
        hidden_multiplier: hidden = visible * hidden_multiplier
        books: ротация books для сделок из исполнений
    """

    book_depth: int = DEFAULT_BOOK_DEPTH
    execution_threshold: Decimal = DEFAULT_EXECUTION_THRESHOLD
    visible_quantity_levels: tuple[int, ...] = DEFAULT_VISIBLE_QUANTITY_LEVELS
    hidden_multiplier: int = DEFAULT_HIDDEN_MULTIPLIER
    books: tuple[str, ...] = DEFAULT_BOOKS

    @property
    def execution(self) -> ExecutionConfig:
        return ExecutionConfig(execution_threshold=self.execution_threshold)

    @property
    def streaming(self) -> StreamingConfig:
        return StreamingConfig(
            visible_quantity_levels=self.visible_quantity_levels,
            hidden_multiplier=self.hidden_multiplier,
        )


# =============================================================================
# PIPELINE
# =============================================================================


class TradingPipeline:
    """Все сервисы и connectors, связанные в один граф."""

    def __init__(
        self,
        reference_data: Optional[ReferenceData] = None,
        config: Optional[PipelineConfig] = None,
        order_id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            reference_data: справочник (по умолчанию US treasuries)
            config: конфигурация (опционально, используется default)
            order_id_factory: генератор order_id для algo execution
        """
        self.reference_data = ReferenceData.us_treasuries() if reference_data is None else reference_data
        self.config = config or PipelineConfig()

        # Prices
        self.pricing = PricingService(self.reference_data)
        self.algo_streaming = AlgoStreamingService(self.reference_data, self.config.streaming)
        self.streaming = StreamingService(self.reference_data)

        # Market data → execution → trades → positions → risk
        self.market_data = MarketDataService(self.reference_data, book_depth=self.config.book_depth)
        self.algo_execution = AlgoExecutionService(
            self.reference_data,
            self.config.execution,
            order_id_factory=order_id_factory or generate_order_id,
        )
        self.execution = ExecutionService(self.reference_data)
        self.trade_booking = TradeBookingService(books=self.config.books)
        self.position = PositionService(self.reference_data)
        self.risk = RiskService(self.reference_data)

        # Inquiries
        self.inquiry = InquiryService()

        self._wire()

        # Ingress
        self.price_connector = PriceConnector(self.pricing, self.reference_data)
        self.market_data_connector = MarketDataConnector(self.market_data, self.reference_data)
        self.trade_connector = TradeConnector(self.trade_booking, self.reference_data)
        self.inquiry_connector = InquiryConnector(self.inquiry, self.reference_data)

    def _wire(self) -> None:
        self.pricing.subscribe(self.algo_streaming.on_price)
        self.algo_streaming.subscribe(self.streaming.on_algo_stream)

        self.market_data.subscribe(self.algo_execution.on_order_book)
        self.algo_execution.subscribe(self.execution.on_algo_execution)
        self.execution.subscribe(self.trade_booking.on_execution)
        self.trade_booking.subscribe(self.position.on_trade)
        self.position.subscribe(self.risk.on_position)

        logger.info("Pipeline wired: %d services, %d products", len(SERVICE_NAMES), len(self.reference_data))

    def service(self, name: str) -> KeyedStore[Any, Any]:
        """
        Сервис по имени.

        Raises:
            KeyError: Если имя неизвестно
        """
        if name not in SERVICE_NAMES:
            raise KeyError(f"Unknown service: {name!r} (expected one of {', '.join(SERVICE_NAMES)})")
        return getattr(self, name)

    def attach_sink(self, service_name: str, sink: Callable[[Any], None]) -> None:
        """
        Подписка внешнего sink на сервис.

        Sinks подписываются после внутренних связей, поэтому получают
        значение после того, как оно прошло дальше по цепочке.
        """
        self.service(service_name).subscribe(sink)
        logger.info("Sink attached to %s", service_name)
