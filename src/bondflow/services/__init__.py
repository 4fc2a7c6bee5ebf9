"""Сервисы конвейера: по одному KeyedStore на стадию."""

from bondflow.services.algo_execution import (
    DEFAULT_EXECUTION_THRESHOLD,
    AlgoExecutionService,
    ExecutionConfig,
    generate_order_id,
)
from bondflow.services.algo_streaming import AlgoStreamingService, StreamingConfig
from bondflow.services.execution import ExecutionService
from bondflow.services.inquiry import InquiryService
from bondflow.services.market_data import DEFAULT_BOOK_DEPTH, MarketDataService
from bondflow.services.position import PositionService
from bondflow.services.pricing import PricingService
from bondflow.services.risk import RiskService
from bondflow.services.streaming import StreamingService
from bondflow.services.trade_booking import DEFAULT_BOOKS, TradeBookingService

__all__ = [
    # Prices
    "PricingService",
    "AlgoStreamingService",
    "StreamingConfig",
    "StreamingService",
    # Market data / execution
    "MarketDataService",
    "DEFAULT_BOOK_DEPTH",
    "AlgoExecutionService",
    "ExecutionConfig",
    "DEFAULT_EXECUTION_THRESHOLD",
    "generate_order_id",
    "ExecutionService",
    # Trades / positions / risk
    "TradeBookingService",
    "DEFAULT_BOOKS",
    "PositionService",
    "RiskService",
    # Inquiries
    "InquiryService",
]
