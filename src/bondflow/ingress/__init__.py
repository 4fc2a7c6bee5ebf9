"""Ingress: построчные connectors, отправляющие записи в сервисы."""

from bondflow.ingress.connectors import (
    InquiryConnector,
    LineConnector,
    MarketDataConnector,
    PriceConnector,
    TradeConnector,
)

__all__ = [
    "LineConnector",
    "PriceConnector",
    "TradeConnector",
    "MarketDataConnector",
    "InquiryConnector",
]
