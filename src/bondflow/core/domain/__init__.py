"""
Domain models and value objects.

Contains fundamental domain entities like Product, OrderBook, Price, Trade,
Position, PV01 and the ReferenceData lookup tables.
"""

from bondflow.core.domain.execution import ExecutionOrder, Market, OrderType
from bondflow.core.domain.inquiry import Inquiry, InquiryState
from bondflow.core.domain.market_data import BidOffer, Order, OrderBook, PricingSide
from bondflow.core.domain.position import Position
from bondflow.core.domain.pricing import Price, PriceStream, PriceStreamOrder
from bondflow.core.domain.products import (
    Bond,
    BondIdType,
    Currency,
    DayCountConvention,
    FloatingIndex,
    FloatingIndexTenor,
    IRSwap,
    PaymentFrequency,
    Product,
    ProductType,
    SwapLegType,
    SwapType,
)
from bondflow.core.domain.reference_data import ReferenceData
from bondflow.core.domain.risk import PV01, BucketedSector
from bondflow.core.domain.trade import Side, Trade

__all__ = [
    # Products
    "Product",
    "ProductType",
    "Bond",
    "BondIdType",
    "IRSwap",
    "DayCountConvention",
    "PaymentFrequency",
    "FloatingIndex",
    "FloatingIndexTenor",
    "Currency",
    "SwapType",
    "SwapLegType",
    # Market data
    "PricingSide",
    "Order",
    "BidOffer",
    "OrderBook",
    # Pricing / streaming
    "Price",
    "PriceStreamOrder",
    "PriceStream",
    # Execution
    "OrderType",
    "Market",
    "ExecutionOrder",
    # Trade / position / risk
    "Side",
    "Trade",
    "Position",
    "PV01",
    "BucketedSector",
    # Inquiry
    "Inquiry",
    "InquiryState",
    # Reference data
    "ReferenceData",
]
