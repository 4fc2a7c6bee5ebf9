"""
Contract Validation Module

JSON Schema контракты строковых проекций, отправляемых во внешние sinks.
"""

from .validators import (
    RECORD_KINDS,
    ContractValidator,
    ExecutionOrderValidator,
    InquiryValidator,
    OrderBookValidator,
    PositionValidator,
    PriceStreamValidator,
    PriceValidator,
    PV01Validator,
    SchemaLoader,
    TradeValidator,
    validate_record,
    validator_for,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PriceValidator",
    "PriceStreamValidator",
    "ExecutionOrderValidator",
    "TradeValidator",
    "PositionValidator",
    "PV01Validator",
    "InquiryValidator",
    "OrderBookValidator",
    # Functions
    "validator_for",
    "validate_record",
    # Constants
    "RECORD_KINDS",
]
