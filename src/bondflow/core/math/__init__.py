"""
Core math для bondflow

Кодек цен в нотации 32-х долей (fixed-point, Decimal).
"""

from bondflow.core.math.prices import (
    PRICE_PATTERN,
    TICK_32,
    TICK_256,
    format_price,
    is_on_tick,
    parse_price,
)

__all__ = [
    "PRICE_PATTERN",
    "TICK_32",
    "TICK_256",
    "format_price",
    "is_on_tick",
    "parse_price",
]
