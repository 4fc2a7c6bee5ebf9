"""
Prices — кодек цен US Treasury в нотации 32-х долей

Формат "W-FFE":
- W  — целая часть
- FF — 32-е доли (00..31)
- E  — восьмые доли 32-й (0..7), '+' означает 4/8

Примеры:
    "99-16+" = 99 + 16/32 + 4/256 = 99.515625
    "100-001" = 100 + 0/32 + 1/256 = 100.00390625

Цены хранятся как Decimal (fixed-point семантика): все значения сетки
1/256 представимы точно, поэтому round-trip не теряет точность.

Контракты:
- format_price(parse_price(s)) == s для любой корректной s
- parse_price(format_price(x)) == x для любого x на сетке 1/256
"""

import re
from decimal import Decimal
from typing import Final


# =============================================================================
# CONSTANTS
# =============================================================================

TICK_32: Final[Decimal] = Decimal(1) / Decimal(32)
TICK_256: Final[Decimal] = Decimal(1) / Decimal(256)

# '4' не допускается: восьмая 4/8 всегда записывается как '+'
_PRICE_RE: Final[re.Pattern[str]] = re.compile(r"^(\d+)-([0-2]\d|3[01])([0-35-7+])$")

PRICE_PATTERN: Final[str] = _PRICE_RE.pattern


# =============================================================================
# PARSE / FORMAT
# =============================================================================


def parse_price(text: str) -> Decimal:
    """
    Разбор строки цены "W-FFE" в Decimal.

    Args:
        text: Цена в нотации 32-х долей (например, '99-16+')

    Returns:
        W + FF/32 + E/256

    Raises:
        ValueError: Если строка не соответствует формату
    """
    match = _PRICE_RE.match(text.strip())
    if match is None:
        raise ValueError(f"Invalid fractional price: {text!r}")

    whole, thirty_seconds, eighth = match.groups()
    eighths = 4 if eighth == "+" else int(eighth)

    return Decimal(whole) + Decimal(int(thirty_seconds)) * TICK_32 + Decimal(eighths) * TICK_256


def format_price(price: Decimal | int | float) -> str:
    """
    Форматирование цены в нотацию "W-FFE".

    Значение округляется вниз до ближайшего 1/256.

    Args:
        price: Неотрицательная цена

    Returns:
        Строка вида '99-16+'

    Raises:
        ValueError: Для отрицательных или нечисловых значений
    """
    value = price if isinstance(price, Decimal) else Decimal(price)
    if not value.is_finite():
        raise ValueError(f"Price must be finite, got {price}")
    if value < 0:
        raise ValueError(f"Price must be non-negative, got {price}")

    whole = int(value)  # floor для неотрицательных
    fraction_256 = int((value - whole) * 256)
    thirty_seconds, eighths = divmod(fraction_256, 8)

    eighth = "+" if eighths == 4 else str(eighths)
    return f"{whole}-{thirty_seconds:02d}{eighth}"


def is_on_tick(price: Decimal) -> bool:
    """
    Проверка, что цена лежит на сетке 1/256.

    Args:
        price: Цена

    Returns:
        True если price * 256 — целое
    """
    return (price * 256) % 1 == 0
