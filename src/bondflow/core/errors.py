"""
Таксономия ошибок конвейера.

- UnknownProductError — неизвестный идентификатор продукта в справочнике
  (hard failure, без retry, прерывает текущую строку ingestion)
- MalformedRecordError — неверное число полей / нечисловое значение /
  неверная ценовая строка при ingestion (прерывает batch)

Чтение ключа, который ещё не записывался, ошибкой НЕ является:
KeyedStore.get возвращает значение по умолчанию.
"""


class BondflowError(Exception):
    """Базовое исключение bondflow."""


class UnknownProductError(BondflowError, LookupError):
    """Продукт не зарегистрирован в справочных данных."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Unknown product identifier: {product_id!r}")


class MalformedRecordError(BondflowError, ValueError):
    """Некорректная входная запись при ingestion.

    Attributes:
        source: имя источника (prices, trades, market_data, inquiries)
        line_no: номер строки (с 1)
        line: исходная строка
        reason: причина отказа
    """

    def __init__(self, source: str, line_no: int, line: str, reason: str):
        self.source = source
        self.line_no = line_no
        self.line = line
        self.reason = reason
        super().__init__(f"{source}:{line_no}: {reason} ({line!r})")
