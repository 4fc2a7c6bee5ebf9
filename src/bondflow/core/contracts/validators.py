"""
Sink Record Contract Validators

Валидация строковых проекций (to_strings) доменных моделей против
JSON Schema контрактов (Draft 2020-12).

Схемы (schema/*.json, поставляются вместе с пакетом):
- price.json
- price_stream.json
- execution_order.json
- trade.json
- position.json
- pv01.json
- inquiry.json
- order_book.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Final, Iterator, List, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

RECORD_KINDS: Final[tuple[str, ...]] = (
    "price",
    "price_stream",
    "execution_order",
    "trade",
    "position",
    "pv01",
    "inquiry",
    "order_book",
)


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы ищутся в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'trade')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одной проекции против её JSON Schema."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        """
        Args:
            schema_name: Имя схемы (одно из RECORD_KINDS)
            loader: Загрузчик схем (по умолчанию общий для модуля)
        """
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, row: List[str]) -> None:
        """
        Raises:
            ValidationError: Если строка не соответствует схеме
        """
        self.validator.validate(row)

    def is_valid(self, row: List[str]) -> bool:
        return self.validator.is_valid(row)

    def iter_errors(self, row: List[str]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(row)


class PriceValidator(ContractValidator):
    def __init__(self):
        super().__init__("price")


class PriceStreamValidator(ContractValidator):
    def __init__(self):
        super().__init__("price_stream")


class ExecutionOrderValidator(ContractValidator):
    def __init__(self):
        super().__init__("execution_order")


class TradeValidator(ContractValidator):
    def __init__(self):
        super().__init__("trade")


class PositionValidator(ContractValidator):
    """Проверяет также, что после product_id идут пары (book, quantity)."""

    def __init__(self):
        super().__init__("position")

    def iter_errors(self, row: List[str]) -> Iterator[ValidationError]:
        yield from super().iter_errors(row)
        if len(row) % 2 != 1:
            yield ValidationError(f"expected (book, quantity) pairs after product id, got {len(row) - 1} fields")
            return
        for quantity in row[2::2]:
            if not quantity.lstrip("-").isdigit():
                yield ValidationError(f"{quantity!r} is not a signed integer quantity")

    def validate(self, row: List[str]) -> None:
        for error in self.iter_errors(row):
            raise error

    def is_valid(self, row: List[str]) -> bool:
        return next(self.iter_errors(row), None) is None


class PV01Validator(ContractValidator):
    def __init__(self):
        super().__init__("pv01")


class InquiryValidator(ContractValidator):
    def __init__(self):
        super().__init__("inquiry")


class OrderBookValidator(ContractValidator):
    def __init__(self):
        super().__init__("order_book")


_VALIDATOR_TYPES: Final[Dict[str, type]] = {
    "price": PriceValidator,
    "price_stream": PriceStreamValidator,
    "execution_order": ExecutionOrderValidator,
    "trade": TradeValidator,
    "position": PositionValidator,
    "pv01": PV01Validator,
    "inquiry": InquiryValidator,
    "order_book": OrderBookValidator,
}


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validator_for(kind: str) -> ContractValidator:
    """
    Валидатор для вида записи.

    Raises:
        KeyError: Если вид записи неизвестен
    """
    try:
        validator_type = _VALIDATOR_TYPES[kind]
    except KeyError:
        raise KeyError(f"Unknown record kind: {kind!r} (expected one of {', '.join(RECORD_KINDS)})") from None
    return validator_type()


def validate_record(kind: str, row: List[str]) -> None:
    """
    Валидация строковой проекции записи.

    Args:
        kind: Вид записи (например, 'trade')
        row: Результат to_strings()

    Raises:
        ValidationError: Если строка не соответствует контракту
        KeyError: Если вид записи неизвестен
    """
    validator_for(kind).validate(row)
