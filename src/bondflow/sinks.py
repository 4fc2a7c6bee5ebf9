"""
Sinks — внешние получатели записей конвейера

Sink — любой callable от одного значения, подписанный на сервис.
ProjectionSink проецирует значение через to_strings(), при необходимости
валидирует проекцию против контракта и накапливает строки в порядке
поступления.
"""

import logging
from typing import Any, Optional

from bondflow.core.contracts import ContractValidator, validator_for

logger = logging.getLogger(__name__)


class ProjectionSink:
    """Накопитель строковых проекций."""

    def __init__(self, kind: str, validate: bool = True):
        """
        Args:
            kind: вид записи (имя контракта, например 'trade')
            validate: проверять каждую проекцию против контракта

        Raises:
            KeyError: Если validate=True и вид записи неизвестен
        """
        self.kind = kind
        self.rows: list[list[str]] = []
        self._validator: Optional[ContractValidator] = validator_for(kind) if validate else None

    def __call__(self, value: Any) -> None:
        row = value.to_strings()
        if self._validator is not None:
            self._validator.validate(row)
        logger.debug("%s sink: %s", self.kind, ",".join(row))
        self.rows.append(row)

    def __len__(self) -> int:
        return len(self.rows)

    def clear(self) -> None:
        self.rows.clear()
