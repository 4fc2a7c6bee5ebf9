"""
Position — Позиция по продукту в разрезе books

Position хранит чистое количество со знаком для каждого book.
Агрегированная позиция (сумма по всем books) никогда не хранится
отдельно, а вычисляется при запросе.

Обновление инкрементальное: каждая сделка меняет ровно один book,
остальные books переносятся из предыдущей позиции без изменений.
Все изменения создают новый экземпляр.
"""

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from bondflow.core.domain.products import Product
from bondflow.core.domain.trade import Trade


class Position(BaseModel):
    """
    Модель позиции по продукту.

    Immutable модель (frozen=True). books — read-only отображение
    (MappingProxyType): listeners получают тот же экземпляр, что хранится
    в PositionService, и изменить его не могут.

    Порядок ключей books совпадает с порядком первого появления book
    в потоке сделок.
    """

    product: Product
    books: Mapping[str, int] = Field(
        default_factory=dict, validate_default=True, description="book → чистое количество"
    )

    model_config = {"frozen": True}

    @field_validator("books", mode="before")
    @classmethod
    def copy_books(cls, v: Any) -> Any:
        """Копия входного отображения: вызывающий не разделяет состояние с моделью"""
        if isinstance(v, Mapping):
            return dict(v)
        return v

    @field_validator("books")
    @classmethod
    def freeze_books(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def quantity(self, book: str) -> int:
        """
        Позиция в одном book.

        Args:
            book: Имя book

        Returns:
            Количество со знаком (0 если book не встречался)
        """
        return self.books.get(book, 0)

    def aggregate(self) -> int:
        """
        Агрегированная позиция по всем books.

        Returns:
            Сумма количеств по всем books
        """
        return sum(self.books.values())

    def with_trade(self, trade: Trade) -> "Position":
        """
        Новая позиция после применения сделки.

        Все books копируются из текущей позиции, book сделки получает
        ±quantity (BUY положительно, SELL отрицательно).

        Args:
            trade: Сделка по тому же продукту

        Returns:
            Новый экземпляр Position

        Raises:
            ValueError: Если сделка относится к другому продукту
        """
        if trade.product_id != self.product_id:
            raise ValueError(
                f"Trade {trade.trade_id} on {trade.product_id} cannot update position on {self.product_id}"
            )

        books = dict(self.books)
        books[trade.book] = books.get(trade.book, 0) + trade.signed_quantity
        return Position(product=self.product, books=books)

    def to_strings(self) -> list[str]:
        """Проекция для sink: product_id, затем пары (book, quantity) по имени book."""
        fields = [self.product_id]
        for book in sorted(self.books):
            fields.extend([book, str(self.books[book])])
        return fields
