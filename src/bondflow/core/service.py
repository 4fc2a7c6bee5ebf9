"""
KeyedStore — базовая абстракция всех сервисов конвейера

Отображение key → последнее значение плюс список подписчиков.

Контракт:
- get(key) — последнее значение либо значение по умолчанию (не сохраняется)
- set(key, value) — безусловная перезапись, без уведомления
- subscribe(listener) — подписка (listener: любой callable от одного значения)
- notify(value) — синхронный вызов всех listeners в порядке подписки
- on_message(value) — путь обновления при ingestion: set + notify

Исключение в listener прерывает оставшуюся цепочку (fail-fast, без изоляции
между listeners) и пробрасывается вызывающему.

Listeners хранятся по ссылке: время их жизни — ответственность вызывающего.
Связывание выполняется один раз при старте и в runtime не меняется.
"""

import logging
from typing import Callable, Generic, Iterator, Optional, TypeVar

from bondflow.core.domain.products import Product
from bondflow.core.domain.reference_data import ReferenceData

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


# =============================================================================
# KEYED STORE
# =============================================================================


class KeyedStore(Generic[K, V]):
    """Generic keyed store с синхронным fan-out подписчикам."""

    def __init__(
        self,
        default_factory: Optional[Callable[[K], V]] = None,
        key_func: Optional[Callable[[V], K]] = None,
    ):
        """
        Args:
            default_factory: значение по умолчанию для отсутствующего ключа
                (None — get возвращает None)
            key_func: извлечение ключа из значения для on_message
        """
        self._data: dict[K, V] = {}
        self._listeners: list[Callable[[V], None]] = []
        self._default_factory = default_factory
        self._key_func = key_func

    @property
    def name(self) -> str:
        return type(self).__name__

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def get(self, key: K) -> V:
        """
        Последнее значение по ключу.

        Чтение ключа, который ещё не записывался, не является ошибкой:
        возвращается значение по умолчанию.

        Args:
            key: Ключ

        Returns:
            Сохранённое значение либо default_factory(key)
        """
        try:
            return self._data[key]
        except KeyError:
            if self._default_factory is None:
                return None  # type: ignore[return-value]
            return self._default_factory(key)

    def set(self, key: K, value: V) -> None:
        """Безусловная перезапись значения (без уведомления)."""
        self._data[key] = value

    def key_for(self, value: V) -> K:
        """
        Ключ для значения.

        Raises:
            TypeError: Если store создан без key_func и метод не переопределён
        """
        if self._key_func is None:
            raise TypeError(f"{self.name} has no key function")
        return self._key_func(value)

    def keys(self) -> list[K]:
        return list(self._data)

    def values(self) -> list[V]:
        return list(self._data.values())

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Callable[[V], None]) -> None:
        """
        Подписка listener на значения этого store.

        Args:
            listener: callable, принимающий одно значение (on_add контракт)
        """
        self._listeners.append(listener)
        logger.debug("%s: listener subscribed (total %d)", self.name, len(self._listeners))

    @property
    def listeners(self) -> tuple[Callable[[V], None], ...]:
        return tuple(self._listeners)

    def notify(self, value: V) -> None:
        """
        Синхронная рассылка значения всем listeners в порядке подписки.

        Исключение listener не перехватывается: оставшиеся listeners
        не вызываются.
        """
        for listener in self._listeners:
            listener(value)

    def on_message(self, value: V) -> None:
        """
        Путь обновления при ingestion: сохранить значение и уведомить listeners.

        Args:
            value: Новое значение
        """
        self.set(self.key_for(value), value)
        self.notify(value)


# =============================================================================
# PRODUCT KEYED STORE
# =============================================================================


class ProductKeyedStore(KeyedStore[str, V]):
    """
    KeyedStore, ключ которого — product_id значения.

    Значение по умолчанию строится из Product справочника, поэтому
    чтение неизвестного product_id fail closed (UnknownProductError),
    а чтение известного, но ещё не записанного — возвращает нулевое значение.
    """

    def __init__(
        self,
        reference_data: ReferenceData,
        default_value: Optional[Callable[[Product], V]] = None,
    ):
        """
        Args:
            reference_data: справочник продуктов
            default_value: нулевое значение для продукта (None — get вернёт None)
        """
        default_factory: Optional[Callable[[str], V]] = None
        if default_value is not None:
            default_factory = lambda product_id: default_value(reference_data.product(product_id))  # noqa: E731

        super().__init__(default_factory=default_factory)
        self.reference_data = reference_data

    def key_for(self, value: V) -> str:
        return value.product_id  # type: ignore[attr-defined]
