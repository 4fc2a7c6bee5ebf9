"""Streaming Service — публикация двусторонних котировок во внешние sinks."""

from bondflow.core.domain.pricing import PriceStream
from bondflow.core.service import ProductKeyedStore


class StreamingService(ProductKeyedStore[PriceStream]):
    """Последний PriceStream на продукт."""

    def on_algo_stream(self, stream: PriceStream) -> None:
        """Listener для AlgoStreamingService."""
        self.publish_price(stream)

    def publish_price(self, stream: PriceStream) -> None:
        """Сохранить котировку и разослать listeners."""
        self.on_message(stream)
