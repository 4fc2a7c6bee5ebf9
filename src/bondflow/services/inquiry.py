"""Inquiry Service — клиентские запросы котировок, ключ inquiry_id."""

import logging

from bondflow.core.domain.inquiry import Inquiry
from bondflow.core.service import KeyedStore

logger = logging.getLogger(__name__)


class InquiryService(KeyedStore[str, Inquiry]):
    """Последнее состояние каждого inquiry."""

    def __init__(self) -> None:
        super().__init__(key_func=lambda inquiry: inquiry.inquiry_id)

    def on_message(self, value: Inquiry) -> None:
        logger.debug("Inquiry %s on %s: %s", value.inquiry_id, value.product_id, value.state.value)
        super().on_message(value)
