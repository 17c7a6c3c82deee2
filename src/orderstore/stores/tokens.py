"""Payment token references kept on an order.

The set lives in one ``_payment_tokens`` attribute as a JSON list of ids.
Order and duplicates are preserved; falsy entries are dropped on read.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from orderstore.core.logging import get_logger
from orderstore.domain.order import Order
from orderstore.stores.attributes import AttributeRepository
from orderstore.stores.mapping import PAYMENT_TOKENS_KEY

logger = get_logger(__name__)


class PaymentTokenStore:
    def __init__(self, attributes: AttributeRepository) -> None:
        self.attributes = attributes

    def get_token_ids(self, order: Order) -> list[int]:
        raw = self.attributes.get(order.id, PAYMENT_TOKENS_KEY)
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("payment_tokens_unreadable", order_id=order.id, value=raw)
            return []
        if not isinstance(decoded, list):
            decoded = [decoded]
        return [int(token) for token in decoded if token]

    def set_token_ids(self, order: Order, token_ids: Iterable[int]) -> None:
        """Replace the stored list, even when unchanged."""
        ids = [int(token) for token in token_ids]
        self.attributes.upsert(order.id, PAYMENT_TOKENS_KEY, json.dumps(ids))


__all__ = [
    "PaymentTokenStore",
]
