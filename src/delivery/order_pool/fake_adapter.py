"""In-memory order pool for tests and local development."""

import threading

from delivery.assignment.orders import OrderRef
from delivery.order_pool.port import OrderPoolPort


class FakeOrderPool(OrderPoolPort):
    def __init__(self):
        self._orders: dict[str, OrderRef] = {}
        self._lock = threading.Lock()

    def register(self, payload: dict | OrderRef) -> OrderRef:
        """Add or replace an order. Accepts raw order documents."""
        order = payload if isinstance(payload, OrderRef) else OrderRef.from_payload(payload)
        with self._lock:
            self._orders[order.order_id] = order
        return order

    def reset(self):
        with self._lock:
            self._orders.clear()

    def list_orders(self) -> list[OrderRef]:
        with self._lock:
            return list(self._orders.values())
