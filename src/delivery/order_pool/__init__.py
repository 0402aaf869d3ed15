"""Order pool abstraction — where the delivery context reads order ownership."""

import os

_order_pool_instance = None


def get_order_pool():
    """Return the configured order pool adapter (singleton).

    Uses FakeOrderPool by default. Select another adapter with the
    ORDER_POOL_ADAPTER environment variable.
    """
    global _order_pool_instance
    if _order_pool_instance is None:
        adapter = os.environ.get("ORDER_POOL_ADAPTER", "fake")
        if adapter == "fake":
            from delivery.order_pool.fake_adapter import FakeOrderPool

            _order_pool_instance = FakeOrderPool()
        else:
            raise ValueError(f"Unknown order pool adapter: {adapter}")
    return _order_pool_instance


def reset_order_pool():
    """Reset the order pool singleton (useful for testing)."""
    global _order_pool_instance
    _order_pool_instance = None
