"""Delivery bounded context — two-leg shipment tracking for tailoring orders.

Tracks the fabric leg (seller → tailor) and the garment leg (tailor →
customer) of an order, and answers tracking reads from either the per-leg
records or the older combined per-order records. Uses CQRS: legs and legacy
records are plain aggregates, and the tracking view is derived on read.
"""

from protean.domain import Domain

from delivery.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
delivery = Domain(name="delivery")
