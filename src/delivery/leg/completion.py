"""Leg completion — command and handler.

Records that a dispatched leg reached its destination (the tailor for a
fabric leg, the customer for a garment leg).
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.exceptions import ConflictError
from delivery.leg.leg import DeliveryLeg
from delivery.shared.locking import record_lock
from delivery.shared.store import store_errors

logger = structlog.get_logger(__name__)


@delivery.command(part_of="DeliveryLeg")
class CompleteLeg:
    """Record delivery of a dispatched leg."""

    leg_id = Identifier(required=True)


@delivery.command_handler(part_of=DeliveryLeg)
class CompletionHandler:
    @handle(CompleteLeg)
    def complete_leg(self, command):
        repo = current_domain.repository_for(DeliveryLeg)
        leg = repo.fetch(command.leg_id)
        leg.complete()
        repo.add(leg)


def complete_leg(leg_id: str) -> DeliveryLeg:
    """Complete a leg. A second call fails with ``ConflictError``."""
    try:
        with record_lock("leg", leg_id), store_errors("Delivery leg"):
            current_domain.process(CompleteLeg(leg_id=leg_id), asynchronous=False)
    except ConflictError as exc:
        logger.warning("Completion rejected", leg_id=leg_id, error=str(exc))
        raise

    leg = current_domain.repository_for(DeliveryLeg).fetch(leg_id)
    logger.info("Leg delivered", leg_id=leg_id, order_id=str(leg.order_id), leg_type=leg.leg_type)
    return leg
