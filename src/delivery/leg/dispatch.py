"""Leg dispatch and readiness — commands and handler.

The owning actor (seller for FABRIC, tailor for GARMENT) hands the leg to a
courier. Garment legs can be flagged ready for delivery first.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.exceptions import ConflictError, ValidationError
from delivery.leg.leg import DeliveryLeg, DeliveryMethod
from delivery.shared.locking import record_lock
from delivery.shared.store import store_errors

logger = structlog.get_logger(__name__)


@delivery.command(part_of="DeliveryLeg")
class DispatchLeg:
    """Hand a leg to a courier."""

    leg_id = Identifier(required=True)
    courier_name = String(max_length=100)
    tracking_id = String(max_length=255)
    delivery_method = String(max_length=50, choices=DeliveryMethod)


@delivery.command(part_of="DeliveryLeg")
class MarkLegReady:
    """Flag a garment leg as ready to leave the tailor."""

    leg_id = Identifier(required=True)
    delivery_method = String(required=True, max_length=50, choices=DeliveryMethod)


@delivery.command_handler(part_of=DeliveryLeg)
class DispatchHandler:
    @handle(DispatchLeg)
    def dispatch_leg(self, command):
        repo = current_domain.repository_for(DeliveryLeg)
        leg = repo.fetch(command.leg_id)
        leg.dispatch(
            courier_name=command.courier_name,
            tracking_id=command.tracking_id,
            delivery_method=command.delivery_method,
        )
        repo.add(leg)

    @handle(MarkLegReady)
    def mark_ready(self, command):
        repo = current_domain.repository_for(DeliveryLeg)
        leg = repo.fetch(command.leg_id)
        leg.mark_ready(command.delivery_method)
        repo.add(leg)


def dispatch_leg(
    leg_id: str,
    courier_name: str,
    tracking_id: str,
    delivery_method: str | None = None,
) -> DeliveryLeg:
    """Dispatch a leg. Concurrent calls on one leg yield one success and one ``ConflictError``."""
    try:
        with record_lock("leg", leg_id), store_errors("Delivery leg"):
            current_domain.process(
                DispatchLeg(
                    leg_id=leg_id,
                    courier_name=courier_name,
                    tracking_id=tracking_id,
                    delivery_method=delivery_method,
                ),
                asynchronous=False,
            )
    except (ValidationError, ConflictError) as exc:
        logger.warning("Dispatch rejected", leg_id=leg_id, error=str(exc))
        raise

    leg = current_domain.repository_for(DeliveryLeg).fetch(leg_id)
    logger.info(
        "Leg dispatched",
        leg_id=leg_id,
        order_id=str(leg.order_id),
        leg_type=leg.leg_type,
        courier_name=leg.courier_name,
    )
    return leg


def mark_leg_ready(leg_id: str, delivery_method: str) -> DeliveryLeg:
    """Mark a garment leg ready for delivery, serialized per leg id."""
    try:
        with record_lock("leg", leg_id), store_errors("Delivery leg"):
            current_domain.process(
                MarkLegReady(leg_id=leg_id, delivery_method=delivery_method),
                asynchronous=False,
            )
    except (ValidationError, ConflictError) as exc:
        logger.warning("Ready-for-delivery rejected", leg_id=leg_id, error=str(exc))
        raise

    return current_domain.repository_for(DeliveryLeg).fetch(leg_id)
