"""Leg opening — commands and handler.

Called by order management when an order is confirmed. Opens the legs the
booking type needs, and later the garment leg of a fabric-only booking.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.exceptions import ConflictError, ValidationError
from delivery.leg.leg import DeliveryLeg, LegType
from delivery.shared.address import DeliveryAddress
from delivery.shared.booking import BookingType, has_fabric_leg, initial_leg_types
from delivery.shared.locking import record_lock
from delivery.shared.store import store_errors

logger = structlog.get_logger(__name__)


@delivery.command(part_of="DeliveryLeg")
class OpenDeliveryLegs:
    """Open every leg required by the order's booking type."""

    order_id = Identifier(required=True)
    booking_type = String(required=True, choices=BookingType)
    customer_id = Identifier()
    delivery_address = Text()  # JSON address dict


@delivery.command(part_of="DeliveryLeg")
class OpenDeliveryLeg:
    """Open a single leg, e.g. the garment leg of a fabric-only booking."""

    order_id = Identifier(required=True)
    booking_type = String(required=True, choices=BookingType)
    leg_type = String(required=True, choices=LegType)
    customer_id = Identifier()
    delivery_address = Text()  # JSON address dict


def _address_from(raw: str | None) -> DeliveryAddress | None:
    if not raw:
        return None
    data = json.loads(raw) if isinstance(raw, str) else raw
    return DeliveryAddress(**data)


@delivery.command_handler(part_of=DeliveryLeg)
class OpenLegsHandler:
    def _open(self, command, leg_type: str) -> str:
        if leg_type == LegType.FABRIC.value and not has_fabric_leg(command.booking_type):
            raise ValidationError({"leg_type": [f"A {command.booking_type} booking has no fabric leg"]})

        repo = current_domain.repository_for(DeliveryLeg)
        if repo.for_order(command.order_id, leg_type):
            raise ConflictError({"leg_type": [f"Order {command.order_id} already has a {leg_type} leg"]})

        leg = DeliveryLeg.open(
            order_id=command.order_id,
            leg_type=leg_type,
            customer_id=command.customer_id,
            delivery_address=_address_from(command.delivery_address),
        )
        repo.add(leg)
        logger.info(
            "Delivery leg opened",
            leg_id=str(leg.id),
            order_id=str(command.order_id),
            leg_type=leg_type,
        )
        return str(leg.id)

    @handle(OpenDeliveryLegs)
    def open_legs(self, command):
        return [self._open(command, leg_type) for leg_type in initial_leg_types(command.booking_type)]

    @handle(OpenDeliveryLeg)
    def open_leg(self, command):
        return self._open(command, command.leg_type)


def open_legs(
    order_id: str,
    booking_type: str,
    customer_id: str | None = None,
    delivery_address: dict | None = None,
) -> list[DeliveryLeg]:
    """Open the initial legs of a confirmed order, serialized per order id."""
    with record_lock("order", order_id), store_errors("Delivery leg"):
        leg_ids = current_domain.process(
            OpenDeliveryLegs(
                order_id=order_id,
                booking_type=booking_type,
                customer_id=customer_id,
                delivery_address=json.dumps(delivery_address) if delivery_address else None,
            ),
            asynchronous=False,
        )
    repo = current_domain.repository_for(DeliveryLeg)
    return [repo.fetch(leg_id) for leg_id in leg_ids]


def open_leg(
    order_id: str,
    booking_type: str,
    leg_type: str,
    customer_id: str | None = None,
    delivery_address: dict | None = None,
) -> DeliveryLeg:
    """Open one leg of an order, serialized per order id."""
    with record_lock("order", order_id), store_errors("Delivery leg"):
        leg_id = current_domain.process(
            OpenDeliveryLeg(
                order_id=order_id,
                booking_type=booking_type,
                leg_type=leg_type,
                customer_id=customer_id,
                delivery_address=json.dumps(delivery_address) if delivery_address else None,
            ),
            asynchronous=False,
        )
    return current_domain.repository_for(DeliveryLeg).fetch(leg_id)
