"""Delivery leg events — immutable facts about a single shipping leg.

Every event carries ``order_id`` so that order-level read models can be
rebuilt without loading the leg first.
"""

from protean.fields import DateTime, Identifier, String

from delivery.domain import delivery


@delivery.event(part_of="DeliveryLeg")
class LegOpened:
    """A leg was created for a confirmed order."""

    __version__ = 1

    leg_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier()
    leg_type = String(required=True)
    opened_at = DateTime(required=True)


@delivery.event(part_of="DeliveryLeg")
class LegMarkedReady:
    """A finished garment is ready to leave the tailor."""

    __version__ = 1

    leg_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_method = String(required=True)
    ready_at = DateTime(required=True)


@delivery.event(part_of="DeliveryLeg")
class LegDispatched:
    """A leg was handed to a courier."""

    __version__ = 1

    leg_id = Identifier(required=True)
    order_id = Identifier(required=True)
    leg_type = String(required=True)
    courier_name = String(required=True)
    tracking_id = String(required=True)
    dispatched_at = DateTime(required=True)


@delivery.event(part_of="DeliveryLeg")
class LegDelivered:
    """A leg reached its destination. Terminal."""

    __version__ = 1

    leg_id = Identifier(required=True)
    order_id = Identifier(required=True)
    leg_type = String(required=True)
    delivered_at = DateTime(required=True)
