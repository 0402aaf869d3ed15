"""Assignment matcher — which orders and legs an actor may act on.

Sellers own the FABRIC leg of orders whose fabric they sold; tailors own the
GARMENT leg of orders assigned to them. Orders that do not match are left
out silently; an actor never learns about orders belonging to someone else.
"""

from collections.abc import Iterable

from protean.utils.globals import current_domain

from delivery.assignment.orders import OrderRef, normalize_id
from delivery.leg.leg import DeliveryLeg, LegType
from delivery.shared.booking import has_fabric_leg


def owns(actor_id: str, leg_type: str, order: OrderRef) -> bool:
    if LegType(leg_type) == LegType.FABRIC:
        return (
            has_fabric_leg(order.booking_type)
            and order.fabric_details is not None
            and order.seller_id is not None
            and order.seller_id == actor_id
        )
    return order.tailor_id is not None and order.tailor_id == actor_id


def orders_owned_by(actor_id, leg_type: str, orders: Iterable[OrderRef]) -> list[OrderRef]:
    actor_id = normalize_id(actor_id)
    if actor_id is None:
        return []
    return [order for order in orders if owns(actor_id, leg_type, order)]


def legs_owned_by(actor_id, leg_type: str, orders: Iterable[OrderRef]) -> list[DeliveryLeg]:
    """Legs of ``leg_type`` on the orders ``actor_id`` is responsible for."""
    owned = orders_owned_by(actor_id, leg_type, orders)
    if not owned:
        return []
    repo = current_domain.repository_for(DeliveryLeg)
    return repo.for_orders([order.order_id for order in owned], leg_type)
