"""Read paths for legs, by order and by owning actor. Reads take no locks."""

from protean.utils.globals import current_domain

from delivery.assignment.matcher import legs_owned_by
from delivery.exceptions import ValidationError
from delivery.leg.leg import DeliveryLeg, LegType
from delivery.order_pool import get_order_pool


def _checked_leg_type(leg_type: str | None) -> str | None:
    if leg_type is not None and leg_type not in {t.value for t in LegType}:
        raise ValidationError({"leg_type": [f"Unknown leg type: {leg_type}"]})
    return leg_type


def legs_for_order(order_id: str, leg_type: str | None = None) -> list[DeliveryLeg]:
    return current_domain.repository_for(DeliveryLeg).for_order(order_id, _checked_leg_type(leg_type))


def legs_for_actor(actor_id: str, leg_type: str, order_pool=None) -> list[DeliveryLeg]:
    """Legs the seller or tailor ``actor_id`` may dispatch or complete."""
    if leg_type is None:
        raise ValidationError({"leg_type": ["Leg type is required"]})
    _checked_leg_type(leg_type)
    pool = order_pool or get_order_pool()
    return legs_owned_by(actor_id, leg_type, pool.list_orders())
