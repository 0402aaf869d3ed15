"""Reconciliation adapter — one tracking answer per order across both schemas.

The first store holding data for an order wins: leg records are preferred,
the legacy record is the fallback, and the two are never combined. Mixed
schema orders are not supported.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from delivery.leg.leg import DeliveryLeg
from delivery.legacy.record import LegacyDeliveryRecord
from delivery.tracking.projection import (
    NotAvailable,
    TrackingProjection,
    project_legacy,
    project_legs,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LegSource:
    order_id: str
    legs: list[DeliveryLeg]


@dataclass(frozen=True)
class LegacySource:
    order_id: str
    record: LegacyDeliveryRecord


@dataclass(frozen=True)
class NoSource:
    order_id: str


TrackingSource = LegSource | LegacySource | NoSource


def resolve_source(order_id: str) -> TrackingSource:
    """Pick the store that answers for ``order_id``.

    Store failures propagate as ``UnavailableError``; only a genuine miss in
    both stores yields ``NoSource``.
    """
    order_id = str(order_id)
    legs = current_domain.repository_for(DeliveryLeg).for_order(order_id)
    if legs:
        return LegSource(order_id=order_id, legs=legs)

    record = current_domain.repository_for(LegacyDeliveryRecord).find(order_id)
    if record is not None:
        return LegacySource(order_id=order_id, record=record)

    return NoSource(order_id=order_id)


def project(source: TrackingSource) -> TrackingProjection | NotAvailable:
    match source:
        case LegSource(order_id=order_id, legs=legs):
            return project_legs(order_id, legs)
        case LegacySource(record=record):
            return project_legacy(record)
        case NoSource(order_id=order_id):
            return NotAvailable(order_id=order_id)
    raise TypeError(f"Unknown tracking source: {source!r}")


def get_tracking(order_id: str) -> TrackingProjection | NotAvailable:
    source = resolve_source(order_id)
    result = project(source)
    logger.debug(
        "Tracking resolved",
        order_id=str(order_id),
        source=getattr(result, "source", "none"),
        status=getattr(result, "overall_status", None),
    )
    return result


def tracking_for_customer(customer_id: str) -> list[TrackingProjection]:
    """One projection per order of the customer, each resolved on its own."""
    customer_id = str(customer_id)
    order_ids = [str(leg.order_id) for leg in current_domain.repository_for(DeliveryLeg).for_customer(customer_id)]
    order_ids += [
        str(record.order_id)
        for record in current_domain.repository_for(LegacyDeliveryRecord).for_customer(customer_id)
    ]

    projections = []
    for order_id in dict.fromkeys(order_ids):
        result = get_tracking(order_id)
        if isinstance(result, TrackingProjection):
            projections.append(result)
    return projections
